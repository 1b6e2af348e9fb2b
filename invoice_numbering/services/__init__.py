"""Services for the invoice numbering system."""

from .base import BaseService
from .template_parser import TemplateParser, template_parser
from .counter_service import (
    CounterAuditRow,
    InvoiceCounterService,
    counter_service,
    period_key_for,
)
from .scheme_service import EffectiveScheme, NumberingSchemeService, scheme_service
from .invoice_number_service import (
    GeneratedInvoiceNumber,
    InvoiceNumberService,
    invoice_number_service,
)

__all__ = [
    "BaseService",
    "TemplateParser",
    "template_parser",
    "CounterAuditRow",
    "InvoiceCounterService",
    "counter_service",
    "period_key_for",
    "EffectiveScheme",
    "NumberingSchemeService",
    "scheme_service",
    "GeneratedInvoiceNumber",
    "InvoiceNumberService",
    "invoice_number_service",
]
