"""Pydantic schemas for request/response validation."""

from invoice_numbering.schemas.numbering_scheme import (
    NumberingSchemeCreate,
    NumberingSchemeResponse,
    TemplatePreviewRequest,
    TemplatePreviewResponse,
)
from invoice_numbering.schemas.invoice_number import (
    InvoiceNumberRequest,
    InvoiceNumberResponse,
)
from invoice_numbering.schemas.counter import (
    CounterStatusResponse,
    CounterObservabilityResponse,
)

__all__ = [
    "NumberingSchemeCreate",
    "NumberingSchemeResponse",
    "TemplatePreviewRequest",
    "TemplatePreviewResponse",
    "InvoiceNumberRequest",
    "InvoiceNumberResponse",
    "CounterStatusResponse",
    "CounterObservabilityResponse",
]
