"""Database models for the invoice numbering service."""

from invoice_numbering.models.base import BaseModel
from invoice_numbering.models.enums import (
    NEVER_PERIOD_KEY,
    UserRole,
    ResetPeriod,
    SchemeStatus,
    AuditAction,
)
from invoice_numbering.models.seller import Seller
from invoice_numbering.models.department import Department
from invoice_numbering.models.user import User
from invoice_numbering.models.numbering_scheme import NumberingScheme
from invoice_numbering.models.invoice_counter import InvoiceCounter
from invoice_numbering.models.invoice import Invoice
from invoice_numbering.models.audit import AuditLog

__all__ = [
    # Base
    "BaseModel",
    # Enums
    "NEVER_PERIOD_KEY",
    "UserRole",
    "ResetPeriod",
    "SchemeStatus",
    "AuditAction",
    # Models
    "Seller",
    "Department",
    "User",
    "NumberingScheme",
    "InvoiceCounter",
    "Invoice",
    "AuditLog",
]
