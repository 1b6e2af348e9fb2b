"""Ledger of issued invoice numbers."""

from sqlalchemy import (
    Column,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
)

from invoice_numbering.models.base import BaseModel
from invoice_numbering.models.enums import ResetPeriod


class Invoice(BaseModel):
    """
    One issued invoice number.

    Counting these rows per bucket gives the invoice count that the
    counter audit compares against InvoiceCounter.last_value.
    """

    __tablename__ = "invoices"

    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False)
    scheme_id = Column(Integer, ForeignKey("numbering_schemes.id"), nullable=True)
    department_code = Column(String(10), nullable=True)
    issue_date = Column(Date, nullable=False)
    reset_period = Column(Enum(ResetPeriod), nullable=False)
    period_key = Column(String(32), nullable=False)
    sequence_number = Column(Integer, nullable=False)
    invoice_number = Column(String(128), nullable=False)

    __table_args__ = (
        Index("idx_invoice_seller_number", "seller_id", "invoice_number"),
        Index("idx_invoice_seller_period", "seller_id", "period_key"),
    )

    def __repr__(self):
        return f"<Invoice(id={self.id}, seller_id={self.seller_id}, number='{self.invoice_number}')>"
