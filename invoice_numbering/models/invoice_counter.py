"""Per-seller, per-period invoice sequence counter."""

from sqlalchemy import Column, Enum, ForeignKey, Index, Integer, String, UniqueConstraint

from invoice_numbering.models.base import BaseModel
from invoice_numbering.models.enums import ResetPeriod


class InvoiceCounter(BaseModel):
    """
    Last issued sequence number for one (seller, period key) bucket.

    Rows are created on the first issuance in a bucket, incremented on
    every later one and never deleted.

    Attributes:
        period_key: Bucket key, e.g. "2026-02", "2026" or "NEVER"
        last_value: Last sequence number handed out; never decreases
        base_offset: Numbers consumed before this system took over the bucket
        last_invoice_number: Last rendered invoice number, for display
    """

    __tablename__ = "invoice_counters"

    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False)
    reset_period = Column(Enum(ResetPeriod), nullable=False)
    period_key = Column(String(32), nullable=False)
    last_value = Column(Integer, nullable=False, default=0)
    base_offset = Column(Integer, nullable=False, default=0)
    last_invoice_number = Column(String(128), nullable=True)

    __table_args__ = (
        UniqueConstraint("seller_id", "period_key", name="uq_invoice_counter_scope"),
        Index("idx_invoice_counter_seller", "seller_id"),
    )

    def __repr__(self):
        return (
            f"<InvoiceCounter(seller_id={self.seller_id}, "
            f"period_key='{self.period_key}', last_value={self.last_value})>"
        )
