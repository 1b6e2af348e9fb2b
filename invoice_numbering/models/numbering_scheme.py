"""Numbering scheme model: template plus reset period for a seller."""

from sqlalchemy import (
    Column,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from invoice_numbering.models.base import BaseModel
from invoice_numbering.models.enums import ResetPeriod, SchemeStatus


class NumberingScheme(BaseModel):
    """
    Invoice numbering configuration for a seller.

    A seller keeps every scheme it ever had. The scheme applied to an
    invoice is the newest non-draft one whose effective_from is on or
    before the issue date, so backdated invoices keep the numbering that
    was in force at the time. Changing a scheme never renumbers issued
    invoices.

    Attributes:
        template: Template string, e.g. "INV-{YYYY}-{SEQ:4}"
        reset_period: When the sequence restarts from 1
        effective_from: First issue date the scheme applies to
        version: Revision among schemes sharing the same effective_from
        status: ACTIVE, ARCHIVED or DRAFT
    """

    __tablename__ = "numbering_schemes"

    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False)
    template = Column(String(64), nullable=False)
    reset_period = Column(Enum(ResetPeriod), nullable=False)
    effective_from = Column(Date, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    status = Column(Enum(SchemeStatus), nullable=False, default=SchemeStatus.ACTIVE)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    seller = relationship("Seller", back_populates="numbering_schemes")
    created_by = relationship("User")

    __table_args__ = (
        UniqueConstraint(
            "seller_id",
            "effective_from",
            "version",
            name="uq_scheme_seller_effective_version",
        ),
        Index("idx_scheme_seller_effective", "seller_id", "effective_from"),
    )

    def archive(self):
        """Mark scheme as historical. It stays effective for backdated invoices."""
        if self.status == SchemeStatus.ARCHIVED:
            raise ValueError("Scheme is already archived")
        self.status = SchemeStatus.ARCHIVED

    def __repr__(self):
        return (
            f"<NumberingScheme(id={self.id}, seller_id={self.seller_id}, "
            f"template='{self.template}', reset={self.reset_period.value}, "
            f"status={self.status.value})>"
        )
