"""Seller (tenant) model."""

from sqlalchemy import Boolean, Column, Index, String
from sqlalchemy.orm import relationship, validates

from invoice_numbering.models.base import BaseModel


class Seller(BaseModel):
    """
    Seller issuing invoices under its own numbering sequences.

    Attributes:
        name: Legal or trading name
        tax_id: Optional tax registration number
        is_active: Deactivated sellers keep their counters for audit
    """

    __tablename__ = "sellers"

    name = Column(String(255), nullable=False)
    tax_id = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    departments = relationship(
        "Department", back_populates="seller", cascade="all, delete-orphan"
    )
    numbering_schemes = relationship("NumberingScheme", back_populates="seller")

    __table_args__ = (Index("idx_seller_active", "is_active"),)

    @validates("name")
    def validate_name(self, key, value):
        """Validate seller name is not empty."""
        if not value or not value.strip():
            raise ValueError("Seller name cannot be empty")
        return value.strip()

    def deactivate(self):
        """Deactivate seller. Counters and invoices are kept."""
        self.is_active = False

    def __repr__(self):
        return f"<Seller(id={self.id}, name='{self.name}', active={self.is_active})>"
