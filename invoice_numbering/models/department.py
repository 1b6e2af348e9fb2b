"""Department model used by the {DEPT} template tokens."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship, validates

from invoice_numbering.models.base import BaseModel

MAX_CODE_LENGTH = 10


class Department(BaseModel):
    """Department within a seller, identified by a short code."""

    __tablename__ = "departments"

    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False)
    code = Column(String(MAX_CODE_LENGTH), nullable=False)
    name = Column(String(100), nullable=False)
    active = Column(Boolean, default=True, nullable=False)

    seller = relationship("Seller", back_populates="departments")

    __table_args__ = (
        UniqueConstraint("seller_id", "code", name="uq_department_seller_code"),
    )

    @validates("code")
    def validate_code(self, key, value):
        """Normalize the code to uppercase and enforce its length."""
        if not value or not value.strip():
            raise ValueError("Department code is required")
        value = value.strip().upper()
        if len(value) > MAX_CODE_LENGTH:
            raise ValueError(
                f"Department code too long (max {MAX_CODE_LENGTH} characters)"
            )
        return value

    @validates("name")
    def validate_name(self, key, value):
        if not value or not value.strip():
            raise ValueError("Department name is required")
        return value.strip()

    def __repr__(self):
        return f"<Department(id={self.id}, seller_id={self.seller_id}, code='{self.code}')>"
