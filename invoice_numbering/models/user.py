"""User model for authorization."""

from sqlalchemy import Boolean, Column, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship, validates

from invoice_numbering.models.base import BaseModel
from invoice_numbering.models.enums import UserRole


class User(BaseModel):
    """
    User model for role-based access control.

    Attributes:
        username: Unique username
        email: Unique email address
        role: ADMIN manages schemes and reads counters; USER issues numbers
        active: Whether the account is active
        seller_id: Seller the user issues invoices for (None for platform admins)
    """

    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)
    active = Column(Boolean, default=True, nullable=False)
    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=True)

    seller = relationship("Seller")
    audit_logs = relationship("AuditLog", back_populates="user")

    __table_args__ = (
        Index("idx_user_username", "username"),
        Index("idx_user_role_active", "role", "active"),
    )

    @validates("username")
    def validate_username(self, key, value):
        """Validate username is not empty and properly formatted."""
        if not value or not value.strip():
            raise ValueError("Username cannot be empty")
        value = value.strip().lower()
        if not value.replace("_", "").isalnum():
            raise ValueError(
                "Username must contain only letters, numbers, and underscores"
            )
        return value

    @validates("email")
    def validate_email(self, key, value):
        """Validate email format."""
        if not value or not value.strip():
            raise ValueError("Email cannot be empty")
        value = value.strip().lower()
        if "@" not in value or "." not in value.split("@")[1]:
            raise ValueError("Invalid email format")
        return value

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    def can_act_for_seller(self, seller_id: int) -> bool:
        """Admins act for any seller, other users only for their own."""
        if not self.active:
            return False
        return self.is_admin or self.seller_id == seller_id

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role.value}', active={self.active})>"
