"""Audit log model for numbering administration changes."""

import json
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from invoice_numbering.models.base import BaseModel
from invoice_numbering.models.enums import AuditAction


class AuditLog(BaseModel):
    """
    History of changes to schemes and counters.

    Attributes:
        table_name: Name of the table where change occurred
        record_id: ID of the record that was changed
        action: Type of action performed
        old_values: JSON string of values before change
        new_values: JSON string of values after change
        user_id: User who made the change
        timestamp: When the change occurred
        reason: Optional free-text reason
    """

    __tablename__ = "audit_logs"

    created_at = None  # timestamp is used instead
    updated_at = None  # Audit logs are never updated

    table_name = Column(String(50), nullable=False)
    record_id = Column(Integer, nullable=False)
    action = Column(Enum(AuditAction), nullable=False)
    old_values = Column(Text, nullable=True)  # JSON format
    new_values = Column(Text, nullable=True)  # JSON format
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)
    reason = Column(Text, nullable=True)

    user = relationship("User", back_populates="audit_logs")

    __table_args__ = (
        Index("idx_audit_table_record", "table_name", "record_id"),
        Index("idx_audit_timestamp", "timestamp"),
    )

    @validates("old_values", "new_values")
    def validate_json_values(self, key, value):
        """Store dictionaries as JSON strings."""
        if value is None or isinstance(value, str):
            return value
        try:
            return json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Cannot serialize {key} to JSON: {e}")

    def get_new_values_dict(self):
        if not self.new_values:
            return {}
        try:
            return json.loads(self.new_values)
        except json.JSONDecodeError:
            return {}

    @classmethod
    def log_change(
        cls,
        session,
        table_name,
        record_id,
        action,
        old_values=None,
        new_values=None,
        user=None,
        reason=None,
    ):
        """
        Create an audit log entry.

        Args:
            session: Database session
            table_name: Name of the table
            record_id: ID of the record
            action: Action performed
            old_values: Dictionary of old values
            new_values: Dictionary of new values
            user: User object or user_id
            reason: Reason for the action
        """
        user_id = user.id if hasattr(user, "id") else user

        audit_log = cls(
            table_name=table_name,
            record_id=record_id,
            action=action,
            old_values=old_values,
            new_values=new_values,
            user_id=user_id,
            reason=reason,
        )
        session.add(audit_log)
        return audit_log

    def __repr__(self):
        return f"<AuditLog(id={self.id}, table='{self.table_name}', record={self.record_id}, action={self.action.value})>"
