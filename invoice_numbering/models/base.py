"""Base model class with common fields for all models."""

import enum
from datetime import date, datetime

from sqlalchemy import Column, DateTime, Integer

from invoice_numbering.database import Base


class BaseModel(Base):
    """Abstract base model with id and timestamps."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self):
        if getattr(self, "id", None) is not None:
            return f"<{self.__class__.__name__}(id={self.id})>"
        return f"<{self.__class__.__name__}>"

    def to_dict(self):
        """Column values as plain JSON-friendly types (used for audit snapshots)."""
        values = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, enum.Enum):
                value = value.value
            elif isinstance(value, (date, datetime)):
                value = value.isoformat()
            values[column.name] = value
        return values
