"""Enum types for database models."""

import enum
from datetime import date


NEVER_PERIOD_KEY = "NEVER"


class UserRole(str, enum.Enum):
    """User role enumeration."""

    ADMIN = "ADMIN"
    USER = "USER"


class ResetPeriod(str, enum.Enum):
    """When an invoice sequence restarts from 1."""

    NEVER = "NEVER"
    YEARLY = "YEARLY"
    MONTHLY = "MONTHLY"
    DAILY = "DAILY"

    def period_key(self, issue_date: date) -> str:
        """
        Build the counter bucket key for an issue date.

        Keys sort lexicographically in chronological order within a
        reset period: "2026-02-03" (DAILY), "2026-02" (MONTHLY),
        "2026" (YEARLY). NEVER always maps to the same bucket.
        """
        if self is ResetPeriod.NEVER:
            return NEVER_PERIOD_KEY
        if self is ResetPeriod.YEARLY:
            return f"{issue_date.year:04d}"
        if self is ResetPeriod.MONTHLY:
            return f"{issue_date.year:04d}-{issue_date.month:02d}"
        return f"{issue_date.year:04d}-{issue_date.month:02d}-{issue_date.day:02d}"

    @property
    def description(self) -> str:
        return {
            ResetPeriod.NEVER: "Never reset (continuous)",
            ResetPeriod.YEARLY: "Reset to 1 every year",
            ResetPeriod.MONTHLY: "Reset to 1 every month",
            ResetPeriod.DAILY: "Reset to 1 every day",
        }[self]


class SchemeStatus(str, enum.Enum):
    """Numbering scheme lifecycle status."""

    ACTIVE = "ACTIVE"  # Used for new invoices
    ARCHIVED = "ARCHIVED"  # Still effective for backdated invoices
    DRAFT = "DRAFT"  # Planned, never effective


class AuditAction(str, enum.Enum):
    """Audit log action enumeration."""

    INSERT = "insert"
    UPDATE = "update"
    ARCHIVE = "archive"
