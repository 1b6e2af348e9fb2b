"""Counter observability schemas.

Serialized with camelCase keys, e.g. ``periodKey`` and ``hasDrift``.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from invoice_numbering.models.enums import ResetPeriod


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CounterStatusResponse(CamelModel):
    """One counter with its drift check."""

    period_key: str
    reset_period: ResetPeriod
    last_value: int
    invoice_count: int
    expected_value: int
    last_invoice_number: Optional[str] = None
    updated_at: Optional[datetime] = None
    has_drift: bool

    @classmethod
    def from_row(cls, row) -> "CounterStatusResponse":
        return cls(
            period_key=row.period_key,
            reset_period=row.reset_period,
            last_value=row.last_value,
            invoice_count=row.invoice_count,
            expected_value=row.expected_value,
            last_invoice_number=row.last_invoice_number,
            updated_at=row.updated_at,
            has_drift=row.has_drift,
        )


class CounterObservabilityResponse(CamelModel):
    """All counters of a seller, drifting ones first."""

    seller_id: int
    current_template: Optional[str] = None
    counters: List[CounterStatusResponse]
