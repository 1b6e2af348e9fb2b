"""Invoice number issuance schemas."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from invoice_numbering.models.enums import ResetPeriod


class InvoiceNumberRequest(BaseModel):
    """Request to issue the next invoice number."""

    issue_date: date
    department_code: Optional[str] = Field(None, max_length=10)


class InvoiceNumberResponse(BaseModel):
    """Issued (or previewed) invoice number."""

    invoice_number: str
    sequence_number: int
    reset_period: ResetPeriod
    period_key: str
    issue_date: date
    department_code: Optional[str] = None
    scheme_id: Optional[int] = None
    reserved: bool
    invoice_id: Optional[int] = None

    model_config = {"from_attributes": True}
