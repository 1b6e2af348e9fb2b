"""Numbering scheme schemas for request/response validation."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from invoice_numbering.models.enums import ResetPeriod, SchemeStatus


class NumberingSchemeCreate(BaseModel):
    """Schema for creating a numbering scheme."""

    template: str = Field(..., min_length=1, max_length=64)
    reset_period: ResetPeriod
    effective_from: date
    draft: bool = False

    @field_validator("template", mode="before")
    @classmethod
    def strip_template(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class NumberingSchemeResponse(BaseModel):
    """Numbering scheme response schema."""

    id: int
    seller_id: int
    template: str
    reset_period: ResetPeriod
    effective_from: date
    version: int
    status: SchemeStatus
    created_by_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TemplatePreviewRequest(BaseModel):
    template: str


class TemplatePreviewResponse(BaseModel):
    preview: str
