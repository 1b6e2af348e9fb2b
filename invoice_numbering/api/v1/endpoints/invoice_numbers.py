"""Invoice number issuance endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from invoice_numbering.dependencies import CurrentUser, DbSession, require_seller_access
from invoice_numbering.schemas.invoice_number import InvoiceNumberRequest, InvoiceNumberResponse
from invoice_numbering.services.invoice_number_service import invoice_number_service

router = APIRouter()


@router.post(
    "/sellers/{seller_id}/invoice-numbers",
    response_model=InvoiceNumberResponse,
    status_code=status.HTTP_201_CREATED,
)
def issue_invoice_number(
    seller_id: int,
    request_in: InvoiceNumberRequest,
    db: DbSession,
    current_user: CurrentUser,
) -> InvoiceNumberResponse:
    """Reserve and return the next invoice number of a seller."""
    require_seller_access(current_user, seller_id)
    try:
        generated = invoice_number_service.issue(
            db,
            seller_id,
            request_in.issue_date,
            request_in.department_code,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return InvoiceNumberResponse.model_validate(generated)


@router.get(
    "/sellers/{seller_id}/invoice-numbers/next",
    response_model=InvoiceNumberResponse,
)
def preview_next_invoice_number(
    seller_id: int,
    db: DbSession,
    current_user: CurrentUser,
    issue_date: Optional[date] = Query(None),
    department_code: Optional[str] = Query(None, max_length=10),
) -> InvoiceNumberResponse:
    """Number the next issuance would get. Nothing is reserved."""
    require_seller_access(current_user, seller_id)
    try:
        generated = invoice_number_service.preview(
            db,
            seller_id,
            issue_date or date.today(),
            department_code,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return InvoiceNumberResponse.model_validate(generated)
