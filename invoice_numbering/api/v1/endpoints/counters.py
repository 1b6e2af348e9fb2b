"""Counter observability endpoint for operators."""

from fastapi import APIRouter, HTTPException, Query, status

from invoice_numbering.config import settings
from invoice_numbering.dependencies import AdminUser, DbSession
from invoice_numbering.schemas.counter import CounterObservabilityResponse, CounterStatusResponse
from invoice_numbering.services.counter_service import counter_service
from invoice_numbering.services.scheme_service import scheme_service
from invoice_numbering.utils.logger import logger

router = APIRouter()


@router.get(
    "/invoice-counters",
    response_model=CounterObservabilityResponse,
    response_model_by_alias=True,
)
def get_invoice_counters(
    db: DbSession,
    current_user: AdminUser,
    seller_id: int = Query(..., ge=1),
) -> CounterObservabilityResponse:
    """
    List a seller's counters next to the ledger count of each bucket.

    Rows whose counter differs from the expected value come first.
    """
    if not settings.counters_observability_enabled:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not found",
        )

    logger.info(f"User {current_user.username} inspected counters of seller {seller_id}")
    rows = counter_service.audit_counters(db, seller_id)
    return CounterObservabilityResponse(
        seller_id=seller_id,
        current_template=scheme_service.current_template(db, seller_id),
        counters=[CounterStatusResponse.from_row(row) for row in rows],
    )
