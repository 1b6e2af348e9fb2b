"""Numbering scheme administration endpoints."""

from typing import List

from fastapi import APIRouter, HTTPException, status

from invoice_numbering.dependencies import AdminUser, CurrentUser, DbSession, require_seller_access
from invoice_numbering.schemas.numbering_scheme import (
    NumberingSchemeCreate,
    NumberingSchemeResponse,
    TemplatePreviewRequest,
    TemplatePreviewResponse,
)
from invoice_numbering.services.scheme_service import scheme_service
from invoice_numbering.services.template_parser import template_parser

router = APIRouter()


@router.get(
    "/sellers/{seller_id}/numbering-schemes",
    response_model=List[NumberingSchemeResponse],
)
def list_numbering_schemes(
    seller_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> List[NumberingSchemeResponse]:
    """List every scheme of a seller, newest first."""
    require_seller_access(current_user, seller_id)
    schemes = scheme_service.list_schemes(db, seller_id)
    return [NumberingSchemeResponse.model_validate(s) for s in schemes]


@router.get(
    "/sellers/{seller_id}/numbering-schemes/active",
    response_model=List[NumberingSchemeResponse],
)
def list_active_numbering_schemes(
    seller_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> List[NumberingSchemeResponse]:
    """List the seller's ACTIVE schemes."""
    require_seller_access(current_user, seller_id)
    scheme_service.require_seller(db, seller_id)
    schemes = scheme_service.active_schemes(db, seller_id)
    return [NumberingSchemeResponse.model_validate(s) for s in schemes]


@router.post(
    "/sellers/{seller_id}/numbering-schemes",
    response_model=NumberingSchemeResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_numbering_scheme(
    seller_id: int,
    scheme_in: NumberingSchemeCreate,
    db: DbSession,
    current_user: AdminUser,
) -> NumberingSchemeResponse:
    """Create a scheme. Unless saved as draft it replaces the active one."""
    try:
        scheme = scheme_service.create_scheme(
            db,
            seller_id=seller_id,
            template=scheme_in.template,
            reset_period=scheme_in.reset_period,
            effective_from=scheme_in.effective_from,
            user_id=current_user.id,
            draft=scheme_in.draft,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return NumberingSchemeResponse.model_validate(scheme)


@router.delete(
    "/sellers/{seller_id}/numbering-schemes/{scheme_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def archive_numbering_scheme(
    seller_id: int,
    scheme_id: int,
    db: DbSession,
    current_user: AdminUser,
) -> None:
    """Archive a scheme. Archived schemes stay effective for backdated invoices."""
    try:
        scheme_service.archive_scheme(db, seller_id, scheme_id, user_id=current_user.id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.post("/numbering-schemes/preview", response_model=TemplatePreviewResponse)
def preview_template(
    preview_in: TemplatePreviewRequest,
    current_user: CurrentUser,
) -> TemplatePreviewResponse:
    """Render a template with sample values (sequence 1, 2026-02-01)."""
    return TemplatePreviewResponse(preview=template_parser.preview(preview_in.template))
