"""Numbering scheme administration and lookup."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from invoice_numbering.config import settings
from invoice_numbering.core.exceptions import NotFoundError, PermissionDeniedError
from invoice_numbering.models import AuditAction, NumberingScheme, ResetPeriod, SchemeStatus, Seller
from invoice_numbering.services.base import BaseService
from invoice_numbering.services.template_parser import TemplateParser, template_parser
from invoice_numbering.utils.logger import logger

# A concurrent activation can collide on the version constraint once;
# a second collision is reported to the caller.
_CREATE_ATTEMPTS = 2


@dataclass(frozen=True)
class EffectiveScheme:
    """Template and reset period to apply to one issuance."""

    template: str
    reset_period: ResetPeriod
    scheme_id: Optional[int] = None

    @property
    def is_default(self) -> bool:
        return self.scheme_id is None


class NumberingSchemeService(BaseService[NumberingScheme]):
    """
    Service for managing seller numbering schemes.

    Provides:
    - Creating a scheme (archives the previously active ones)
    - Archiving schemes
    - Selecting the scheme in force on an issue date, with a
      system-wide default as fallback
    """

    def __init__(self, parser: Optional[TemplateParser] = None):
        """Initialize numbering scheme service."""
        super().__init__(NumberingScheme)
        self.parser = parser or template_parser

    def require_seller(self, db: Session, seller_id: int) -> Seller:
        seller = db.get(Seller, seller_id)
        if seller is None:
            raise NotFoundError(f"Seller {seller_id} not found")
        return seller

    def create_scheme(
        self,
        db: Session,
        seller_id: int,
        template: str,
        reset_period: ResetPeriod,
        effective_from: date,
        user_id: Optional[int] = None,
        draft: bool = False,
    ) -> NumberingScheme:
        """
        Create a numbering scheme for a seller.

        A non-draft scheme becomes the seller's only ACTIVE scheme; the
        previous ones are archived and stay effective for backdated invoices.

        Args:
            db: Database session
            seller_id: Owning seller
            template: Template string
            reset_period: When the sequence restarts
            effective_from: First issue date the scheme applies to
            user_id: ID of user performing the action
            draft: Save as DRAFT without touching the active scheme

        Returns:
            Created scheme

        Raises:
            InvalidTemplateError: If the template is malformed
            NotFoundError: If the seller does not exist
            ValueError: If a concurrent change kept colliding
        """
        template = self.parser.validate(template)
        reset_period = ResetPeriod(reset_period)
        self.require_seller(db, seller_id)

        if not self.parser.has_sequence_token(template):
            logger.warning(
                f"Scheme for seller {seller_id} has no sequence token; "
                f"every invoice in a period gets the same number: {template}"
            )

        for attempt in range(1, _CREATE_ATTEMPTS + 1):
            if not draft:
                for active in self.active_schemes(db, seller_id):
                    old_values = active.to_dict()
                    active.archive()
                    db.flush()
                    self._log_audit(
                        db=db,
                        action=AuditAction.ARCHIVE,
                        record_id=active.id,
                        old_values=old_values,
                        new_values=active.to_dict(),
                        user_id=user_id,
                        reason="Superseded by a new scheme",
                    )

            version = (
                db.query(func.max(NumberingScheme.version))
                .filter(
                    NumberingScheme.seller_id == seller_id,
                    NumberingScheme.effective_from == effective_from,
                )
                .scalar()
                or 0
            ) + 1

            try:
                return self.create(
                    db,
                    {
                        "seller_id": seller_id,
                        "template": template,
                        "reset_period": reset_period,
                        "effective_from": effective_from,
                        "version": version,
                        "status": SchemeStatus.DRAFT if draft else SchemeStatus.ACTIVE,
                        "created_by_id": user_id,
                    },
                    user_id=user_id,
                )
            except IntegrityError:
                logger.warning(
                    f"Scheme version collision for seller {seller_id} "
                    f"on attempt {attempt}"
                )

        raise ValueError(
            "Another scheme was created concurrently. Please refresh and try again."
        )

    def list_schemes(self, db: Session, seller_id: int) -> List[NumberingScheme]:
        """All schemes of a seller, newest first."""
        self.require_seller(db, seller_id)
        return (
            db.query(NumberingScheme)
            .filter(NumberingScheme.seller_id == seller_id)
            .order_by(
                NumberingScheme.effective_from.desc(),
                NumberingScheme.version.desc(),
            )
            .all()
        )

    def active_schemes(self, db: Session, seller_id: int) -> List[NumberingScheme]:
        return (
            db.query(NumberingScheme)
            .filter(
                NumberingScheme.seller_id == seller_id,
                NumberingScheme.status == SchemeStatus.ACTIVE,
            )
            .order_by(NumberingScheme.effective_from.desc())
            .all()
        )

    def archive_scheme(
        self,
        db: Session,
        seller_id: int,
        scheme_id: int,
        user_id: Optional[int] = None,
    ) -> NumberingScheme:
        """
        Archive a scheme.

        Raises:
            NotFoundError: If the scheme does not exist
            PermissionDeniedError: If the scheme belongs to another seller
            ValueError: If the scheme is already archived
        """
        scheme = self.get(db, scheme_id)
        if scheme is None:
            raise NotFoundError(f"Numbering scheme {scheme_id} not found")
        if scheme.seller_id != seller_id:
            raise PermissionDeniedError(
                "Cannot archive scheme: it belongs to another seller"
            )
        if scheme.status == SchemeStatus.ARCHIVED:
            raise ValueError("Scheme is already archived")

        scheme = self.update(
            db,
            scheme,
            {"status": SchemeStatus.ARCHIVED},
            user_id=user_id,
            action=AuditAction.ARCHIVE,
        )
        logger.info(f"Archived numbering scheme {scheme_id} of seller {seller_id}")
        return scheme

    def find_effective_scheme(
        self, db: Session, seller_id: int, on_date: date
    ) -> Optional[NumberingScheme]:
        """Newest non-draft scheme whose effective_from is on or before the date."""
        return (
            db.query(NumberingScheme)
            .filter(
                NumberingScheme.seller_id == seller_id,
                NumberingScheme.status != SchemeStatus.DRAFT,
                NumberingScheme.effective_from <= on_date,
            )
            .order_by(
                NumberingScheme.effective_from.desc(),
                NumberingScheme.version.desc(),
            )
            .first()
        )

    def resolve_scheme(
        self, db: Session, seller_id: int, on_date: date
    ) -> EffectiveScheme:
        """
        Scheme to apply to an invoice issued on ``on_date``.

        Falls back to the configured system-wide default template.

        Raises:
            NotFoundError: If neither a seller scheme nor a default exists
        """
        scheme = self.find_effective_scheme(db, seller_id, on_date)
        if scheme is not None:
            return EffectiveScheme(scheme.template, scheme.reset_period, scheme.id)

        if settings.default_numbering_template:
            return EffectiveScheme(
                self.parser.validate(settings.default_numbering_template),
                ResetPeriod(settings.default_reset_period),
            )

        raise NotFoundError(
            f"No numbering scheme configured for seller {seller_id} "
            f"effective on {on_date.isoformat()}"
        )

    def current_template(self, db: Session, seller_id: int) -> Optional[str]:
        """Template in force today, or None when nothing is configured."""
        try:
            return self.resolve_scheme(db, seller_id, date.today()).template
        except NotFoundError:
            return None


# Singleton instance
scheme_service = NumberingSchemeService()
