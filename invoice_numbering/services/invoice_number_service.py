"""Invoice number issuance: counter reservation followed by template rendering."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from invoice_numbering.core.exceptions import NotFoundError, PersistenceError
from invoice_numbering.models import Department, Invoice, ResetPeriod, Seller
from invoice_numbering.services.counter_service import (
    InvoiceCounterService,
    counter_service,
    period_key_for,
)
from invoice_numbering.services.scheme_service import NumberingSchemeService, scheme_service
from invoice_numbering.services.template_parser import TemplateParser, template_parser
from invoice_numbering.utils.logger import logger


@dataclass
class GeneratedInvoiceNumber:
    invoice_number: str
    sequence_number: int
    reset_period: ResetPeriod
    period_key: str
    issue_date: date
    department_code: Optional[str]
    scheme_id: Optional[int]
    reserved: bool
    invoice_id: Optional[int] = None


class InvoiceNumberService:
    """
    Issues invoice numbers for sellers.

    The sequence number is reserved and committed first; the number is
    rendered only after that commit succeeds. A failed reservation leaves
    nothing behind. A failure after the reservation leaves a gap in the
    sequence, never a duplicate.
    """

    def __init__(
        self,
        counters: Optional[InvoiceCounterService] = None,
        schemes: Optional[NumberingSchemeService] = None,
        parser: Optional[TemplateParser] = None,
    ):
        self.counters = counters or counter_service
        self.schemes = schemes or scheme_service
        self.parser = parser or template_parser

    def _require_active_seller(self, db: Session, seller_id: int) -> Seller:
        seller = db.get(Seller, seller_id)
        if seller is None:
            raise NotFoundError(f"Seller {seller_id} not found")
        if not seller.is_active:
            raise ValueError(f"Seller {seller_id} is deactivated")
        return seller

    def _resolve_department(
        self, db: Session, seller_id: int, department_code: Optional[str]
    ) -> Optional[str]:
        if not department_code or not department_code.strip():
            return None
        code = department_code.strip().upper()
        department = (
            db.query(Department)
            .filter(
                Department.seller_id == seller_id,
                Department.code == code,
                Department.active == True,  # noqa: E712
            )
            .first()
        )
        if department is None:
            raise NotFoundError(
                f"Department {code} not found or inactive for seller {seller_id}"
            )
        return department.code

    def issue(
        self,
        db: Session,
        seller_id: int,
        issue_date: date,
        department_code: Optional[str] = None,
    ) -> GeneratedInvoiceNumber:
        """
        Reserve and render the next invoice number, and record it.

        Args:
            db: Database session
            seller_id: Issuing seller
            issue_date: Invoice issue date (backdating is allowed)
            department_code: Optional department code of the seller

        Returns:
            The issued number with its sequence and bucket

        Raises:
            NotFoundError: Unknown seller or department, or no scheme
            PersistenceError: The reservation or the ledger write failed
        """
        self._require_active_seller(db, seller_id)
        department = self._resolve_department(db, seller_id, department_code)
        scheme = self.schemes.resolve_scheme(db, seller_id, issue_date)

        sequence = self.counters.next_sequence(
            db, seller_id, scheme.reset_period, issue_date
        )
        period_key = period_key_for(scheme.reset_period, issue_date)
        invoice_number = self.parser.render(
            scheme.template, sequence, issue_date, department
        )

        invoice = Invoice(
            seller_id=seller_id,
            scheme_id=scheme.scheme_id,
            department_code=department,
            issue_date=issue_date,
            reset_period=scheme.reset_period,
            period_key=period_key,
            sequence_number=sequence,
            invoice_number=invoice_number,
        )
        try:
            db.add(invoice)
            self.counters.record_issued(
                db, seller_id, period_key, sequence, invoice_number
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Sequence {sequence} reserved but invoice {invoice_number} not "
                f"recorded: seller_id={seller_id}, period_key={period_key}: {e}"
            )
            raise PersistenceError(
                "Could not generate invoice number", seller_id, period_key
            ) from e

        logger.info(
            f"Issued invoice number {invoice_number} (seller_id={seller_id}, "
            f"reset_period={scheme.reset_period.value}, period_key={period_key}, "
            f"seq={sequence})"
        )
        return GeneratedInvoiceNumber(
            invoice_number=invoice_number,
            sequence_number=sequence,
            reset_period=scheme.reset_period,
            period_key=period_key,
            issue_date=issue_date,
            department_code=department,
            scheme_id=scheme.scheme_id,
            reserved=True,
            invoice_id=invoice.id,
        )

    def preview(
        self,
        db: Session,
        seller_id: int,
        issue_date: date,
        department_code: Optional[str] = None,
    ) -> GeneratedInvoiceNumber:
        """Number the next issuance would get. Nothing is reserved or written."""
        self._require_active_seller(db, seller_id)
        department = self._resolve_department(db, seller_id, department_code)
        scheme = self.schemes.resolve_scheme(db, seller_id, issue_date)

        sequence = self.counters.peek_next_sequence(
            db, seller_id, scheme.reset_period, issue_date
        )
        return GeneratedInvoiceNumber(
            invoice_number=self.parser.render(
                scheme.template, sequence, issue_date, department
            ),
            sequence_number=sequence,
            reset_period=scheme.reset_period,
            period_key=period_key_for(scheme.reset_period, issue_date),
            issue_date=issue_date,
            department_code=department,
            scheme_id=scheme.scheme_id,
            reserved=False,
        )


# Singleton instance
invoice_number_service = InvoiceNumberService()
