"""Per-seller, per-period invoice sequence counters.

Every call to ``next_sequence`` hands out exactly one number. For a fixed
(seller, period key) the numbers are 1, 2, 3, ... with no repeats. Calls
for the same bucket are serialized by a per-key lock inside the process
and by an atomic ``UPDATE ... SET last_value = last_value + 1`` in the
database, which also covers several processes sharing one database.
Different buckets never wait on each other.

A number is consumed once the increment commits, even if the caller
never uses it. Gaps are accepted; duplicates are not.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from invoice_numbering.config import settings
from invoice_numbering.core.exceptions import NotFoundError, PersistenceError
from invoice_numbering.core.locks import KeyedLockArena
from invoice_numbering.models import Invoice, InvoiceCounter, ResetPeriod, Seller
from invoice_numbering.services.base import BaseService
from invoice_numbering.utils.logger import logger

# Attempts to create a missing bucket row before giving up. A second
# attempt is needed only when another process inserted the same row first.
_CREATE_ATTEMPTS = 2


def period_key_for(reset_period: ResetPeriod, issue_date: date) -> str:
    """Return the counter bucket key for a reset period and issue date."""
    return ResetPeriod(reset_period).period_key(issue_date)


@dataclass
class CounterAuditRow:
    """Counter state compared with the invoices actually recorded in its bucket."""

    period_key: str
    reset_period: ResetPeriod
    last_value: int
    invoice_count: int
    expected_value: int
    last_invoice_number: Optional[str]
    updated_at: Optional[datetime]
    has_drift: bool


class InvoiceCounterService(BaseService[InvoiceCounter]):
    """
    Owns the invoice sequence counters.

    Provides:
    - Atomic next-number reservation per (seller, period key)
    - Read-only peek at the next number for previews
    - Explicit seeding of a bucket that continues a legacy sequence
    - Drift audit of counters against recorded invoices
    """

    def __init__(self, locks: Optional[KeyedLockArena] = None):
        """Initialize counter service."""
        super().__init__(InvoiceCounter)
        self.locks = locks or KeyedLockArena()

    def get_counter(
        self, db: Session, seller_id: int, period_key: str
    ) -> Optional[InvoiceCounter]:
        return (
            db.query(InvoiceCounter)
            .filter(
                InvoiceCounter.seller_id == seller_id,
                InvoiceCounter.period_key == period_key,
            )
            .first()
        )

    def next_sequence(
        self,
        db: Session,
        seller_id: int,
        reset_period: ResetPeriod,
        issue_date: date,
    ) -> int:
        """
        Reserve the next sequence number for a seller's bucket.

        The increment is committed before this returns.

        Args:
            db: Database session
            seller_id: Owning seller
            reset_period: Reset period of the scheme in force
            issue_date: Invoice issue date, selects the bucket

        Returns:
            The reserved sequence number (1 for a new bucket)

        Raises:
            PersistenceError: If the increment could not be committed
        """
        reset_period = ResetPeriod(reset_period)
        period_key = period_key_for(reset_period, issue_date)
        logger.debug(
            f"Reserving sequence: seller_id={seller_id}, "
            f"reset_period={reset_period.value}, period_key={period_key}"
        )

        try:
            with self.locks.hold(
                (seller_id, period_key), timeout=settings.counter_lock_timeout_seconds
            ):
                sequence = self._increment(db, seller_id, reset_period, period_key)
        except TimeoutError as e:
            logger.error(
                f"Could not lock counter: seller_id={seller_id}, period_key={period_key}"
            )
            raise PersistenceError(
                "Could not generate invoice number", seller_id, period_key
            ) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Counter increment failed: seller_id={seller_id}, "
                f"period_key={period_key}: {e}"
            )
            raise PersistenceError(
                "Could not generate invoice number", seller_id, period_key
            ) from e

        logger.info(
            f"Reserved sequence {sequence}: seller_id={seller_id}, "
            f"reset_period={reset_period.value}, period_key={period_key}"
        )
        return sequence

    def _increment(
        self,
        db: Session,
        seller_id: int,
        reset_period: ResetPeriod,
        period_key: str,
    ) -> int:
        scope = (
            InvoiceCounter.seller_id == seller_id,
            InvoiceCounter.period_key == period_key,
        )

        for _ in range(_CREATE_ATTEMPTS):
            result = db.execute(
                update(InvoiceCounter)
                .where(*scope)
                .values(last_value=InvoiceCounter.last_value + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount:
                sequence = db.execute(
                    select(InvoiceCounter.last_value).where(*scope)
                ).scalar_one()
                db.commit()
                return sequence

            db.add(
                InvoiceCounter(
                    seller_id=seller_id,
                    reset_period=reset_period,
                    period_key=period_key,
                    last_value=1,
                    base_offset=0,
                )
            )
            try:
                db.commit()
                return 1
            except IntegrityError:
                # Row was created by another process; increment it instead
                db.rollback()

        raise PersistenceError(
            "Could not create invoice counter", seller_id, period_key
        )

    def peek_next_sequence(
        self,
        db: Session,
        seller_id: int,
        reset_period: ResetPeriod,
        issue_date: date,
    ) -> int:
        """Return the number the next reservation would get, without reserving it."""
        counter = self.get_counter(db, seller_id, period_key_for(reset_period, issue_date))
        return counter.last_value + 1 if counter else 1

    def seed_counter(
        self,
        db: Session,
        seller_id: int,
        reset_period: ResetPeriod,
        issue_date: date,
        start_value: int,
        user_id: Optional[int] = None,
    ) -> InvoiceCounter:
        """
        Create a bucket that continues a sequence issued outside this system.

        The next reservation in the bucket returns ``start_value + 1``. The
        seeded numbers count as expected in the drift audit.

        Raises:
            NotFoundError: If the seller does not exist
            ValueError: If the bucket already exists or start_value is negative
        """
        if start_value < 0:
            raise ValueError("Start value cannot be negative")
        if db.get(Seller, seller_id) is None:
            raise NotFoundError(f"Seller {seller_id} not found")

        reset_period = ResetPeriod(reset_period)
        period_key = period_key_for(reset_period, issue_date)
        if self.get_counter(db, seller_id, period_key) is not None:
            raise ValueError(
                f"Counter for seller {seller_id} and period {period_key} already exists"
            )

        try:
            return self.create(
                db,
                {
                    "seller_id": seller_id,
                    "reset_period": reset_period,
                    "period_key": period_key,
                    "last_value": start_value,
                    "base_offset": start_value,
                },
                user_id=user_id,
                reason="Seeded from legacy numbering",
            )
        except IntegrityError as e:
            raise ValueError(
                f"Counter for seller {seller_id} and period {period_key} already exists"
            ) from e

    def record_issued(
        self,
        db: Session,
        seller_id: int,
        period_key: str,
        sequence: int,
        invoice_number: str,
    ) -> None:
        """
        Remember the rendered number on its counter.

        Only applies while the counter still points at ``sequence`` so a
        slower request never overwrites a newer number. Does not commit.
        """
        db.execute(
            update(InvoiceCounter)
            .where(
                InvoiceCounter.seller_id == seller_id,
                InvoiceCounter.period_key == period_key,
                InvoiceCounter.last_value == sequence,
            )
            .values(last_invoice_number=invoice_number)
            .execution_options(synchronize_session=False)
        )

    def audit_counters(self, db: Session, seller_id: int) -> List[CounterAuditRow]:
        """
        Compare every counter of a seller with its recorded invoices.

        Takes no locks; a concurrent reservation may or may not be visible.
        Drift is reported, never corrected.

        Returns:
            Rows with drifting counters first, then by period key descending

        Raises:
            NotFoundError: If the seller does not exist
        """
        if db.get(Seller, seller_id) is None:
            raise NotFoundError(f"Seller {seller_id} not found")

        counters = (
            db.query(InvoiceCounter).filter(InvoiceCounter.seller_id == seller_id).all()
        )
        invoice_counts = dict(
            db.query(Invoice.period_key, func.count(Invoice.id))
            .filter(Invoice.seller_id == seller_id)
            .group_by(Invoice.period_key)
            .all()
        )

        rows = []
        for counter in counters:
            invoice_count = invoice_counts.get(counter.period_key, 0)
            expected_value = invoice_count + (counter.base_offset or 0)
            has_drift = expected_value != counter.last_value
            if has_drift:
                logger.warning(
                    f"Counter drift detected: seller_id={seller_id}, "
                    f"period_key={counter.period_key}, counter={counter.last_value}, "
                    f"expected={expected_value}"
                )
            rows.append(
                CounterAuditRow(
                    period_key=counter.period_key,
                    reset_period=counter.reset_period,
                    last_value=counter.last_value,
                    invoice_count=invoice_count,
                    expected_value=expected_value,
                    last_invoice_number=counter.last_invoice_number,
                    updated_at=counter.updated_at,
                    has_drift=has_drift,
                )
            )

        rows.sort(key=lambda row: row.period_key, reverse=True)
        rows.sort(key=lambda row: not row.has_drift)
        return rows


# Singleton instance
counter_service = InvoiceCounterService()
