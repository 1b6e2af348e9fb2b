"""Tests for the invoice counter service."""

import threading
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from invoice_numbering.config import settings
from invoice_numbering.core.exceptions import NotFoundError, PersistenceError
from invoice_numbering.database import Base
from invoice_numbering.models import AuditLog, Invoice, InvoiceCounter, Seller
from invoice_numbering.models.enums import ResetPeriod
from invoice_numbering.services import InvoiceCounterService, period_key_for


def _record_invoice(db, seller_id, reset_period, issue_date, sequence):
    period_key = period_key_for(reset_period, issue_date)
    db.add(
        Invoice(
            seller_id=seller_id,
            issue_date=issue_date,
            reset_period=reset_period,
            period_key=period_key,
            sequence_number=sequence,
            invoice_number=f"INV-{period_key}-{sequence}",
        )
    )
    db.commit()


class TestNextSequence:
    """Test sequence reservation."""

    def test_first_value_is_one(self, test_db, sample_seller, counter_service):
        value = counter_service.next_sequence(
            test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 3, 1)
        )
        assert value == 1

    def test_values_increase_by_one(self, test_db, sample_seller, counter_service):
        values = [
            counter_service.next_sequence(
                test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 3, 1)
            )
            for _ in range(5)
        ]
        assert values == [1, 2, 3, 4, 5]

        counter = counter_service.get_counter(test_db, sample_seller.id, "2026")
        assert counter.last_value == 5

    def test_yearly_reset(self, test_db, sample_seller, counter_service):
        for _ in range(3):
            counter_service.next_sequence(
                test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 12, 31)
            )
        value = counter_service.next_sequence(
            test_db, sample_seller.id, ResetPeriod.YEARLY, date(2027, 1, 1)
        )
        assert value == 1

    def test_monthly_buckets_are_independent(self, test_db, sample_seller, counter_service):
        feb = date(2026, 2, 10)
        mar = date(2026, 3, 10)
        assert counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.MONTHLY, feb) == 1
        assert counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.MONTHLY, mar) == 1
        assert counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.MONTHLY, feb) == 2

    def test_never_reset_spans_years(self, test_db, sample_seller, counter_service):
        counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.NEVER, date(2025, 6, 1))
        value = counter_service.next_sequence(
            test_db, sample_seller.id, ResetPeriod.NEVER, date(2030, 1, 1)
        )
        assert value == 2
        assert counter_service.get_counter(test_db, sample_seller.id, "NEVER").last_value == 2

    def test_daily_reset(self, test_db, sample_seller, counter_service):
        counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.DAILY, date(2026, 2, 3))
        value = counter_service.next_sequence(
            test_db, sample_seller.id, ResetPeriod.DAILY, date(2026, 2, 4)
        )
        assert value == 1

    def test_sellers_are_independent(self, test_db, sample_seller, other_seller, counter_service):
        issue_date = date(2026, 5, 5)
        counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date)
        counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date)
        value = counter_service.next_sequence(
            test_db, other_seller.id, ResetPeriod.YEARLY, issue_date
        )
        assert value == 1

    def test_backdated_issue_uses_its_own_bucket(self, test_db, sample_seller, counter_service):
        counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 1, 5))
        value = counter_service.next_sequence(
            test_db, sample_seller.id, ResetPeriod.YEARLY, date(2025, 12, 30)
        )
        assert value == 1

    def test_lock_timeout_raises_persistence_error(
        self, test_db, sample_seller, counter_service, monkeypatch
    ):
        monkeypatch.setattr(settings, "counter_lock_timeout_seconds", 0.05)
        with counter_service.locks.hold((sample_seller.id, "2026")):
            with pytest.raises(PersistenceError) as exc_info:
                counter_service.next_sequence(
                    test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 1, 1)
                )
        assert exc_info.value.seller_id == sample_seller.id
        assert exc_info.value.period_key == "2026"
        assert counter_service.get_counter(test_db, sample_seller.id, "2026") is None

    def test_store_failure_raises_persistence_error(
        self, test_db, sample_seller, counter_service, monkeypatch
    ):
        def failing_execute(*args, **kwargs):
            raise OperationalError("UPDATE invoice_counters", {}, Exception("disk I/O error"))

        seller_id = sample_seller.id
        monkeypatch.setattr(test_db, "execute", failing_execute)
        with pytest.raises(PersistenceError, match="Could not generate invoice number") as exc_info:
            counter_service.next_sequence(
                test_db, seller_id, ResetPeriod.YEARLY, date(2026, 1, 1)
            )
        assert exc_info.value.seller_id == seller_id
        assert exc_info.value.period_key == "2026"

    def test_peek_does_not_reserve(self, test_db, sample_seller, counter_service):
        issue_date = date(2026, 4, 1)
        assert counter_service.peek_next_sequence(
            test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date
        ) == 1
        counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date)
        assert counter_service.peek_next_sequence(
            test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date
        ) == 2
        assert counter_service.peek_next_sequence(
            test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date
        ) == 2


def test_concurrent_reservations_are_unique(tmp_path):
    """Threads sharing one bucket get exactly the values 1..N."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'counters.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    SessionFactory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    setup = SessionFactory()
    seller = Seller(name="Concurrent Co")
    setup.add(seller)
    setup.commit()
    seller_id = seller.id
    setup.close()

    service = InvoiceCounterService()
    threads_count = 8
    per_thread = 25
    results = []
    errors = []
    results_lock = threading.Lock()

    def worker():
        session = SessionFactory()
        try:
            for _ in range(per_thread):
                value = service.next_sequence(
                    session, seller_id, ResetPeriod.YEARLY, date(2026, 2, 1)
                )
                with results_lock:
                    results.append(value)
        except Exception as e:  # collected and asserted below
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=worker) for _ in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    total = threads_count * per_thread
    assert errors == []
    assert sorted(results) == list(range(1, total + 1))

    check = SessionFactory()
    counter = check.query(InvoiceCounter).filter_by(seller_id=seller_id).one()
    assert counter.last_value == total
    assert len(service.locks) == 0
    check.close()
    engine.dispose()


class TestSeedCounter:
    """Test explicit seeding of legacy sequences."""

    def test_seed_continues_sequence(self, test_db, sample_seller, admin_user, counter_service):
        counter = counter_service.seed_counter(
            test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 1, 1), 1200,
            user_id=admin_user.id,
        )
        assert counter.last_value == 1200
        assert counter.base_offset == 1200

        value = counter_service.next_sequence(
            test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 8, 1)
        )
        assert value == 1201

        audit = test_db.query(AuditLog).filter_by(table_name="invoice_counters").one()
        assert audit.user_id == admin_user.id

    def test_seed_existing_bucket_rejected(self, test_db, sample_seller, counter_service):
        counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 1, 1))
        with pytest.raises(ValueError, match="already exists"):
            counter_service.seed_counter(
                test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 3, 1), 10
            )

    def test_seed_negative_rejected(self, test_db, sample_seller, counter_service):
        with pytest.raises(ValueError):
            counter_service.seed_counter(
                test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 1, 1), -1
            )

    def test_seed_unknown_seller(self, test_db, counter_service):
        with pytest.raises(NotFoundError):
            counter_service.seed_counter(test_db, 999, ResetPeriod.YEARLY, date(2026, 1, 1), 5)


class TestAuditCounters:
    """Test drift detection."""

    def test_unknown_seller(self, test_db, counter_service):
        with pytest.raises(NotFoundError):
            counter_service.audit_counters(test_db, 999)

    def test_no_counters(self, test_db, sample_seller, counter_service):
        assert counter_service.audit_counters(test_db, sample_seller.id) == []

    def test_consistent_counter(self, test_db, sample_seller, counter_service):
        issue_date = date(2026, 2, 1)
        for _ in range(3):
            sequence = counter_service.next_sequence(
                test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date
            )
            _record_invoice(test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date, sequence)

        rows = counter_service.audit_counters(test_db, sample_seller.id)
        assert len(rows) == 1
        row = rows[0]
        assert row.period_key == "2026"
        assert row.last_value == 3
        assert row.invoice_count == 3
        assert row.expected_value == 3
        assert row.has_drift is False

    def test_unused_reservation_shows_drift(self, test_db, sample_seller, counter_service):
        issue_date = date(2026, 2, 1)
        sequence = counter_service.next_sequence(
            test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date
        )
        _record_invoice(test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date, sequence)
        # Reserved but never recorded
        counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date)

        row = counter_service.audit_counters(test_db, sample_seller.id)[0]
        assert row.last_value == 2
        assert row.expected_value == 1
        assert row.has_drift is True

    def test_seeded_numbers_are_expected(self, test_db, sample_seller, counter_service):
        issue_date = date(2026, 2, 1)
        counter_service.seed_counter(test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date, 100)
        sequence = counter_service.next_sequence(
            test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date
        )
        _record_invoice(test_db, sample_seller.id, ResetPeriod.YEARLY, issue_date, sequence)

        row = counter_service.audit_counters(test_db, sample_seller.id)[0]
        assert row.expected_value == 101
        assert row.has_drift is False

    def test_drifting_rows_first_then_newest(self, test_db, sample_seller, counter_service):
        for month in (1, 2, 3):
            issue_date = date(2026, month, 15)
            sequence = counter_service.next_sequence(
                test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date
            )
            if month != 1:
                _record_invoice(
                    test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date, sequence
                )

        rows = counter_service.audit_counters(test_db, sample_seller.id)
        assert [row.period_key for row in rows] == ["2026-01", "2026-03", "2026-02"]
        assert [row.has_drift for row in rows] == [True, False, False]

    def test_orphan_invoice_shows_counter_behind(self, test_db, sample_seller, counter_service):
        issue_date = date(2026, 2, 10)
        for _ in range(3):
            sequence = counter_service.next_sequence(
                test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date
            )
            _record_invoice(test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date, sequence)
        # Recorded without a reservation, e.g. imported by hand
        _record_invoice(test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date, 4)

        row = counter_service.audit_counters(test_db, sample_seller.id)[0]
        assert row.period_key == "2026-02"
        assert row.last_value == 3
        assert row.invoice_count == 4
        assert row.expected_value == 4
        assert row.expected_value - row.last_value == 1
        assert row.has_drift is True

    def test_several_drifting_rows_newest_first(self, test_db, sample_seller, counter_service):
        for month in (1, 2, 3, 4):
            issue_date = date(2026, month, 15)
            sequence = counter_service.next_sequence(
                test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date
            )
            if month in (2, 4):
                _record_invoice(
                    test_db, sample_seller.id, ResetPeriod.MONTHLY, issue_date, sequence
                )

        rows = counter_service.audit_counters(test_db, sample_seller.id)
        assert [row.period_key for row in rows] == ["2026-03", "2026-01", "2026-04", "2026-02"]
        assert [row.has_drift for row in rows] == [True, True, False, False]

    def test_audit_does_not_modify_counters(self, test_db, sample_seller, counter_service):
        counter_service.next_sequence(test_db, sample_seller.id, ResetPeriod.YEARLY, date(2026, 1, 1))
        counter_service.audit_counters(test_db, sample_seller.id)
        counter_service.audit_counters(test_db, sample_seller.id)
        assert counter_service.get_counter(test_db, sample_seller.id, "2026").last_value == 1
