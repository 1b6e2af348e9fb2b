"""Pytest configuration and fixtures."""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from invoice_numbering.database import Base
from invoice_numbering.models import Department, NumberingScheme, Seller, User
from invoice_numbering.models.enums import ResetPeriod, SchemeStatus, UserRole
from invoice_numbering.services import (
    InvoiceCounterService,
    InvoiceNumberService,
    NumberingSchemeService,
)


@pytest.fixture(scope="function")
def test_db():
    """Create a test database session."""
    # Use in-memory SQLite for tests
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(engine)


@pytest.fixture
def sample_seller(test_db):
    """Create a sample seller."""
    seller = Seller(name="Acme GmbH", tax_id="DE123456789")
    test_db.add(seller)
    test_db.commit()
    return seller


@pytest.fixture
def other_seller(test_db):
    """Create a second seller."""
    seller = Seller(name="Globex Ltd")
    test_db.add(seller)
    test_db.commit()
    return seller


@pytest.fixture
def sample_department(test_db, sample_seller):
    """Create a sample department."""
    department = Department(seller_id=sample_seller.id, code="sales", name="Sales")
    test_db.add(department)
    test_db.commit()
    return department


@pytest.fixture
def admin_user(test_db):
    """Create an admin user."""
    user = User(username="admin", email="admin@example.com", role=UserRole.ADMIN)
    test_db.add(user)
    test_db.commit()
    return user


@pytest.fixture
def seller_user(test_db, sample_seller):
    """Create a regular user bound to the sample seller."""
    user = User(
        username="clerk",
        email="clerk@example.com",
        role=UserRole.USER,
        seller_id=sample_seller.id,
    )
    test_db.add(user)
    test_db.commit()
    return user


@pytest.fixture
def yearly_scheme(test_db, sample_seller):
    """Active yearly scheme effective from the start of 2025."""
    scheme = NumberingScheme(
        seller_id=sample_seller.id,
        template="INV-{YYYY}-{SEQ:5}",
        reset_period=ResetPeriod.YEARLY,
        effective_from=date(2025, 1, 1),
        version=1,
        status=SchemeStatus.ACTIVE,
    )
    test_db.add(scheme)
    test_db.commit()
    return scheme


@pytest.fixture
def counter_service():
    """Counter service with its own lock arena."""
    return InvoiceCounterService()


@pytest.fixture
def scheme_service():
    return NumberingSchemeService()


@pytest.fixture
def invoice_service(counter_service, scheme_service):
    return InvoiceNumberService(counters=counter_service, schemes=scheme_service)
