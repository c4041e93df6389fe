"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from pennywise.api.main import create_app
from pennywise.infrastructure.database.models import Base
from pennywise.infrastructure.database.session import get_db
from pennywise.domain.models import (
    PaymentMethod,
    PaymentMethodConfig,
    Transaction,
    TransactionType,
)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def visa() -> PaymentMethodConfig:
    """Credit card closing on the 20th"""
    return PaymentMethodConfig(
        id=1,
        payment_method=PaymentMethod.CREDIT_CARD,
        alias="Visa",
        withdraw_day=20,
    )


@pytest.fixture
def cash() -> PaymentMethodConfig:
    return PaymentMethodConfig(id=2, payment_method=PaymentMethod.CASH, is_default=True)


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """September 2024 activity across cash, card and a delayed cheque"""
    return [
        Transaction(
            id=1,
            date=date(2024, 9, 10),
            amount=Decimal("50"),
            payment_method=PaymentMethod.CASH,
            description="Groceries",
        ),
        Transaction(
            id=2,
            date=date(2024, 9, 15),
            amount=Decimal("100"),
            payment_method=PaymentMethod.CREDIT_CARD,
            payment_method_config_id=1,
            description="Shoes",
        ),
        Transaction(
            id=3,
            date=date(2024, 9, 25),  # after the 20th, billed on the October statement
            amount=Decimal("200"),
            payment_method=PaymentMethod.CREDIT_CARD,
            payment_method_config_id=1,
            description="Flights",
        ),
        Transaction(
            id=4,
            date=date(2024, 9, 1),
            amount=Decimal("1000"),
            type=TransactionType.INCOME,
            description="Salary",
        ),
        Transaction(
            id=5,
            date=date(2024, 8, 20),
            amount=Decimal("70"),
            payment_method=PaymentMethod.CHEQUE,
            billing_delay_days=30,
            description="Plumber",
        ),
    ]
