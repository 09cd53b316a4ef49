"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timezone
from typing import Optional
from fastapi.testclient import TestClient
from movasafe_analytics.api.main import create_app
from movasafe_analytics.domain.models import Transaction, TransactionStatus


def make_transaction(
    user_id: str = "u1",
    amount: float = 100.0,
    status: TransactionStatus = TransactionStatus.SUCCESSFUL,
    created_at: Optional[datetime] = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
    transaction_type: str = "CASH_IN",
    charge_fee: Optional[float] = None,
    commission_amount: Optional[float] = None,
    transaction_id: str = "tx",
) -> Transaction:
    """Transaction with sensible defaults; override only what a test cares about"""
    return Transaction(
        transaction_id=transaction_id,
        user_id=user_id,
        amount=amount,
        transaction_type=transaction_type,
        status=status,
        created_at=created_at,
        charge_fee=charge_fee,
        commission_amount=commission_amount,
    )


@pytest.fixture
def txn():
    """Factory fixture for building transactions"""
    return make_transaction


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    app = create_app()
    return TestClient(app)


@pytest.fixture
def march_window() -> tuple[date, date]:
    return date(2025, 3, 1), date(2025, 3, 7)


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """A week of mixed wallet activity for three users"""
    day = lambda d, h=10: datetime(2025, 3, d, h, 0, tzinfo=timezone.utc)
    return [
        make_transaction("u1", 1000, TransactionStatus.SUCCESSFUL, day(1), "CASH_IN", charge_fee=10, transaction_id="t1"),
        make_transaction("u2", 500, TransactionStatus.FAILED, day(1), "CASH_OUT", transaction_id="t2"),
        make_transaction("u1", 300, TransactionStatus.SUCCESSFUL, day(2), "CASH_OUT", commission_amount=3, transaction_id="t3"),
        make_transaction("u3", 200, TransactionStatus.PENDING, day(4), "CASH_IN", transaction_id="t4"),
        make_transaction("u2", 700, TransactionStatus.ROLLED_BACK, day(4), "CASH_OUT", transaction_id="t5"),
        make_transaction("u3", 400, TransactionStatus.SUCCESSFUL, day(7, 23), "CASH_IN", charge_fee=4, transaction_id="t6"),
    ]


@pytest.fixture
def raw_records() -> list[dict]:
    """Provider-shaped camelCase records, one of them malformed"""
    return [
        {
            "id": "a1",
            "userId": "u1",
            "amount": 100,
            "transactionType": "CASH_IN",
            "status": "SUCCESSFUL",
            "chargeFee": 2,
            "createdAt": "2025-03-01T09:00:00Z",
        },
        {
            "id": "a2",
            "userId": "u2",
            "amount": 50,
            "transactionType": "CASH_OUT",
            "status": "FAILED",
            "createdAt": "2025-03-01T10:30:00Z",
        },
        {
            "id": "a3",
            "userId": "u3",
            "amount": "not-a-number",
            "transactionType": "CASH_IN",
            "status": "SUCCESSFUL",
            "createdAt": "2025-03-02T10:30:00Z",
        },
    ]
