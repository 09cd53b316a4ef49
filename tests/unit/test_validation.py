"""Unit tests for raw record validation and the fee accessor"""

import pytest
from datetime import datetime, timedelta, timezone
from movasafe_analytics.domain.models import TransactionStatus, fee_of
from movasafe_analytics.domain.exceptions import InvalidTransactionDataError
from movasafe_analytics.domain.validation import parse_transaction, parse_transactions, partition_dated
from movasafe_analytics.utils.date_utils import parse_timestamp


def test_parse_transaction_camel_case_record():
    txn = parse_transaction(
        {
            "id": "abc",
            "userId": 42,
            "amount": "1500.50",
            "transactionType": "CASH_OUT",
            "status": "successful",
            "chargeFee": 25,
            "createdAt": "2025-03-01T08:15:00Z",
            "currency": "RWF",
        }
    )

    assert txn.transaction_id == "abc"
    assert txn.user_id == "42"
    assert txn.amount == 1500.5
    assert txn.transaction_type == "CASH_OUT"
    assert txn.status == TransactionStatus.SUCCESSFUL
    assert txn.charge_fee == 25
    assert txn.created_at == datetime(2025, 3, 1, 8, 15, tzinfo=timezone.utc)
    assert txn.currency == "RWF"


def test_parse_transaction_keeps_unparsable_timestamp_as_none():
    txn = parse_transaction({"userId": "u1", "amount": 10, "status": "FAILED", "createdAt": "yesterday-ish"})
    assert txn.created_at is None


@pytest.mark.parametrize(
    "record, reason",
    [
        ({"amount": 10, "status": "SUCCESSFUL"}, "missing userId"),
        ({"userId": "u1", "amount": 10}, "missing status"),
        ({"userId": "u1", "amount": 10, "status": "EXPIRED"}, "unknown status: EXPIRED"),
        ({"userId": "u1", "amount": "ten", "status": "SUCCESSFUL"}, "amount is not numeric"),
        ({"userId": "u1", "amount": True, "status": "SUCCESSFUL"}, "amount is not numeric"),
        ({"userId": "u1", "amount": -1, "status": "SUCCESSFUL"}, "amount is negative"),
        ("not a record", "record is not an object"),
    ],
)
def test_parse_transaction_rejects_invalid_records(record, reason):
    with pytest.raises(InvalidTransactionDataError, match=reason):
        parse_transaction(record)


def test_parse_transaction_drops_unusable_fee():
    txn = parse_transaction({"userId": "u1", "amount": 10, "status": "SUCCESSFUL", "chargeFee": "n/a", "commissionAmount": 3})
    assert txn.charge_fee is None
    assert fee_of(txn) == 3


def test_parse_transactions_partitions_without_raising(raw_records):
    result = parse_transactions(raw_records)

    assert [t.transaction_id for t in result.transactions] == ["a1", "a2"]
    assert len(result.rejected) == 1
    assert result.rejected[0].index == 2
    assert result.rejected[0].reason == "amount is not numeric"
    assert result.undated_count == 0


def test_parse_transactions_passes_transactions_through(txn):
    existing = txn()
    result = parse_transactions([existing])
    assert result.transactions == [existing]


def test_partition_dated(txn):
    dated, undated = partition_dated([txn(), txn(created_at=None), txn()])
    assert len(dated) == 2
    assert len(undated) == 1


def test_fee_precedence(txn):
    assert fee_of(txn(charge_fee=5, commission_amount=9)) == 5
    assert fee_of(txn(charge_fee=0, commission_amount=9)) == 0
    assert fee_of(txn(commission_amount=9)) == 9
    assert fee_of(txn()) == 0


def test_parse_timestamp_variants():
    assert parse_timestamp("2025-03-01T10:00:00Z") == datetime(2025, 3, 1, 10, tzinfo=timezone.utc)
    assert parse_timestamp("2025-03-01T10:00:00+02:00").utcoffset() == timedelta(hours=2)
    assert parse_timestamp("2025-03-01T10:00:00") == datetime(2025, 3, 1, 10)
    assert parse_timestamp("garbage") is None
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None
