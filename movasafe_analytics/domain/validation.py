"""Up-front validation of raw transaction records from the wallet API"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from movasafe_analytics.domain.exceptions import InvalidTransactionDataError
from movasafe_analytics.domain.models import Transaction, TransactionStatus
from movasafe_analytics.utils.date_utils import parse_timestamp


@dataclass(frozen=True)
class RejectedRecord:
    """Raw record that could not be turned into a Transaction"""

    index: int
    reason: str
    record: Any


@dataclass
class ValidationResult:
    """Partition of raw input into usable transactions and rejected records"""

    transactions: List[Transaction] = field(default_factory=list)
    rejected: List[RejectedRecord] = field(default_factory=list)

    @property
    def undated_count(self) -> int:
        return sum(1 for t in self.transactions if t.created_at is None)

    def rejection_reasons(self) -> Counter:
        return Counter(r.reason for r in self.rejected)


def _pick(record: Mapping[str, Any], *keys: str) -> Any:
    """First non-None value among camelCase / snake_case spellings"""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_transaction(record: Mapping[str, Any]) -> Transaction:
    """
    Build a Transaction from a raw provider record.

    Required: userId, status (a known TransactionStatus) and a non-negative
    numeric amount. Fee fields are enrichment only: unusable values are
    dropped. An unparsable createdAt is kept as created_at=None so the record
    still counts toward aggregates that do not need a date.

    Raises:
        InvalidTransactionDataError: If a required field is missing or invalid
    """
    if not isinstance(record, Mapping):
        raise InvalidTransactionDataError("record is not an object")

    user_id = _pick(record, "userId", "user_id")
    if user_id is None or str(user_id).strip() == "":
        raise InvalidTransactionDataError("missing userId")

    raw_status = _pick(record, "status")
    if raw_status is None:
        raise InvalidTransactionDataError("missing status")
    try:
        status = TransactionStatus(str(raw_status).upper())
    except ValueError as e:
        raise InvalidTransactionDataError(f"unknown status: {raw_status}") from e

    amount = _to_number(_pick(record, "amount"))
    if amount is None:
        raise InvalidTransactionDataError("amount is not numeric")
    if amount < 0:
        raise InvalidTransactionDataError("amount is negative")

    raw_created = _pick(record, "createdAt", "created_at")

    return Transaction(
        transaction_id=str(_pick(record, "id", "transactionId", "transaction_id") or ""),
        user_id=str(user_id),
        amount=amount,
        transaction_type=str(_pick(record, "transactionType", "transaction_type") or "UNKNOWN"),
        status=status,
        created_at=parse_timestamp(raw_created),
        charge_fee=_to_number(_pick(record, "chargeFee", "charge_fee")),
        commission_amount=_to_number(_pick(record, "commissionAmount", "commission_amount")),
        description=_pick(record, "description"),
        currency=_pick(record, "currency"),
    )


def parse_transactions(records: Iterable[Any]) -> ValidationResult:
    """
    Partition raw records into valid transactions and rejected records.

    Never raises on individual records. Transaction instances pass through
    unchanged.
    """
    result = ValidationResult()

    for index, record in enumerate(records):
        if isinstance(record, Transaction):
            result.transactions.append(record)
            continue
        try:
            result.transactions.append(parse_transaction(record))
        except InvalidTransactionDataError as e:
            result.rejected.append(RejectedRecord(index=index, reason=str(e), record=record))

    if result.rejected:
        logging.warning(
            "Skipped malformed transaction records",
            extra={
                "skipped": len(result.rejected),
                "reasons": dict(result.rejection_reasons()),
            },
        )
    if result.undated_count:
        logging.warning(
            "Transactions with unparsable timestamps excluded from daily views",
            extra={"undated": result.undated_count},
        )

    return result


def partition_dated(transactions: Iterable[Transaction]) -> Tuple[List[Transaction], List[Transaction]]:
    """Split transactions into (dated, undated) by whether created_at parsed"""
    dated: List[Transaction] = []
    undated: List[Transaction] = []
    for txn in transactions:
        (dated if txn.created_at is not None else undated).append(txn)
    return dated, undated
