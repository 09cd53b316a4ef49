"""Domain models - pure Python dataclasses representing analytics entities"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from movasafe_analytics.utils.date_utils import month_day_label


class TransactionType(str, Enum):
    CASH_IN = "CASH_IN"
    CASH_OUT = "CASH_OUT"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESSFUL = "SUCCESSFUL"
    FAILED = "FAILED"
    ROLLED_BACK = "ROLLED_BACK"
    CANCELLED = "CANCELLED"


TYPE_LABELS = {
    TransactionType.CASH_IN.value: "Cash In",
    TransactionType.CASH_OUT.value: "Cash Out",
}


def type_label(transaction_type: str) -> str:
    """Display name for a transaction type, raw value for unknown types"""
    return TYPE_LABELS.get(transaction_type, str(transaction_type))


@dataclass(frozen=True)
class Transaction:
    """Wallet transaction from the transaction provider"""

    transaction_id: str
    user_id: str
    amount: float
    transaction_type: str  # CASH_IN, CASH_OUT, or a provider-specific value
    status: TransactionStatus
    created_at: Optional[datetime]  # None when the source timestamp was unparsable
    charge_fee: Optional[float] = None
    commission_amount: Optional[float] = None  # legacy alias of charge_fee
    description: Optional[str] = None
    currency: Optional[str] = None


def fee_of(transaction: Transaction) -> float:
    """Fee charged on a transaction: charge_fee, then legacy commission_amount, else 0"""
    if transaction.charge_fee is not None:
        return transaction.charge_fee
    if transaction.commission_amount is not None:
        return transaction.commission_amount
    return 0.0


@dataclass
class DayBucket:
    """Aggregates for one calendar day of the reporting window"""

    date: date
    volume: float
    count: int
    active_users: int
    successful_count: int
    failed_count: int
    pending_count: int
    failure_rate: float  # percentage, 0 when count is 0

    @property
    def label(self) -> str:
        return month_day_label(self.date)


@dataclass
class TypeBreakdown:
    """Counts and amounts for one transaction type"""

    transaction_type: str
    count: int
    success_count: int
    fail_count: int
    total_amount: float
    avg_amount: float

    @property
    def label(self) -> str:
        return type_label(self.transaction_type)


@dataclass
class SummaryMetrics:
    """Headline KPIs for a transaction list"""

    total_transactions: int
    total_volume: float
    active_users: int
    success_rate: float
    total_fees: float
    failure_rate: float


@dataclass
class RiskDistribution:
    """Number of users in each risk band"""

    low: int
    medium: int
    high: int


@dataclass
class UserActivityPoint:
    date: date
    new_users: int
    returning_users: int
    active_users: int


@dataclass
class RevenuePoint:
    date: date
    fees: float
    revenue: float


@dataclass
class AverageValuePoint:
    date: date
    avg_value: float


@dataclass
class RiskPoint:
    date: date
    flagged: int


@dataclass
class RevenueByType:
    transaction_type: str
    revenue: float
    fees: float

    @property
    def label(self) -> str:
        return type_label(self.transaction_type)


@dataclass(frozen=True)
class AnomalyThreshold:
    """Rule checked against a metric snapshot"""

    field: str
    threshold: float
    type: str  # above | below | percentage_change


@dataclass
class DetectedAnomaly:
    """Threshold breach with severity derived from the size of the deviation"""

    field: str
    value: float
    threshold: float
    severity: str  # low | medium | high | critical
    message: str


@dataclass
class PercentageChange:
    change: float
    trend: str  # up | down | neutral


@dataclass
class BreakEven:
    """Units and revenue needed to cover fixed costs; math.inf when unreachable"""

    units: float
    revenue: float
