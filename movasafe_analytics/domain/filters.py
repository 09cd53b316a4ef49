"""Immutable analytics filter values and date-window resolution"""

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple
from movasafe_analytics.domain.models import Transaction, TransactionStatus
from movasafe_analytics.domain.exceptions import InvalidFilterError

DATE_RANGES = {"7d": 7, "30d": 30}
CUSTOM_RANGE = "custom"
ALL = "all"


@dataclass(frozen=True)
class AnalyticsFilters:
    """Dashboard filter state passed explicitly into each analytics call"""

    date_range: str = "30d"  # 7d | 30d | custom
    custom_start: Optional[date] = None
    custom_end: Optional[date] = None
    transaction_type: str = ALL
    status: str = ALL

    def __post_init__(self):
        # Stored statuses are upper-case enum values
        status = self.status.upper()
        if status == ALL.upper():
            status = ALL
        elif status not in {s.value for s in TransactionStatus}:
            raise InvalidFilterError(f"Unknown status filter: {self.status}")
        object.__setattr__(self, "status", status)

    def with_overrides(self, **overrides) -> "AnalyticsFilters":
        """New filters with the given fields replaced; None values are ignored"""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


DEFAULT_FILTERS = AnalyticsFilters()


def resolve_date_range(filters: AnalyticsFilters, today: date) -> Tuple[date, date]:
    """
    Reporting window (start, end) for a filter value, both inclusive.

    7d and 30d reach back that many days from `today`. A custom range missing
    either bound falls back to 30d.

    Raises:
        InvalidFilterError: If date_range is not recognised
    """
    if filters.date_range in DATE_RANGES:
        return today - timedelta(days=DATE_RANGES[filters.date_range]), today

    if filters.date_range != CUSTOM_RANGE:
        raise InvalidFilterError(f"Unknown date range: {filters.date_range}")

    if filters.custom_start is None or filters.custom_end is None:
        return today - timedelta(days=DATE_RANGES["30d"]), today

    return filters.custom_start, filters.custom_end


def apply_filters(transactions: Iterable[Transaction], filters: AnalyticsFilters) -> List[Transaction]:
    """Narrow transactions by type and status; date bounds are applied by bucketing"""
    selected = []
    for txn in transactions:
        if filters.transaction_type != ALL and txn.transaction_type != filters.transaction_type:
            continue
        if filters.status != ALL and txn.status.value != filters.status:
            continue
        selected.append(txn)
    return selected
