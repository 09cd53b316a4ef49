"""Dashboard report assembly - runs every trend view over one validated transaction list"""

from dataclasses import dataclass
from datetime import date, timezone, tzinfo
from typing import Any, Dict, Iterable, List
from movasafe_analytics.domain.models import (
    AverageValuePoint,
    DayBucket,
    RevenueByType,
    RevenuePoint,
    RiskDistribution,
    RiskPoint,
    SummaryMetrics,
    TypeBreakdown,
    UserActivityPoint,
)
from movasafe_analytics.domain.filters import DEFAULT_FILTERS, AnalyticsFilters, apply_filters
from movasafe_analytics.domain.validation import RejectedRecord, parse_transactions
from movasafe_analytics.domain import trends
from movasafe_analytics.utils.date_utils import as_date


@dataclass
class AnalyticsReport:
    """Every series and KPI the analytics page renders for one window"""

    start_date: date
    end_date: date
    daily: List[DayBucket]
    user_activity: List[UserActivityPoint]
    revenue: List[RevenuePoint]
    average_value: List[AverageValuePoint]
    risk: List[RiskPoint]
    by_type: Dict[str, TypeBreakdown]
    revenue_by_type: Dict[str, RevenueByType]
    summary: SummaryMetrics
    risk_distribution: RiskDistribution
    rejected: List[RejectedRecord]
    undated_count: int


def build_report(
    records: Iterable[Any],
    start: date,
    end: date,
    tz: tzinfo = timezone.utc,
    filters: AnalyticsFilters = DEFAULT_FILTERS,
) -> AnalyticsReport:
    """
    Main entry point: validate raw records, then compute every view.

    Daily series are limited to [start, end]. KPI and breakdown views cover
    the in-window transactions plus any whose timestamp could not be parsed,
    since those views do not need a date.

    Raises:
        InvalidDateRangeError: If end is before start
    """
    start_day = as_date(start, tz)
    end_day = as_date(end, tz)

    validation = parse_transactions(records)
    transactions = apply_filters(validation.transactions, filters)

    daily = trends.daily_trend(transactions, start_day, end_day, tz)

    windowed = [
        t for t in transactions
        if t.created_at is None or start_day <= as_date(t.created_at, tz) <= end_day
    ]

    return AnalyticsReport(
        start_date=start_day,
        end_date=end_day,
        daily=daily,
        user_activity=trends.user_activity(transactions, start_day, end_day, tz),
        revenue=trends.daily_revenue(transactions, start_day, end_day, tz),
        average_value=trends.daily_average_value(transactions, start_day, end_day, tz),
        risk=trends.daily_risk(transactions, start_day, end_day, tz),
        by_type=trends.by_type(windowed),
        revenue_by_type=trends.revenue_by_type(windowed),
        summary=trends.summary_metrics(windowed),
        risk_distribution=trends.risk_score_distribution(windowed),
        rejected=validation.rejected,
        undated_count=validation.undated_count,
    )
