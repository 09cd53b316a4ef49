"""Time-bucketing and trend engine - per-day series and aggregate views over transactions"""

from collections import defaultdict
from datetime import date, datetime, timezone, tzinfo
from typing import Dict, Iterable, List, Sequence, Union
from movasafe_analytics.domain.models import (
    AverageValuePoint,
    DayBucket,
    RevenueByType,
    RevenuePoint,
    RiskDistribution,
    RiskPoint,
    SummaryMetrics,
    Transaction,
    TransactionStatus,
    TypeBreakdown,
    UserActivityPoint,
    fee_of,
)
from movasafe_analytics.domain.exceptions import InvalidDateRangeError
from movasafe_analytics.domain.validation import partition_dated
from movasafe_analytics.utils.date_utils import as_date, generate_date_range, local_date

DateLike = Union[date, datetime]

# Risk score weights per status; SUCCESSFUL lowers the score, floored at 0
FAILED_RISK_WEIGHT = 2.0
ROLLED_BACK_RISK_WEIGHT = 3.0
SUCCESS_RISK_CREDIT = 0.5

MEDIUM_RISK_SCORE = 2.0
HIGH_RISK_SCORE = 5.0


def _percentage(part: int, total: int) -> float:
    return part / total * 100 if total > 0 else 0.0


def bucket_by_day(
    transactions: Iterable[Transaction],
    start: DateLike,
    end: DateLike,
    tz: tzinfo = timezone.utc,
) -> Dict[date, List[Transaction]]:
    """
    Partition transactions into calendar-day buckets over [start, end].

    Every day of the window gets a key, in chronological order, even when it
    has no transactions. Transactions outside the window and transactions
    without a parsable timestamp are left out.

    Raises:
        InvalidDateRangeError: If end is before start
    """
    start_day = as_date(start, tz)
    end_day = as_date(end, tz)
    if end_day < start_day:
        raise InvalidDateRangeError(f"end date {end_day} is before start date {start_day}")

    buckets: Dict[date, List[Transaction]] = {day: [] for day in generate_date_range(start_day, end_day)}

    dated, _ = partition_dated(transactions)
    for txn in dated:
        day = local_date(txn.created_at, tz)
        if day in buckets:
            buckets[day].append(txn)

    return buckets


def daily_trend(
    transactions: Iterable[Transaction],
    start: DateLike,
    end: DateLike,
    tz: tzinfo = timezone.utc,
) -> List[DayBucket]:
    """
    One DayBucket per calendar day in [start, end], inclusive.

    Volume sums successful transactions only; count, active users and the
    failure rate cover every transaction of the day.
    """
    trend = []
    for day, day_txns in bucket_by_day(transactions, start, end, tz).items():
        successful = [t for t in day_txns if t.status == TransactionStatus.SUCCESSFUL]
        failed_count = sum(1 for t in day_txns if t.status == TransactionStatus.FAILED)
        pending_count = sum(1 for t in day_txns if t.status == TransactionStatus.PENDING)

        trend.append(
            DayBucket(
                date=day,
                volume=sum(t.amount for t in successful),
                count=len(day_txns),
                active_users=len({t.user_id for t in day_txns}),
                successful_count=len(successful),
                failed_count=failed_count,
                pending_count=pending_count,
                failure_rate=_percentage(failed_count, len(day_txns)),
            )
        )

    return trend


def by_type(transactions: Iterable[Transaction]) -> Dict[str, TypeBreakdown]:
    """Count, outcome split and amounts per transaction type (all statuses)"""
    grouped: Dict[str, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[txn.transaction_type].append(txn)

    breakdown = {}
    for txn_type, txns in grouped.items():
        total_amount = sum(t.amount for t in txns)
        breakdown[txn_type] = TypeBreakdown(
            transaction_type=txn_type,
            count=len(txns),
            success_count=sum(1 for t in txns if t.status == TransactionStatus.SUCCESSFUL),
            fail_count=sum(1 for t in txns if t.status == TransactionStatus.FAILED),
            total_amount=total_amount,
            avg_amount=total_amount / len(txns) if txns else 0.0,
        )

    return breakdown


def by_user_first_seen(
    transactions: Iterable[Transaction],
    tz: tzinfo = timezone.utc,
) -> Dict[str, date]:
    """Earliest local date each user transacted on; undated transactions are ignored"""
    first_seen: Dict[str, date] = {}
    dated, _ = partition_dated(transactions)
    for txn in dated:
        day = local_date(txn.created_at, tz)
        if txn.user_id not in first_seen or day < first_seen[txn.user_id]:
            first_seen[txn.user_id] = day
    return first_seen


def user_activity(
    transactions: Sequence[Transaction],
    start: DateLike,
    end: DateLike,
    tz: tzinfo = timezone.utc,
) -> List[UserActivityPoint]:
    """
    New vs returning users per day.

    A user is new on day D if their earliest transaction in the supplied list
    falls on D, returning otherwise.
    """
    first_seen = by_user_first_seen(transactions, tz)

    points = []
    for day, day_txns in bucket_by_day(transactions, start, end, tz).items():
        users = {t.user_id for t in day_txns}
        new_users = sum(1 for user_id in users if first_seen.get(user_id) == day)
        points.append(
            UserActivityPoint(
                date=day,
                new_users=new_users,
                returning_users=len(users) - new_users,
                active_users=len(users),
            )
        )

    return points


def summary_metrics(transactions: Sequence[Transaction]) -> SummaryMetrics:
    """
    Headline KPIs for a transaction list.

    Volume and fees count successful transactions only. Rates are percentages
    and are 0 for an empty list.
    """
    successful = [t for t in transactions if t.status == TransactionStatus.SUCCESSFUL]
    failed_count = sum(1 for t in transactions if t.status == TransactionStatus.FAILED)
    total = len(transactions)

    return SummaryMetrics(
        total_transactions=total,
        total_volume=sum(t.amount for t in successful),
        active_users=len({t.user_id for t in transactions}),
        success_rate=_percentage(len(successful), total),
        total_fees=sum(fee_of(t) for t in successful),
        failure_rate=_percentage(failed_count, total),
    )


def user_risk_scores(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """
    Running risk score per user, processed in input order.

    FAILED adds 2, ROLLED_BACK adds 3, SUCCESSFUL subtracts 0.5 with the
    score floored at 0 after each step. Other statuses register the user
    without changing the score. Because of the floor, the result depends on
    input order: a success seen before any failure is absorbed by the floor,
    the same success seen after a failure is not.
    """
    scores: Dict[str, float] = {}
    for txn in transactions:
        score = scores.get(txn.user_id, 0.0)
        if txn.status == TransactionStatus.FAILED:
            score += FAILED_RISK_WEIGHT
        elif txn.status == TransactionStatus.ROLLED_BACK:
            score += ROLLED_BACK_RISK_WEIGHT
        elif txn.status == TransactionStatus.SUCCESSFUL:
            score = max(0.0, score - SUCCESS_RISK_CREDIT)
        scores[txn.user_id] = score
    return scores


def risk_score_distribution(transactions: Iterable[Transaction]) -> RiskDistribution:
    """Bucket users by final risk score: low (<2), medium (<5), high (>=5)"""
    distribution = RiskDistribution(low=0, medium=0, high=0)
    for score in user_risk_scores(transactions).values():
        if score < MEDIUM_RISK_SCORE:
            distribution.low += 1
        elif score < HIGH_RISK_SCORE:
            distribution.medium += 1
        else:
            distribution.high += 1
    return distribution


def daily_revenue(
    transactions: Iterable[Transaction],
    start: DateLike,
    end: DateLike,
    tz: tzinfo = timezone.utc,
) -> List[RevenuePoint]:
    """Successful volume and fees per day"""
    points = []
    for day, day_txns in bucket_by_day(transactions, start, end, tz).items():
        successful = [t for t in day_txns if t.status == TransactionStatus.SUCCESSFUL]
        points.append(
            RevenuePoint(
                date=day,
                fees=sum(fee_of(t) for t in successful),
                revenue=sum(t.amount for t in successful),
            )
        )
    return points


def revenue_by_type(transactions: Iterable[Transaction]) -> Dict[str, RevenueByType]:
    """Successful volume and fees per transaction type"""
    result: Dict[str, RevenueByType] = {}
    for txn in transactions:
        if txn.status != TransactionStatus.SUCCESSFUL:
            continue
        entry = result.setdefault(
            txn.transaction_type,
            RevenueByType(transaction_type=txn.transaction_type, revenue=0.0, fees=0.0),
        )
        entry.revenue += txn.amount
        entry.fees += fee_of(txn)
    return result


def daily_average_value(
    transactions: Iterable[Transaction],
    start: DateLike,
    end: DateLike,
    tz: tzinfo = timezone.utc,
) -> List[AverageValuePoint]:
    """Mean successful transaction amount per day, 0 on days without successes"""
    points = []
    for day, day_txns in bucket_by_day(transactions, start, end, tz).items():
        amounts = [t.amount for t in day_txns if t.status == TransactionStatus.SUCCESSFUL]
        points.append(
            AverageValuePoint(
                date=day,
                avg_value=sum(amounts) / len(amounts) if amounts else 0.0,
            )
        )
    return points


def daily_risk(
    transactions: Iterable[Transaction],
    start: DateLike,
    end: DateLike,
    tz: tzinfo = timezone.utc,
) -> List[RiskPoint]:
    """Flagged (failed or rolled back) transactions per day"""
    flagged_statuses = (TransactionStatus.FAILED, TransactionStatus.ROLLED_BACK)
    return [
        RiskPoint(date=day, flagged=sum(1 for t in day_txns if t.status in flagged_statuses))
        for day, day_txns in bucket_by_day(transactions, start, end, tz).items()
    ]
