"""Analytics report endpoints - daily trends, KPIs and breakdowns for the dashboard"""

import time
import logging
from datetime import date, datetime, tzinfo
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from movasafe_analytics.api.v1.schemas import (
    AverageValueSchema,
    DayBucketSchema,
    RejectedRecordSchema,
    ReportRequest,
    ReportResponse,
    RevenueByTypeSchema,
    RevenuePointSchema,
    RiskDistributionSchema,
    RiskPointSchema,
    SummarySchema,
    TypeBreakdownSchema,
    UserActivitySchema,
)
from movasafe_analytics.api.dependencies import (
    get_reporting_timezone,
    get_request_id,
    get_transaction_client,
    timezone_or_422,
)
from movasafe_analytics.config import settings
from movasafe_analytics.domain.exceptions import InvalidDateRangeError, TransactionAPIError
from movasafe_analytics.domain.filters import DEFAULT_FILTERS, resolve_date_range
from movasafe_analytics.domain.report import AnalyticsReport, build_report
from movasafe_analytics.infrastructure.clients.transactions import TransactionClient
from movasafe_analytics.infrastructure.observability.logging import log_report
from movasafe_analytics.infrastructure.observability.metrics import provider_failures_counter, record_report

router = APIRouter()


def to_response(report: AnalyticsReport, tz: tzinfo) -> ReportResponse:
    """Map a domain report onto the wire schema"""
    return ReportResponse(
        start_date=report.start_date,
        end_date=report.end_date,
        timezone=str(tz),
        daily=[
            DayBucketSchema(
                date=b.date,
                label=b.label,
                volume=b.volume,
                count=b.count,
                active_users=b.active_users,
                successful_count=b.successful_count,
                failed_count=b.failed_count,
                pending_count=b.pending_count,
                failure_rate=b.failure_rate,
            )
            for b in report.daily
        ],
        user_activity=[
            UserActivitySchema(
                date=p.date,
                new_users=p.new_users,
                returning_users=p.returning_users,
                active_users=p.active_users,
            )
            for p in report.user_activity
        ],
        revenue=[RevenuePointSchema(date=p.date, fees=p.fees, revenue=p.revenue) for p in report.revenue],
        average_value=[AverageValueSchema(date=p.date, avg_value=p.avg_value) for p in report.average_value],
        risk=[RiskPointSchema(date=p.date, flagged=p.flagged) for p in report.risk],
        by_type=[
            TypeBreakdownSchema(
                type=t.transaction_type,
                label=t.label,
                count=t.count,
                success_count=t.success_count,
                fail_count=t.fail_count,
                total_amount=t.total_amount,
                avg_amount=t.avg_amount,
            )
            for t in report.by_type.values()
        ],
        revenue_by_type=[
            RevenueByTypeSchema(type=r.transaction_type, label=r.label, revenue=r.revenue, fees=r.fees)
            for r in report.revenue_by_type.values()
        ],
        summary=SummarySchema(
            total_transactions=report.summary.total_transactions,
            total_volume=report.summary.total_volume,
            active_users=report.summary.active_users,
            success_rate=report.summary.success_rate,
            total_fees=report.summary.total_fees,
            failure_rate=report.summary.failure_rate,
        ),
        risk_distribution=RiskDistributionSchema(
            low=report.risk_distribution.low,
            medium=report.risk_distribution.medium,
            high=report.risk_distribution.high,
        ),
        rejected=[RejectedRecordSchema(index=r.index, reason=r.reason) for r in report.rejected],
        undated_count=report.undated_count,
    )


@router.post("/analytics/report", response_model=ReportResponse)
def create_report(request_body: ReportRequest, request: Request):
    """
    Build every dashboard view from a caller-supplied transaction list.

    Records outside [start_date, end_date] are ignored, so callers may
    over-fetch. Malformed records are skipped and listed under `rejected`.

    Unknown filter values and inverted windows surface as 422 through the
    app-level domain error handler.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    tz = timezone_or_422(request_body.timezone or settings.reporting_timezone)

    filters = DEFAULT_FILTERS.with_overrides(
        transaction_type=request_body.transaction_type,
        status=request_body.status,
    )
    report = build_report(request_body.transactions, request_body.start_date, request_body.end_date, tz, filters)

    duration_ms = (time.time() - start_time) * 1000
    record_report("payload", report.rejected)
    log_report(
        request_id,
        "payload",
        len(request_body.transactions),
        len(report.rejected),
        len(report.daily),
        duration_ms,
    )

    return to_response(report, tz)


@router.get("/analytics/dashboard", response_model=ReportResponse)
async def get_dashboard(
    request: Request,
    date_range: str = Query("30d", description="7d, 30d or custom"),
    custom_start: Optional[date] = Query(None),
    custom_end: Optional[date] = Query(None),
    transaction_type: str = Query("all"),
    status: str = Query("all"),
    tz: tzinfo = Depends(get_reporting_timezone),
    transaction_client: TransactionClient = Depends(get_transaction_client),
):
    """
    Fetch transactions for the filtered window from the provider and build the report.

    Flow:
    1. Resolve the reporting window from the filters
    2. Fetch raw records from the transaction provider
    3. Validate, bucket and aggregate
    """
    start_time = time.time()
    request_id = get_request_id(request)

    filters = DEFAULT_FILTERS.with_overrides(
        date_range=date_range,
        custom_start=custom_start,
        custom_end=custom_end,
        transaction_type=transaction_type,
        status=status,
    )
    start, end = resolve_date_range(filters, datetime.now(tz).date())
    if end < start:
        raise InvalidDateRangeError(f"end date {end} is before start date {start}")

    try:
        records = await transaction_client.fetch_transactions(start, end, filters, tz)
        report = build_report(records, start, end, tz, filters)

    except TransactionAPIError as e:
        provider_failures_counter.inc()
        logging.error(f"Transaction API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Transaction service unavailable")

    duration_ms = (time.time() - start_time) * 1000
    record_report("provider", report.rejected)
    log_report(request_id, "provider", len(records), len(report.rejected), len(report.daily), duration_ms)

    return to_response(report, tz)
