"""Financial formula endpoints - anomalies, forecasts, runway, break-even, margins"""

import math
from fastapi import APIRouter, HTTPException, Query

from movasafe_analytics.api.v1.schemas import (
    AnomalyRequest,
    AnomalyResponse,
    AnomalySchema,
    BreakEvenResponse,
    DaysOfCashResponse,
    ForecastRequest,
    ForecastResponse,
    FormattedCurrencyResponse,
    PercentageChangeResponse,
    ProfitMarginResponse,
)
from movasafe_analytics.config import settings
from movasafe_analytics.domain import financial
from movasafe_analytics.domain.models import AnomalyThreshold
from movasafe_analytics.infrastructure.observability.metrics import forecast_counter, record_anomalies

router = APIRouter()


@router.post("/financial/anomalies", response_model=AnomalyResponse)
def detect_anomalies(request_body: AnomalyRequest):
    """Check a metric snapshot against threshold rules"""
    thresholds = [AnomalyThreshold(field=t.field, threshold=t.threshold, type=t.type) for t in request_body.thresholds]

    anomalies = financial.detect_anomalies(request_body.data, thresholds, request_body.previous_data)

    record_anomalies(anomalies)

    return AnomalyResponse(
        anomalies=[
            AnomalySchema(
                field=a.field,
                value=a.value,
                threshold=a.threshold,
                severity=a.severity,
                message=a.message,
            )
            for a in anomalies
        ]
    )


@router.post("/financial/forecast", response_model=ForecastResponse)
def generate_forecast(request_body: ForecastRequest):
    """Project future values from a historical series"""
    try:
        forecast = financial.generate_forecast(
            request_body.historical,
            request_body.periods,
            method=request_body.method,
            growth_rate=request_body.growth_rate,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except OverflowError:
        forecast = None

    if forecast is None or not all(math.isfinite(v) for v in forecast):
        raise HTTPException(status_code=422, detail="Forecast overflowed; lower periods or growth_rate")

    forecast_counter.labels(method=request_body.method).inc()
    return ForecastResponse(method=request_body.method, forecast=forecast)


@router.get("/financial/percentage-change", response_model=PercentageChangeResponse)
def get_percentage_change(current: float = Query(...), previous: float = Query(...)):
    result = financial.percentage_change(current, previous)
    return PercentageChangeResponse(change=result.change, trend=result.trend)


@router.get("/financial/days-of-cash", response_model=DaysOfCashResponse)
def get_days_of_cash(cash_balance: float = Query(...), monthly_burn_rate: float = Query(...)):
    """Days of runway; `days` is null and `unlimited` true when nothing burns"""
    days = financial.days_of_cash_remaining(cash_balance, monthly_burn_rate)
    if math.isinf(days):
        return DaysOfCashResponse(days=None, unlimited=True)
    return DaysOfCashResponse(days=days, unlimited=False)


@router.get("/financial/break-even", response_model=BreakEvenResponse)
def get_break_even(
    fixed_costs: float = Query(...),
    variable_cost_per_unit: float = Query(...),
    price_per_unit: float = Query(...),
):
    """Break-even point; null values and `reachable` false without a positive margin"""
    result = financial.calculate_break_even(fixed_costs, variable_cost_per_unit, price_per_unit)
    if math.isinf(result.units):
        return BreakEvenResponse(units=None, revenue=None, reachable=False)
    return BreakEvenResponse(units=result.units, revenue=result.revenue, reachable=True)


@router.get("/financial/profit-margin", response_model=ProfitMarginResponse)
def get_profit_margin(revenue: float = Query(...), costs: float = Query(...)):
    return ProfitMarginResponse(margin=financial.calculate_profit_margin(revenue, costs))


@router.get("/financial/format-currency", response_model=FormattedCurrencyResponse)
def get_formatted_currency(
    amount: float = Query(...),
    currency: str = Query(None),
    decimals: int = Query(0, ge=0, le=8),
):
    formatted = financial.format_currency(amount, currency or settings.default_currency, decimals)
    return FormattedCurrencyResponse(formatted=formatted)
