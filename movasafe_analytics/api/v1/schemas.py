"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
import datetime
from typing import Any, Dict, List, Literal, Optional


class ReportRequest(BaseModel):
    """Request body for POST /v1/analytics/report"""

    transactions: List[Any] = Field(default_factory=list, description="Raw wallet transaction records; malformed entries are rejected one by one")
    start_date: datetime.date
    end_date: datetime.date
    timezone: Optional[str] = Field(None, description="IANA timezone for day bucketing")
    transaction_type: str = "all"
    status: str = "all"


class DayBucketSchema(BaseModel):
    date: datetime.date
    label: str
    volume: float
    count: int
    active_users: int
    successful_count: int
    failed_count: int
    pending_count: int
    failure_rate: float


class UserActivitySchema(BaseModel):
    date: datetime.date
    new_users: int
    returning_users: int
    active_users: int


class RevenuePointSchema(BaseModel):
    date: datetime.date
    fees: float
    revenue: float


class AverageValueSchema(BaseModel):
    date: datetime.date
    avg_value: float


class RiskPointSchema(BaseModel):
    date: datetime.date
    flagged: int


class TypeBreakdownSchema(BaseModel):
    type: str
    label: str
    count: int
    success_count: int
    fail_count: int
    total_amount: float
    avg_amount: float


class RevenueByTypeSchema(BaseModel):
    type: str
    label: str
    revenue: float
    fees: float


class SummarySchema(BaseModel):
    total_transactions: int
    total_volume: float
    active_users: int
    success_rate: float
    total_fees: float
    failure_rate: float


class RiskDistributionSchema(BaseModel):
    low: int
    medium: int
    high: int


class RejectedRecordSchema(BaseModel):
    index: int
    reason: str


class ReportResponse(BaseModel):
    """Response for the analytics report endpoints"""

    start_date: datetime.date
    end_date: datetime.date
    timezone: str
    daily: List[DayBucketSchema]
    user_activity: List[UserActivitySchema]
    revenue: List[RevenuePointSchema]
    average_value: List[AverageValueSchema]
    risk: List[RiskPointSchema]
    by_type: List[TypeBreakdownSchema]
    revenue_by_type: List[RevenueByTypeSchema]
    summary: SummarySchema
    risk_distribution: RiskDistributionSchema
    rejected: List[RejectedRecordSchema]
    undated_count: int


class ThresholdSchema(BaseModel):
    field: str
    threshold: float
    type: Literal["above", "below", "percentage_change"]


class AnomalyRequest(BaseModel):
    """Request body for POST /v1/financial/anomalies"""

    data: Dict[str, float]
    thresholds: List[ThresholdSchema]
    previous_data: Optional[Dict[str, float]] = None


class AnomalySchema(BaseModel):
    field: str
    value: float
    threshold: float
    severity: Literal["low", "medium", "high", "critical"]
    message: str


class AnomalyResponse(BaseModel):
    anomalies: List[AnomalySchema]


class ForecastRequest(BaseModel):
    """Request body for POST /v1/financial/forecast"""

    historical: List[float]
    periods: int = Field(6, ge=0, le=120)
    method: Literal["linear", "exponential", "moving_average"] = "linear"
    growth_rate: Optional[float] = None


class ForecastResponse(BaseModel):
    method: str
    forecast: List[float]


class PercentageChangeResponse(BaseModel):
    change: float
    trend: Literal["up", "down", "neutral"]


class DaysOfCashResponse(BaseModel):
    """days is null when cash never runs out"""

    days: Optional[int]
    unlimited: bool


class BreakEvenResponse(BaseModel):
    """units and revenue are null when break-even is unreachable"""

    units: Optional[int]
    revenue: Optional[float]
    reachable: bool


class ProfitMarginResponse(BaseModel):
    margin: float


class FormattedCurrencyResponse(BaseModel):
    formatted: str
