"""Financial and statistical formulas used by reporting pages"""

import math
from typing import List, Mapping, Optional, Sequence
from movasafe_analytics.domain.models import AnomalyThreshold, BreakEven, DetectedAnomaly, PercentageChange
from movasafe_analytics.domain.exceptions import UnknownForecastMethodError, UnknownThresholdTypeError

TREND_DEAD_BAND = 0.1  # percentage points
DAYS_PER_MONTH = 30
MOVING_AVERAGE_WINDOW = 3

THRESHOLD_TYPES = ("above", "below", "percentage_change")
FORECAST_METHODS = ("linear", "exponential", "moving_average")


def percentage_change(current: float, previous: float) -> PercentageChange:
    """
    Relative change from previous to current, in percent, with a trend label.

    previous == 0 is defined rather than divided: 100% up when current is
    positive, otherwise 0% neutral. Changes within +/-0.1 points are neutral.
    """
    if previous == 0:
        if current > 0:
            return PercentageChange(change=100.0, trend="up")
        return PercentageChange(change=0.0, trend="neutral")

    change = (current - previous) / abs(previous) * 100

    if change > TREND_DEAD_BAND:
        trend = "up"
    elif change < -TREND_DEAD_BAND:
        trend = "down"
    else:
        trend = "neutral"

    return PercentageChange(change=change, trend=trend)


def days_of_cash_remaining(cash_balance: float, monthly_burn_rate: float) -> float:
    """Whole days of runway at the current burn; math.inf when nothing burns"""
    if monthly_burn_rate <= 0:
        return math.inf
    return math.floor(cash_balance / monthly_burn_rate * DAYS_PER_MONTH)


def severity_for(deviation_pct: float) -> str:
    """
    Severity band for a deviation expressed as a percentage of the threshold.

    >50 critical, >25 high, >10 medium, otherwise low. Band edges belong to
    the lower band.
    """
    if deviation_pct > 50:
        return "critical"
    if deviation_pct > 25:
        return "high"
    if deviation_pct > 10:
        return "medium"
    return "low"


def _relative_deviation(diff: float, base: float) -> float:
    """diff as a percentage of base, signed by base; math.inf when base is 0"""
    if base == 0:
        return math.inf
    return diff * 100 / base


def detect_anomalies(
    data: Mapping[str, float],
    thresholds: Sequence[AnomalyThreshold],
    previous_data: Optional[Mapping[str, float]] = None,
) -> List[DetectedAnomaly]:
    """
    Check a metric snapshot against threshold rules.

    Rules:
    - above: fires when value > threshold
    - below: fires when value < threshold
    - percentage_change: fires when |change vs previous_data| > threshold;
      skipped without previous_data or a non-zero previous value

    Fields missing from `data` are skipped silently.

    Raises:
        UnknownThresholdTypeError: If any rule has an unrecognised type
    """
    for rule in thresholds:
        if rule.type not in THRESHOLD_TYPES:
            raise UnknownThresholdTypeError(f"Unknown threshold type: {rule.type}")

    anomalies = []

    for rule in thresholds:
        value = data.get(rule.field)
        if value is None:
            continue

        if rule.type == "above":
            if value <= rule.threshold:
                continue
            excess = _relative_deviation(value - rule.threshold, rule.threshold)
            severity = severity_for(excess)
            message = f"{rule.field} exceeds threshold by {excess:.1f}%"

        elif rule.type == "below":
            if value >= rule.threshold:
                continue
            deficit = _relative_deviation(rule.threshold - value, rule.threshold)
            severity = severity_for(deficit)
            message = f"{rule.field} is below threshold by {deficit:.1f}%"

        else:
            previous = previous_data.get(rule.field) if previous_data else None
            if not previous:
                continue
            change = (value - previous) * 100 / abs(previous)
            if abs(change) <= rule.threshold:
                continue
            severity = severity_for(abs(change))
            message = f"{rule.field} changed by {change:.1f}%"

        anomalies.append(
            DetectedAnomaly(
                field=rule.field,
                value=value,
                threshold=rule.threshold,
                severity=severity,
                message=message,
            )
        )

    return anomalies


def average_growth_rate(values: Sequence[float]) -> float:
    """Mean period-over-period growth, skipping steps from a zero base"""
    rates = [
        (current - prior) / prior
        for prior, current in zip(values, values[1:])
        if prior != 0
    ]
    return sum(rates) / len(rates) if rates else 0.0


def generate_forecast(
    historical: Sequence[float],
    periods: int = 6,
    method: str = "linear",
    growth_rate: Optional[float] = None,
) -> List[float]:
    """
    Project `periods` future values from a historical series.

    Methods:
    - linear: least-squares line over 1-based indices, extended past the end
    - exponential: last value compounded by growth_rate, or by the mean
      historical growth rate when growth_rate is None
    - moving_average: mean of the last 3 points, held flat

    Empty history forecasts zeros; a single point is repeated.

    Raises:
        UnknownForecastMethodError: If method is not recognised
        ValueError: If periods is negative
    """
    if method not in FORECAST_METHODS:
        raise UnknownForecastMethodError(f"Unknown forecast method: {method}")
    if periods < 0:
        raise ValueError("periods must be non-negative")

    if not historical:
        return [0.0] * periods
    if len(historical) == 1:
        return [float(historical[0])] * periods

    n = len(historical)

    if method == "linear":
        sum_x = n * (n + 1) / 2
        sum_y = sum(historical)
        sum_xy = sum((i + 1) * y for i, y in enumerate(historical))
        sum_x2 = n * (n + 1) * (2 * n + 1) / 6

        slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
        intercept = (sum_y - slope * sum_x) / n

        return [intercept + slope * (n + i) for i in range(1, periods + 1)]

    if method == "exponential":
        last_value = historical[-1]
        rate = growth_rate if growth_rate is not None else average_growth_rate(historical)
        return [last_value * (1 + rate) ** i for i in range(1, periods + 1)]

    window = historical[-min(MOVING_AVERAGE_WINDOW, n):]
    avg = sum(window) / len(window)
    return [avg] * periods


def calculate_break_even(fixed_costs: float, variable_cost_per_unit: float, price_per_unit: float) -> BreakEven:
    """
    Units (rounded up) and revenue needed to cover fixed costs.

    Without a positive contribution margin break-even is never reached and
    both values are math.inf.
    """
    if price_per_unit <= variable_cost_per_unit:
        return BreakEven(units=math.inf, revenue=math.inf)

    contribution_margin = price_per_unit - variable_cost_per_unit
    units = math.ceil(fixed_costs / contribution_margin)
    return BreakEven(units=units, revenue=units * price_per_unit)


def calculate_profit_margin(revenue: float, costs: float) -> float:
    """Profit as a percentage of revenue; 0 when revenue is 0"""
    if revenue == 0:
        return 0.0
    return (revenue - costs) / revenue * 100


def format_currency(amount: Optional[float], currency: str = "RWF", decimals: int = 0) -> str:
    """
    Render an amount as a comma-grouped, fixed-precision string suffixed with the currency code.

    Example:
        format_currency(1234567.891, "RWF", decimals=2) -> "1,234,567.89 RWF"

    None and NaN render as zero; infinities render as the infinity sign.
    """
    if amount is None or (isinstance(amount, float) and math.isnan(amount)):
        amount = 0
    if math.isinf(amount):
        return f"{'-' if amount < 0 else ''}∞ {currency}"
    return f"{amount:,.{decimals}f} {currency}"
