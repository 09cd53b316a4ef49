"""Prometheus metrics for report volume, data quality, anomalies and provider health"""

from typing import Iterable
from prometheus_client import Counter, Histogram

from movasafe_analytics.domain.models import DetectedAnomaly
from movasafe_analytics.domain.validation import RejectedRecord

# Report metrics
report_counter = Counter(
    "movasafe_analytics_report_total",
    "Analytics reports built",
    ["source"],  # payload | provider
)

skipped_records_counter = Counter(
    "movasafe_analytics_skipped_records_total",
    "Transaction records rejected during validation",
    ["reason"],
)

# Financial utilities
anomaly_counter = Counter(
    "movasafe_analytics_anomalies_total",
    "Anomalies detected",
    ["severity"],  # low | medium | high | critical
)

forecast_counter = Counter(
    "movasafe_analytics_forecast_total",
    "Forecasts generated",
    ["method"],
)

# Transaction provider metrics
provider_latency_histogram = Histogram(
    "transaction_api_latency_seconds",
    "Transaction provider response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

provider_failures_counter = Counter(
    "transaction_api_failures_total",
    "Failed transaction provider calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_report(source: str, rejected: Iterable[RejectedRecord]) -> None:
    """Record a built report and why any of its input records were skipped"""
    report_counter.labels(source=source).inc()

    for record in rejected:
        # Keep label cardinality bounded: "unknown status: FOO" -> "unknown status"
        reason = record.reason.split(":", 1)[0]
        skipped_records_counter.labels(reason=reason).inc()


def record_anomalies(anomalies: Iterable[DetectedAnomaly]) -> None:
    for anomaly in anomalies:
        anomaly_counter.labels(severity=anomaly.severity).inc()
