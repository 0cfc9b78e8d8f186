"""Prometheus metrics for monitoring quotes, accepted arrangements, and webhook performance"""

from prometheus_client import Counter, Histogram

# Calculator metrics
quote_counter = Counter(
    "arrangement_quote_total",
    "Payment quotes computed",
    ["frequency"],  # weekly | biweekly | monthly
)

minimum_floor_counter = Counter(
    "arrangement_minimum_floor_applied_total",
    "Quotes raised to the minimum monthly payment",
)

summary_counter = Counter(
    "arrangement_summary_total",
    "Arrangement summaries rendered",
    ["plan_type"],
)

# Acceptance metrics
arrangement_accepted_counter = Counter(
    "arrangement_accepted_total",
    "Arrangements accepted by consumers",
    ["plan_type"],
)

monthly_base_bucket_counter = Counter(
    "arrangement_monthly_base_bucket",
    "Accepted monthly base amounts by bucket",
    ["bucket"],  # $0, $0-$50, $50-$250, $250-$1000, $1000+
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Payments webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quote(frequency: str, floor_applied: bool) -> None:
    """Record a quote and whether the minimum payment floor kicked in"""
    quote_counter.labels(frequency=frequency).inc()
    if floor_applied:
        minimum_floor_counter.inc()


def record_summary(plan_type: str) -> None:
    summary_counter.labels(plan_type=plan_type).inc()


def record_acceptance(plan_type: str, monthly_base_cents: int) -> None:
    """Record acceptance metrics for plan mix and payment size distribution"""
    arrangement_accepted_counter.labels(plan_type=plan_type).inc()

    if monthly_base_cents == 0:
        bucket = "$0"
    elif monthly_base_cents <= 5_000:
        bucket = "$0-$50"
    elif monthly_base_cents <= 25_000:
        bucket = "$50-$250"
    elif monthly_base_cents <= 100_000:
        bucket = "$250-$1000"
    else:
        bucket = "$1000+"

    monthly_base_bucket_counter.labels(bucket=bucket).inc()
