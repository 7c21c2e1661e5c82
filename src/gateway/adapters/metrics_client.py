# Author: Bradley R. Kinnard — counting everything

"""Prometheus metrics. Import and use from anywhere."""

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest

# one per finished request, outcome = "success" or the error kind
requests_total = Counter(
    "gateway_requests_total",
    "Action requests by outcome",
    ["action", "outcome"]
)

# latency of a single upstream attempt
provider_latency = Histogram(
    "provider_latency_seconds",
    "Time spent waiting on the AI provider",
    ["action"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0]
)

provider_error_total = Counter(
    "provider_error_total",
    "Provider failures by kind",
    ["kind"]
)

provider_retry_total = Counter(
    "provider_retry_total",
    "Dispatcher retries after a retryable provider failure",
    ["action"]
)

rate_limit_hit_total = Counter(
    "rate_limit_hit_total",
    "Requests rejected by rate limiter"
)


def get_metrics() -> bytes:
    """dump all metrics in prometheus format"""
    return generate_latest(REGISTRY)
