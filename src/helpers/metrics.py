"""Prometheus counters for the aggregation pipeline."""

from prometheus_client import Counter


SWALLOWED_ERRORS = Counter(
    "energy_api_swallowed_errors",
    "Sub-unit failures turned into empty or zero results",
    ["operation"],
)

CACHE_LOOKUPS = Counter(
    "energy_api_cache_lookups",
    "Cache lookups by outcome",
    ["outcome"],
)

UPSTREAM_REQUESTS = Counter(
    "energy_api_upstream_requests",
    "Requests issued to the upstream provider",
    ["endpoint"],
)


def record_swallowed_error(operation: str) -> None:
    """Count a batch sub-unit failure that was replaced by a default value."""
    SWALLOWED_ERRORS.labels(operation=operation).inc()


__all__ = [
    "CACHE_LOOKUPS",
    "SWALLOWED_ERRORS",
    "UPSTREAM_REQUESTS",
    "record_swallowed_error",
]
