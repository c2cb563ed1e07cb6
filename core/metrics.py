"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# License metrics
licenses_created_total = Counter(
    "licenses_created_total",
    "Total licenses created",
    ["trial"],
)

licenses_activated_total = Counter(
    "licenses_activated_total",
    "Total successful activations",
    ["outcome"],
)

licenses_revoked_total = Counter(
    "licenses_revoked_total",
    "Total licenses revoked",
)

licenses_expired_total = Counter(
    "licenses_expired_total",
    "Total licenses moved to expired by sweeps",
    ["reason"],
)

activation_rollbacks_total = Counter(
    "activation_rollbacks_total",
    "Total activation rollbacks",
)

payments_recorded_total = Counter(
    "payments_recorded_total",
    "Total payments recorded",
    ["payment_type"],
)

# Notification metrics
notifications_total = Counter(
    "notifications_total",
    "Total notifications attempted",
    ["kind", "outcome"],
)

# Sweep metrics
sweep_duration_seconds = Histogram(
    "sweep_duration_seconds",
    "Scheduled sweep duration in seconds",
    ["job"],
    buckets=[0.1, 0.5, 1.0, 5.0, 15.0, 60.0, 300.0],
)

# Cache metrics
cache_hits_total = Counter(
    "cache_hits_total",
    "Total cache hits",
    ["namespace"],
)

cache_misses_total = Counter(
    "cache_misses_total",
    "Total cache misses",
    ["namespace"],
)
