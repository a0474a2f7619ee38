"""
Metrics definitions for SafeZone.

This module defines Prometheus metrics for monitoring
the score sweep and location classification.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
sweeps_total = Counter(
    "safezone_sweeps_total",
    "Number of zone score sweeps",
    ["status"]
)

zone_score_failures = Counter(
    "safezone_zone_score_failures_total",
    "Number of per-zone score computations that failed and kept the previous value"
)

classifications_total = Counter(
    "safezone_classifications_total",
    "Number of location classifications",
    ["zone_type"]
)

# 히스토그램 메트릭
sweep_seconds = Histogram(
    "safezone_sweep_duration_seconds",
    "Time spent recomputing all zone scores",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0]
)

classify_seconds = Histogram(
    "safezone_classify_duration_seconds",
    "Time spent classifying a location",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05]
)

# 게이지 메트릭
cached_zone_scores = Gauge(
    "safezone_cached_zone_scores",
    "Current number of zones in the score cache"
)

score_cache_age_seconds = Gauge(
    "safezone_score_cache_age_seconds",
    "Seconds since the last successful sweep"
)

uptime_seconds = Gauge(
    "safezone_uptime_seconds",
    "Service uptime in seconds"
)
