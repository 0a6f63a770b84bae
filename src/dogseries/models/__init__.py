"""
dogseries data models package.

This package contains the aggregated snapshot types consumed by the backend.
"""

from dogseries.models.metrics import Counter, Gauge, MetricMap, Percentile, Set, Timer

__all__ = ["Counter", "Gauge", "MetricMap", "Percentile", "Set", "Timer"]
