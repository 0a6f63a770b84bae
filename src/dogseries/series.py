"""
Series building for the Datadog series API.

Expands an aggregated MetricMap into the flat list of data points accepted by
``POST /api/v1/series``. Each metric kind fans out into a fixed set of points;
all points of one flush share a single capture timestamp.
"""

from __future__ import annotations

import json
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from dogseries.exceptions import SerializationError
from dogseries.models import MetricMap
from dogseries.utils.tags import extract_source_from_tags, normalise_tags

__all__ = ["GAUGE", "RATE", "DataPoint", "TimeSeries", "build_series"]

# Datadog metric types
GAUGE = "gauge"
RATE = "rate"

MetricType = Literal["gauge", "rate"]


class DataPoint(BaseModel):
    """One metric sample in Datadog wire format.

    Optional fields left as None are omitted from the payload.
    """

    metric: str = Field(..., min_length=1, description="Metric name")
    points: list[tuple[float, float]] = Field(..., description="[(unix_seconds, value)] pairs")
    host: str | None = None
    interval: float | None = Field(default=None, description="Interval in seconds the value covers")
    tags: list[str] | None = None
    type: MetricType | None = None


class TimeSeries(BaseModel):
    """The full batch of data points for one flush cycle.

    ``timestamp`` and ``hostname`` are batch-level settings applied to every
    point; they are not part of the serialized body.
    """

    series: list[DataPoint] = Field(default_factory=list)
    timestamp: int = Field(..., exclude=True, description="Capture time in unix seconds")
    hostname: str = Field(default="", exclude=True, description="Default host for points without a source tag")

    def add_metric(self, name: str, tags_key: str, metric_type: MetricType, value: float, interval: float) -> None:
        """Append one data point to the series.

        Args:
            name: Metric name
            tags_key: Raw comma-joined tags of the entry
            metric_type: GAUGE or RATE
            value: Sample value
            interval: Interval in seconds the value covers, 0 when unknown

        Raises:
            SerializationError: If the point is not valid in Datadog wire format
        """
        host, tags = extract_source_from_tags(tags_key)
        if not host:
            host = self.hostname
        normalised = normalise_tags(tags)
        try:
            point = DataPoint(
                metric=name,
                points=[(float(self.timestamp), float(value))],
                host=host or None,
                interval=interval or None,
                tags=normalised or None,
                type=metric_type,
            )
        except ValidationError as e:
            raise SerializationError(f"[datadog] invalid data point {name!r}, {e.error_count()} validation error(s)") from e
        self.series.append(point)

    def to_json(self) -> bytes:
        """Encode the series as the Datadog request body.

        Raises:
            SerializationError: If a value cannot be represented in JSON (NaN, infinity)
        """
        try:
            return json.dumps(self.model_dump(exclude_none=True), allow_nan=False, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"[datadog] unable to marshal TimeSeries, {e}") from e


def build_series(metrics: MetricMap, timestamp: int, hostname: str) -> TimeSeries | None:
    """Build the Datadog series for one flush cycle.

    Args:
        metrics: Aggregated snapshot of the flush cycle
        timestamp: Capture time in unix seconds, shared by every point
        hostname: Host used for entries without a source tag

    Returns:
        The built TimeSeries, or None when the snapshot holds no stats
        (nothing to send).

    Raises:
        SerializationError: If an entry cannot become a valid data point
    """
    if metrics.num_stats == 0:
        return None

    ts = TimeSeries(timestamp=timestamp, hostname=hostname)

    for key, tags_key, counter in metrics.iter_counters():
        ts.add_metric(key, tags_key, RATE, counter.per_second, counter.flush)
        ts.add_metric(f"{key}.count", tags_key, GAUGE, counter.value, counter.flush)

    for key, tags_key, timer in metrics.iter_timers():
        ts.add_metric(f"{key}.lower", tags_key, GAUGE, timer.min, timer.flush)
        ts.add_metric(f"{key}.upper", tags_key, GAUGE, timer.max, timer.flush)
        ts.add_metric(f"{key}.count", tags_key, GAUGE, timer.count, timer.flush)
        ts.add_metric(f"{key}.count_ps", tags_key, RATE, timer.per_second, timer.flush)
        ts.add_metric(f"{key}.mean", tags_key, GAUGE, timer.mean, timer.flush)
        ts.add_metric(f"{key}.median", tags_key, GAUGE, timer.median, timer.flush)
        ts.add_metric(f"{key}.std", tags_key, GAUGE, timer.std_dev, timer.flush)
        ts.add_metric(f"{key}.sum", tags_key, GAUGE, timer.sum, timer.flush)
        ts.add_metric(f"{key}.sum_squares", tags_key, GAUGE, timer.sum_squares, timer.flush)
        for pct in timer.percentiles:
            ts.add_metric(f"{key}.{pct.name}", tags_key, GAUGE, pct.value, timer.flush)

    for key, tags_key, gauge in metrics.iter_gauges():
        ts.add_metric(key, tags_key, GAUGE, gauge.value, gauge.flush)

    for key, tags_key, metric_set in metrics.iter_sets():
        ts.add_metric(key, tags_key, GAUGE, len(metric_set.values), metric_set.flush)

    ts.add_metric("statsd.numStats", "", GAUGE, metrics.num_stats, metrics.flush_interval)
    # processing_time is in seconds, Datadog gets milliseconds
    ts.add_metric("statsd.processingTime", "", GAUGE, metrics.processing_time * 1000, metrics.flush_interval)

    return ts
