"""
Aggregated metric snapshot models.

A MetricMap is what the statsd aggregator hands to a backend at the end of
each flush cycle. Every kind is keyed first by metric name, then by the raw
tags key of the entry (comma-joined tags, possibly empty).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TypeVar

from pydantic import BaseModel, Field, field_validator

__all__ = ["Counter", "Gauge", "MetricMap", "Percentile", "Set", "Timer"]


class Counter(BaseModel):
    """Aggregated counter for one flush interval."""

    value: int = Field(default=0, description="Raw count accumulated during the interval")
    per_second: float = Field(default=0.0, description="Count divided by the flush interval")
    flush: float = Field(default=0.0, description="Flush interval in seconds")


class Percentile(BaseModel):
    """One configured timer percentile, e.g. name="p90"."""

    name: str = Field(..., min_length=1, description="Label used as the metric suffix")
    value: float


class Timer(BaseModel):
    """Aggregated timer statistics for one flush interval."""

    min: float = 0.0
    max: float = 0.0
    count: int = 0
    per_second: float = 0.0
    mean: float = 0.0
    median: float = 0.0
    std_dev: float = 0.0
    sum: float = 0.0
    sum_squares: float = 0.0
    percentiles: list[Percentile] = Field(default_factory=list)
    flush: float = Field(default=0.0, description="Flush interval in seconds")


class Gauge(BaseModel):
    """Last reported gauge value."""

    value: float = 0.0
    flush: float = Field(default=0.0, description="Flush interval in seconds")


class Set(BaseModel):
    """Unique values seen during the interval."""

    values: set[str] = Field(default_factory=set)
    flush: float = Field(default=0.0, description="Flush interval in seconds")


EntryT = TypeVar("EntryT")


def _iter_entries(entries: dict[str, dict[str, EntryT]]) -> Iterator[tuple[str, str, EntryT]]:
    for name, by_tags in entries.items():
        for tags_key, entry in by_tags.items():
            yield name, tags_key, entry


class MetricMap(BaseModel):
    """Snapshot of one flush cycle's aggregated state.

    Read-only to the backend. Iteration follows insertion order so the same
    snapshot always expands into the same series.
    """

    num_stats: int = Field(default=0, ge=0, description="Total number of stats processed")
    processing_time: float = Field(default=0.0, ge=0, description="Aggregation duration in seconds")
    flush_interval: float = Field(default=0.0, ge=0, description="Flush interval in seconds")
    counters: dict[str, dict[str, Counter]] = Field(default_factory=dict)
    timers: dict[str, dict[str, Timer]] = Field(default_factory=dict)
    gauges: dict[str, dict[str, Gauge]] = Field(default_factory=dict)
    sets: dict[str, dict[str, Set]] = Field(default_factory=dict)

    @field_validator("counters", "timers", "gauges", "sets")
    @classmethod
    def _names_not_empty(cls, value: dict[str, dict]) -> dict[str, dict]:
        if any(not name.strip() for name in value):
            raise ValueError("metric names must not be empty")
        return value

    def iter_counters(self) -> Iterator[tuple[str, str, Counter]]:
        """Yield (name, tags_key, counter) for every counter entry."""
        return _iter_entries(self.counters)

    def iter_timers(self) -> Iterator[tuple[str, str, Timer]]:
        """Yield (name, tags_key, timer) for every timer entry."""
        return _iter_entries(self.timers)

    def iter_gauges(self) -> Iterator[tuple[str, str, Gauge]]:
        """Yield (name, tags_key, gauge) for every gauge entry."""
        return _iter_entries(self.gauges)

    def iter_sets(self) -> Iterator[tuple[str, str, Set]]:
        """Yield (name, tags_key, set) for every set entry."""
        return _iter_entries(self.sets)

    def each_counter(self, callback: Callable[[str, str, Counter], None]) -> None:
        """Call callback(name, tags_key, counter) for every counter entry."""
        _each(self.iter_counters(), callback)

    def each_timer(self, callback: Callable[[str, str, Timer], None]) -> None:
        """Call callback(name, tags_key, timer) for every timer entry."""
        _each(self.iter_timers(), callback)

    def each_gauge(self, callback: Callable[[str, str, Gauge], None]) -> None:
        """Call callback(name, tags_key, gauge) for every gauge entry."""
        _each(self.iter_gauges(), callback)

    def each_set(self, callback: Callable[[str, str, Set], None]) -> None:
        """Call callback(name, tags_key, set) for every set entry."""
        _each(self.iter_sets(), callback)


def _each(entries: Iterator[tuple[str, str, EntryT]], callback: Callable[[str, str, EntryT], None]) -> None:
    for name, tags_key, entry in entries:
        callback(name, tags_key, entry)
