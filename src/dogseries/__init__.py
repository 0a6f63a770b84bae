"""
dogseries - statsd backend that sends flush snapshots to Datadog.

Converts aggregated counters, timers, gauges and sets into the Datadog
series format and POSTs them with bounded exponential-backoff retries.

Examples:
    >>> from dogseries import DatadogClient, DatadogConfig, MetricMap
    >>> client = DatadogClient(DatadogConfig(api_key="my-secret-key"))
    >>> client.send_metrics(MetricMap())  # no stats, nothing is sent
"""

from dogseries.backend import BackendRegistry, MetricSender, backend_factory, register_backend
from dogseries.backoff import BackoffPolicy, retry
from dogseries.client import BACKEND_NAME, DatadogClient
from dogseries.config import SAMPLE_CONFIG, DatadogConfig
from dogseries.exceptions import (
    ConfigurationError,
    DeliveryError,
    DogseriesError,
    RequestBuildError,
    SerializationError,
)
from dogseries.models import Counter, Gauge, MetricMap, Percentile, Set, Timer
from dogseries.series import DataPoint, TimeSeries, build_series

__version__ = "0.1.0"
__all__ = [
    "BACKEND_NAME",
    "SAMPLE_CONFIG",
    "BackendRegistry",
    "BackoffPolicy",
    "ConfigurationError",
    "Counter",
    "DataPoint",
    "DatadogClient",
    "DatadogConfig",
    "DeliveryError",
    "DogseriesError",
    "Gauge",
    "MetricMap",
    "MetricSender",
    "Percentile",
    "RequestBuildError",
    "SerializationError",
    "Set",
    "TimeSeries",
    "Timer",
    "backend_factory",
    "build_series",
    "register_backend",
    "retry",
]
