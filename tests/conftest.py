"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dogseries.backoff import BackoffPolicy
from dogseries.config import DatadogConfig
from dogseries.models import Counter, Gauge, MetricMap, Percentile, Set, Timer

API_KEY = "s3cr3t-api-key"


@pytest.fixture(autouse=True)
def clean_env_for_tests(monkeypatch):
    """Clean environment variables for test isolation.

    Ensures a developer's real DATADOG_* settings never leak into tests.
    """
    for name in ("DATADOG_API_KEY", "DATADOG_API_ENDPOINT", "DATADOG_TIMEOUT", "DATADOG_MAX_ELAPSED_TIME"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config():
    """Config pointing at a fake endpoint with a short retry budget."""
    return DatadogConfig(
        api_key=API_KEY,
        api_endpoint="https://intake.example.test/api/v1/series",
        timeout=0.05,
        max_elapsed_time=0.3,
    )


@pytest.fixture
def fast_policy():
    """Backoff policy with millisecond delays so retry tests stay fast."""
    return BackoffPolicy(initial_interval=0.01, multiplier=1.5, randomization_factor=0.0, max_elapsed_time=0.3)


def _make_response(status_code: int) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    return response


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects with a given status."""
    return _make_response


@pytest.fixture
def mock_session():
    """requests.Session whose send() answers 202 unless reconfigured."""
    session = MagicMock()
    session.merge_environment_settings.return_value = {}
    session.send.return_value = _make_response(202)
    return session


@pytest.fixture
def sample_metrics():
    """A snapshot holding one entry of every kind."""
    return MetricMap(
        num_stats=7,
        processing_time=0.0125,
        flush_interval=10.0,
        counters={"requests": {"env:prod": Counter(value=5, per_second=0.5, flush=10.0)}},
        timers={
            "latency": {
                "env:prod,statsd_source_id:web-1": Timer(
                    min=1,
                    max=9,
                    count=4,
                    per_second=0.4,
                    mean=5,
                    median=5,
                    std_dev=2,
                    sum=20,
                    sum_squares=120,
                    percentiles=[Percentile(name="p90", value=8)],
                    flush=10.0,
                )
            }
        },
        gauges={"queue.depth": {"": Gauge(value=42.5, flush=10.0)}},
        sets={"users": {"role:api,env:prod": Set(values={"alice", "bob", "carol"}, flush=10.0)}},
    )
