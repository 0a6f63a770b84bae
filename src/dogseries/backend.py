"""
Backend registration glue.

statsd servers discover backends by name. Nothing registers itself on
import: the host process creates a BackendRegistry and calls
register_backend explicitly.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from dogseries.client import BACKEND_NAME, DatadogClient
from dogseries.config import DatadogConfig
from dogseries.models import MetricMap

__all__ = ["BackendFactory", "BackendRegistry", "MetricSender", "backend_factory", "register_backend"]


@runtime_checkable
class MetricSender(Protocol):
    """Interface a statsd backend exposes to the flush loop."""

    def send_metrics(self, metrics: MetricMap) -> None: ...

    def sample_config(self) -> str: ...

    def backend_name(self) -> str: ...


BackendFactory = Callable[[], MetricSender]


class BackendRegistry:
    """Name to factory mapping owned by the host process."""

    def __init__(self) -> None:
        self._factories: dict[str, BackendFactory] = {}

    def register(self, name: str, factory: BackendFactory) -> None:
        """Register a backend factory.

        Raises:
            ValueError: If a backend with the same name is already registered
        """
        if name in self._factories:
            raise ValueError(f"Backend already registered: {name!r}")
        self._factories[name] = factory

    def create(self, name: str) -> MetricSender:
        """Instantiate a registered backend.

        Raises:
            KeyError: If no backend is registered under name
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise KeyError(f"Unknown backend: {name!r}. Registered backends are: {self.names()}") from None
        return factory()

    def names(self) -> list[str]:
        """Return the registered backend names, sorted."""
        return sorted(self._factories)


def backend_factory(config: DatadogConfig | None = None, hostname: str | None = None) -> BackendFactory:
    """Return a constructor for the datadog backend.

    Args:
        config: Backend configuration. Loaded from the environment when the
            factory is called if None.
        hostname: Default metric host, the process hostname if None

    The returned callable raises ConfigurationError when the API key is
    missing or the hostname cannot be resolved.
    """

    def factory() -> DatadogClient:
        return DatadogClient(config or DatadogConfig.from_env(), hostname=hostname)

    return factory


def register_backend(registry: BackendRegistry, config: DatadogConfig | None = None) -> None:
    """Register the datadog backend on registry under BACKEND_NAME."""
    registry.register(BACKEND_NAME, backend_factory(config))
