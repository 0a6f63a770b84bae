"""Configuration and environment handling for dogseries."""

from __future__ import annotations

import os
import socket
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from dogseries.exceptions import ConfigurationError

__all__ = [
    "DEFAULT_API_ENDPOINT",
    "DatadogConfig",
    "SAMPLE_CONFIG",
    "resolve_hostname",
]

DEFAULT_API_ENDPOINT = "https://app.datadoghq.com/api/v1/series"

SAMPLE_CONFIG = """
[datadog]
	## Datadog API key
	api_key = "my-secret-key" # required.

	## Connection timeout in seconds.
	# timeout = 5

	## Give up retrying a flush after this many seconds.
	# max_elapsed_time = 10
"""


class DatadogConfig(BaseModel):
    """Static configuration of the Datadog backend.

    Set once at construction and never mutated afterwards. The client does
    not read the environment itself; use ``from_env`` at the edge.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., description="Datadog API key, sent as the api_key query parameter")
    api_endpoint: str = Field(default=DEFAULT_API_ENDPOINT, description="Series ingestion URL")
    timeout: float = Field(default=5.0, gt=0, description="Per-request timeout in seconds")
    max_elapsed_time: float = Field(default=10.0, ge=0, description="Retry budget in seconds, 0 disables the ceiling")

    @field_validator("api_key")
    @classmethod
    def _api_key_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("api_key is a required field")
        return value

    @model_validator(mode="after")
    def _timeout_within_budget(self) -> DatadogConfig:
        if self.max_elapsed_time and self.timeout > self.max_elapsed_time:
            raise ValueError(f"timeout ({self.timeout}s) must not exceed max_elapsed_time ({self.max_elapsed_time}s)")
        return self

    @classmethod
    def create(cls, **values: Any) -> DatadogConfig:
        """Validate values into a config, raising ConfigurationError on failure.

        The API key never appears in the raised message.
        """
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(f"{'.'.join(str(loc) for loc in err['loc']) or 'config'}: {err['msg']}" for err in e.errors())
            raise ConfigurationError(f"[datadog] invalid configuration: {problems}") from None

    @classmethod
    def from_env(cls, **overrides: Any) -> DatadogConfig:
        """Create a config from environment variables.

        Environment variables:
        - DATADOG_API_KEY: API key (required)
        - DATADOG_API_ENDPOINT: Series ingestion URL
        - DATADOG_TIMEOUT: Per-request timeout in seconds (default: 5)
        - DATADOG_MAX_ELAPSED_TIME: Retry budget in seconds (default: 10)

        Keyword arguments that are not None take precedence over the environment.
        """
        values: dict[str, Any] = {
            "api_key": os.environ.get("DATADOG_API_KEY", ""),
            "api_endpoint": os.environ.get("DATADOG_API_ENDPOINT", cls.model_fields["api_endpoint"].default),
            "timeout": os.environ.get("DATADOG_TIMEOUT", cls.model_fields["timeout"].default),
            "max_elapsed_time": os.environ.get("DATADOG_MAX_ELAPSED_TIME", cls.model_fields["max_elapsed_time"].default),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.create(**values)


def resolve_hostname() -> str:
    """Return the process hostname used as the default metric host.

    Raises:
        ConfigurationError: If the hostname cannot be determined
    """
    try:
        hostname = socket.gethostname()
    except OSError as e:
        raise ConfigurationError(f"[datadog] unable to resolve hostname: {e}") from e
    if not hostname:
        raise ConfigurationError("[datadog] unable to resolve hostname: empty hostname")
    return hostname
