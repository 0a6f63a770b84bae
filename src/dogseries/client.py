"""Datadog series API client.

Builds the series for a flush cycle and POSTs it to Datadog, retrying
transport errors and bad status codes with exponential backoff.
"""

from __future__ import annotations

import logging
import time
from typing import Any
from urllib.parse import quote_plus, urlencode

import requests

from dogseries.backoff import BackoffPolicy, retry
from dogseries.config import SAMPLE_CONFIG, DatadogConfig, resolve_hostname
from dogseries.exceptions import DeliveryError, RequestBuildError, RetryableError, RetryExhaustedError
from dogseries.logger import logger
from dogseries.models import MetricMap
from dogseries.series import build_series

__all__ = ["BACKEND_NAME", "DatadogClient"]

BACKEND_NAME = "datadog"

# Mimic dogstatsd so the intake accepts the payload
DOGSTATSD_VERSION = "5.6.3"
DOGSTATSD_USER_AGENT = "python-requests/2.6.0 CPython/2.7.10"

_REDACTED = "*****"


def _is_success(status_code: int) -> bool:
    # The series intake documents 200-209 as success, not the whole 2xx range
    return 200 <= status_code <= 209


class DatadogClient:
    """HTTP client sending flush snapshots to the Datadog series API.

    At most one send_metrics call should be in flight per client; the caller
    is responsible for not overlapping flushes.
    """

    def __init__(
        self,
        config: DatadogConfig,
        hostname: str | None = None,
        session: requests.Session | None = None,
        policy: BackoffPolicy | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Validated backend configuration
            hostname: Default metric host. If None, the process hostname is used.
            session: requests session to send with. A new one is created if None.
            policy: Retry schedule. Defaults to exponential backoff bounded by
                config.max_elapsed_time.

        Raises:
            ConfigurationError: If the hostname cannot be resolved
        """
        self.config = config
        self.hostname = hostname or resolve_hostname()
        self.session = session or requests.Session()
        self.policy = policy or BackoffPolicy(max_elapsed_time=config.max_elapsed_time)

    def send_metrics(self, metrics: MetricMap, timestamp: int | None = None) -> None:
        """Send one flush cycle's metrics to Datadog.

        A snapshot without stats is a no-op and makes no request.

        Args:
            metrics: Aggregated snapshot of the flush cycle
            timestamp: Capture time in unix seconds. Defaults to now.

        Raises:
            SerializationError: If the series cannot be encoded (not retried)
            RequestBuildError: If the request cannot be prepared (not retried)
            DeliveryError: If every attempt failed within the retry budget
        """
        if timestamp is None:
            timestamp = int(time.time())

        ts = build_series(metrics, timestamp, self.hostname)
        if ts is None:
            return

        payload = ts.to_json()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"[{BACKEND_NAME}] json: {payload.decode('utf-8')}")

        request = self._prepare_request(payload)
        # CA bundle, proxies and cert from the environment, as Session.request applies them
        settings = self.session.merge_environment_settings(request.url, {}, None, None, None)
        try:
            retry(lambda: self._post(request, settings), self.policy)
        except RetryExhaustedError as e:
            raise DeliveryError(f"[{BACKEND_NAME}] {self._redact(str(e))}") from e

    def _prepare_request(self, payload: bytes) -> requests.PreparedRequest:
        request = requests.Request(
            "POST",
            self._authenticated_url(),
            data=payload,
            headers={
                "Content-Type": "application/json",
                "DD-Dogstatsd-Version": DOGSTATSD_VERSION,
                "User-Agent": DOGSTATSD_USER_AGENT,
            },
        )
        # Not chained: the original error text holds the API key
        try:
            return request.prepare()
        except (requests.RequestException, ValueError) as e:
            reason = self._redact(str(e))
        raise RequestBuildError(f"[{BACKEND_NAME}] unable to create http.Request, {reason}")

    def _post(self, request: requests.PreparedRequest, settings: dict[str, Any]) -> None:
        """Perform one POST attempt.

        Args:
            request: Prepared series request
            settings: Extra send keyword arguments (verify, proxies, cert, stream)

        Raises:
            RetryableError: On transport errors or a status outside 200-209
        """
        error = None
        try:
            response = self.session.send(request, timeout=self.config.timeout, **settings)
        except requests.RequestException as e:
            # The exception text may contain the full URL, key included; not chained
            error = self._redact(str(e))
        if error is not None:
            raise RetryableError(f"error POSTing metrics, {error}")

        try:
            if not _is_success(response.status_code):
                raise RetryableError(f"received bad status code, {response.status_code}")
        finally:
            response.close()

    def _authenticated_url(self) -> str:
        separator = "&" if "?" in self.config.api_endpoint else "?"
        return f"{self.config.api_endpoint}{separator}{urlencode({'api_key': self.config.api_key})}"

    def _redact(self, message: str) -> str:
        api_key = self.config.api_key
        for secret in {api_key, quote_plus(api_key)}:
            message = message.replace(secret, _REDACTED)
        return message

    def sample_config(self) -> str:
        """Return the sample config for the datadog backend."""
        return SAMPLE_CONFIG

    def backend_name(self) -> str:
        """Return the name of the backend."""
        return BACKEND_NAME
