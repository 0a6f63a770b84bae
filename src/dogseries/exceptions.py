"""
dogseries exceptions module.

Contains exception classes shared by the config, series and client modules.
"""


class DogseriesError(Exception):
    """Base class for all dogseries errors."""

    pass


class ConfigurationError(DogseriesError):
    """Exception raised when the backend cannot be configured.

    Missing API key, invalid timeouts or an unresolvable hostname.
    """

    pass


class SerializationError(DogseriesError):
    """Exception raised when a series cannot be encoded to JSON."""

    pass


class RequestBuildError(DogseriesError):
    """Exception raised when the HTTP request cannot be prepared."""

    pass


class RetryableError(DogseriesError):
    """A failed attempt that may succeed when tried again."""

    pass


class RetryExhaustedError(DogseriesError):
    """Exception raised when the retry budget is spent.

    The last attempt's error is available as ``__cause__``.
    """

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class DeliveryError(DogseriesError):
    """Exception raised when a series could not be delivered to Datadog."""

    pass
