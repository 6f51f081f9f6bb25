# pytransit/util/errors.py
"""
Error taxonomy for transit operations.

Every error raised by pytransit derives from TransitError, so callers can
catch the whole family or pick out the kind they care about.
"""
from typing import Optional


class TransitError(Exception):
    """Base exception for transit errors."""


class ConfigurationError(TransitError):
    """Raised when configuration is missing or invalid."""


class TransitInternalError(TransitError):
    """Raised on an internal consistency failure (a programming defect)."""


class InvalidArgumentError(TransitError, ValueError):
    """Raised when the caller passes an invalid key name or payload."""


class TransportError(TransitError):
    """Raised when the service could not be reached (connection, timeout, TLS)."""


class ServiceError(TransitError):
    """Raised when the service answered with a non-200 status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        message = f"Vault responded with HTTP status code: {status_code}"
        if body:
            message += f"\nResponse body: {body}"
        super().__init__(message)


class OperationFailedError(TransitError):
    """
    Raised once the retry budget is exhausted.

    Carries the last failure seen, the HTTP status code if one was observed,
    and how many retries were made after the first attempt.
    """

    def __init__(self, last_error: TransitError, retries: int):
        self.last_error = last_error
        self.retries = retries
        self.status_code: Optional[int] = getattr(last_error, "status_code", None)
        super().__init__(
            f"Transit operation failed after {retries} retries: {last_error}"
        )


class RetryCancelledError(TransitError):
    """Raised when the caller cancels a call while it waits between retries."""

    def __init__(self, retries: int):
        self.retries = retries
        super().__init__(f"Transit operation cancelled after {retries} retries")


class MalformedResponseError(TransitError):
    """Raised when a 200 response lacks the expected fields or has the wrong types."""
