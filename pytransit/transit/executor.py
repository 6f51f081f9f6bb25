# pytransit/transit/executor.py
"""
Retrying executor for transit requests.

Each attempt ends in one of three ways:

    Success            status 200, returned immediately
    Retryable failure  the transport raised, or the status was not 200
    Terminal failure   a retryable failure with no retries left

Retries wait a constant delay (no backoff growth). The wait is a
``threading.Event.wait`` so that a caller holding the event can cancel the
call between attempts.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from pytransit.rest.transport import RequestSpec, RestResponse, Transport
from pytransit.util.errors import (
    InvalidArgumentError,
    OperationFailedError,
    RetryCancelledError,
    ServiceError,
    TransitError,
    TransportError,
)
from pytransit.util.logger import get_logger

logger = get_logger(__name__)

HTTP_OK = 200


@dataclass
class RetryContext:
    """Per-call retry bookkeeping. Never shared between calls."""

    max_attempts: int
    delay: float
    attempts_made: int = 0
    last_error: Optional[TransitError] = None

    @property
    def exhausted(self) -> bool:
        return self.attempts_made >= self.max_attempts


class RetryingExecutor:
    """
    Drives a RequestSpec through a Transport with bounded retry.

    ``max_attempts`` counts retries after the first attempt, so a call makes
    at most ``max_attempts + 1`` requests.
    """

    def __init__(self, transport: Transport):
        self._transport = transport

    def execute(
        self,
        spec: RequestSpec,
        max_attempts: int,
        delay: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[RestResponse, int]:
        """
        Send the request until it succeeds or the retry budget runs out.

        Returns:
            The 200 response and the number of retries it took

        Raises:
            OperationFailedError: After the last retry failed
            RetryCancelledError: If ``cancel_event`` was set while waiting
        """
        if max_attempts < 0:
            raise InvalidArgumentError(f"max_attempts must be >= 0, got {max_attempts}")
        if delay < 0:
            raise InvalidArgumentError(f"delay must be >= 0, got {delay}")

        ctx = RetryContext(max_attempts=max_attempts, delay=delay)
        cancel_event = cancel_event or threading.Event()

        while True:
            if cancel_event.is_set():
                raise RetryCancelledError(ctx.attempts_made)

            try:
                response = self._attempt(spec)
            except (TransportError, ServiceError) as e:
                ctx.last_error = e
            else:
                if ctx.attempts_made:
                    logger.debug(
                        "%s succeeded after %d retries", spec.path, ctx.attempts_made
                    )
                return response, ctx.attempts_made

            if ctx.exhausted:
                raise OperationFailedError(ctx.last_error, ctx.attempts_made) from ctx.last_error

            ctx.attempts_made += 1
            logger.warning(
                "Attempt %d/%d for %s failed: %s; retrying in %.3fs",
                ctx.attempts_made,
                ctx.max_attempts + 1,
                spec.path,
                _describe(ctx.last_error),
                ctx.delay,
            )
            self._wait(ctx, cancel_event)

    def _attempt(self, spec: RequestSpec) -> RestResponse:
        """Issue one request and classify the outcome."""
        try:
            response = self._transport.post(spec)
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if response.status_code != HTTP_OK:
            raise ServiceError(response.status_code, response.text)
        return response

    def _wait(self, ctx: RetryContext, cancel_event: threading.Event) -> None:
        deadline = time.monotonic() + ctx.delay
        remaining = ctx.delay
        while True:
            if cancel_event.wait(max(remaining, 0)):
                logger.info("Retry wait cancelled after %d retries", ctx.attempts_made)
                raise RetryCancelledError(ctx.attempts_made)
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            # Woke early without a cancel; keep waiting out the delay
            logger.debug("Retry wait interrupted early, resuming")


def _describe(error: Optional[TransitError]) -> str:
    if isinstance(error, ServiceError):
        return f"HTTP {error.status_code}"
    return str(error)
