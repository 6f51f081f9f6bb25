# pytransit/rest/transport.py
"""
HTTP transport seam.

The transit core never talks to the network directly: it hands a RequestSpec
to a Transport and gets back a RestResponse, or an exception. The production
transport is a thin wrapper over a ``requests.Session``; tests and local
development plug in their own.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

import requests

from pytransit.util.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RequestSpec:
    """Everything a transport needs to issue one POST."""

    url: str
    path: str
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Tuple[float, float] = (5.0, 30.0)  # (connect, read)
    verify: Union[bool, str] = True

    def __repr__(self) -> str:
        # Headers carry the token and the body carries the payload
        return f"<RequestSpec POST {self.url}>"


@dataclass(frozen=True)
class RestResponse:
    """Raw response as returned by a transport."""

    status_code: int
    body: bytes = b""
    mime_type: str = ""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(ABC):
    """
    Abstract base for transports.

    ``post`` must either return a RestResponse (whatever the status code) or
    raise. Any exception counts as a transport-level failure.
    """

    @abstractmethod
    def post(self, spec: RequestSpec) -> RestResponse:
        ...

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class RequestsTransport(Transport):
    """
    Transport backed by a ``requests.Session``.

    The session, and with it the connection pool, is created lazily and
    reused across calls.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def post(self, spec: RequestSpec) -> RestResponse:
        logger.debug("POST %s", spec.url)
        response = self.session.post(
            spec.url,
            data=spec.body,
            headers=spec.headers,
            timeout=spec.timeout,
            verify=spec.verify,
        )
        return RestResponse(
            status_code=response.status_code,
            body=response.content or b"",
            mime_type=response.headers.get("Content-Type", ""),
        )

    def close(self) -> None:
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
