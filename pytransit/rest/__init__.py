# pytransit/rest/__init__.py
"""
Transports that carry transit requests to a Vault server (or a stand-in).
"""
from pytransit.rest.local import LocalTransitTransport
from pytransit.rest.transport import (
    RequestSpec,
    RequestsTransport,
    RestResponse,
    Transport,
)

__all__ = [
    "LocalTransitTransport",
    "RequestSpec",
    "RequestsTransport",
    "RestResponse",
    "Transport",
]
