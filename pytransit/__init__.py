# pytransit/__init__.py
"""
Client for the Vault transit secrets engine.

Usage:
    from pytransit import create_transit_client

    client = create_transit_client("https://vault:8200", token, max_retries=3)
    token = client.encrypt("orders-key", "hello").payload

Modules:
    TransitOperation  - TransitOperation, TransitRequest, TransitResult
    TransitClient     - TransitClient and factories
    transit           - request builder, retrying executor, response decoder
    rest              - transports (requests, in-process)
    util              - config, token providers, errors, logging
"""

# Core types
from pytransit.TransitOperation import (
    TransitOperation,
    TransitRequest,
    TransitResult,
)

# Client
from pytransit.TransitClient import (
    TransitClient,
    create_transit_client,
    create_transit_client_from_env,
)

# Transports
from pytransit.rest import (
    LocalTransitTransport,
    RequestSpec,
    RequestsTransport,
    RestResponse,
    Transport,
)

# Configuration
from pytransit.util.config import TransitConfig
from pytransit.util.token_providers import (
    TokenProvider,
    StaticTokenProvider,
    EnvTokenProvider,
    TokenNotFoundError,
)

# Errors
from pytransit.util.errors import (
    TransitError,
    ConfigurationError,
    InvalidArgumentError,
    TransportError,
    ServiceError,
    OperationFailedError,
    RetryCancelledError,
    MalformedResponseError,
    TransitInternalError,
)

from pytransit.util.logger import configure_logging

__version__ = "0.1.0"

__all__ = [
    # Core types
    "TransitOperation",
    "TransitRequest",
    "TransitResult",
    # Client
    "TransitClient",
    "create_transit_client",
    "create_transit_client_from_env",
    # Transports
    "LocalTransitTransport",
    "RequestSpec",
    "RequestsTransport",
    "RestResponse",
    "Transport",
    # Configuration
    "TransitConfig",
    "TokenProvider",
    "StaticTokenProvider",
    "EnvTokenProvider",
    "TokenNotFoundError",
    # Errors
    "TransitError",
    "ConfigurationError",
    "InvalidArgumentError",
    "TransportError",
    "ServiceError",
    "OperationFailedError",
    "RetryCancelledError",
    "MalformedResponseError",
    "TransitInternalError",
    # Logging
    "configure_logging",
]
