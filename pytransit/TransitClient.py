# pytransit/TransitClient.py
"""
Client for Vault's transit engine (encrypt, decrypt).

Usage:
    client = create_transit_client("https://vault:8200", token, max_retries=3)
    ciphertext = client.encrypt("orders-key", "hello").payload
    plaintext = client.decrypt("orders-key", ciphertext).payload

Every call builds its request, runs it through the retrying executor and
decodes the response with the same TransitOperation, so encrypt and decrypt
share one code path.
"""
from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional, Union

from pytransit.TransitOperation import TransitOperation, TransitResult
from pytransit.rest.transport import RequestsTransport, Transport
from pytransit.transit.decoder import decode_response
from pytransit.transit.executor import RetryingExecutor
from pytransit.transit.request_builder import build_request
from pytransit.util.config import TransitConfig
from pytransit.util.logger import get_logger

logger = get_logger(__name__)


class TransitClient:
    """
    Encrypt and decrypt through a remote transit engine.

    The client holds no per-call state, so one instance can serve many
    threads; each call gets its own request and retry bookkeeping.
    """

    def __init__(self, config: TransitConfig, transport: Optional[Transport] = None) -> None:
        self._config = config
        self._transport = transport or RequestsTransport()
        self._executor = RetryingExecutor(self._transport)

    @property
    def config(self) -> TransitConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    def with_retries(self, max_retries: int, retry_interval: float) -> "TransitClient":
        """Return a client sharing this transport but using another retry policy."""
        return TransitClient(
            self._config.with_retries(max_retries, retry_interval),
            self._transport,
        )

    def encrypt(
        self,
        key_name: str,
        plaintext: Union[str, bytes],
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> TransitResult:
        """
        Encrypt plaintext with the named key.

        Returns:
            TransitResult whose payload is the ciphertext token (vault:v1:...)
        """
        return self._call(TransitOperation.ENCRYPT, key_name, plaintext, cancel_event)

    def decrypt(
        self,
        key_name: str,
        ciphertext: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> TransitResult:
        """
        Decrypt a ciphertext token with the named key.

        Returns:
            TransitResult whose payload is the recovered plaintext
        """
        return self._call(TransitOperation.DECRYPT, key_name, ciphertext, cancel_event)

    def _call(
        self,
        operation: TransitOperation,
        key_name: str,
        payload: Union[str, bytes],
        cancel_event: Optional[threading.Event],
    ) -> TransitResult:
        config = self._config
        spec = build_request(operation, key_name, payload, config)
        logger.debug("Transit %s with key %r", operation.value, key_name)

        response, retries = self._executor.execute(
            spec,
            max_attempts=config.max_retries,
            delay=config.retry_interval,
            cancel_event=cancel_event,
        )
        result = decode_response(response, operation, retries)
        logger.info(
            "Transit %s with key %r succeeded (retries=%d)",
            operation.value,
            key_name,
            retries,
        )
        return result

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "TransitClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


# -----------------------------------------------------------------------------
# Convenience factories for common configurations
# -----------------------------------------------------------------------------


def create_transit_client(
    address: str,
    token: str,
    transport: Optional[Transport] = None,
    **options,
) -> TransitClient:
    """
    Quick factory for a client with a fixed token.

    Args:
        address: Vault base URL
        token: Vault token sent as X-Vault-Token
        transport: Optional transport (defaults to requests)
        **options: Any other TransitConfig field (max_retries, retry_interval, ...)

    Returns:
        Configured TransitClient instance
    """
    config = TransitConfig.from_token(address, token, **options)
    return TransitClient(config, transport)


def create_transit_client_from_env(
    transport: Optional[Transport] = None,
    **overrides,
) -> TransitClient:
    """
    Create a client from VAULT_* environment variables.

    Args:
        transport: Optional transport (defaults to requests)
        **overrides: TransitConfig fields that win over the environment

    Returns:
        Configured TransitClient instance
    """
    config = TransitConfig.from_env()
    if overrides:
        config = replace(config, **overrides)
    return TransitClient(config, transport)
