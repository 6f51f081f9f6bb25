# pytransit/transit/request_builder.py
"""
Turns (operation, key name, payload) into a transport-ready RequestSpec.

Security settings (TLS verification, CA bundle, timeouts) are copied from
the config as-is; this module forwards policy, it does not choose it.
"""
from __future__ import annotations

import base64
import json
from typing import Union
from urllib.parse import quote

from pytransit.TransitOperation import TransitOperation, TransitRequest
from pytransit.rest.transport import RequestSpec
from pytransit.util.config import TransitConfig
from pytransit.util.errors import InvalidArgumentError

TRANSIT_PATH = "/v1/transit"
TOKEN_HEADER = "X-Vault-Token"
NAMESPACE_HEADER = "X-Vault-Namespace"


def make_request(
    operation: TransitOperation,
    key_name: str,
    payload: Union[str, bytes],
) -> TransitRequest:
    """
    Validate caller input and wrap it in a TransitRequest.

    Raises:
        InvalidArgumentError: On an empty key name, a payload of the wrong
            type, or an empty ciphertext token
    """
    if not isinstance(operation, TransitOperation):
        raise InvalidArgumentError(f"Expected TransitOperation, got {type(operation).__name__}")
    if not isinstance(key_name, str) or not key_name.strip():
        raise InvalidArgumentError("Key name must be a non-empty string")
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    elif not isinstance(payload, (bytes, bytearray)):
        raise InvalidArgumentError(
            f"Payload must be str or bytes, got {type(payload).__name__}"
        )
    if operation is TransitOperation.DECRYPT and not payload.strip():
        raise InvalidArgumentError("Ciphertext to decrypt must not be empty")
    return TransitRequest(operation=operation, key_name=key_name, payload=bytes(payload))


def encode_body(request: TransitRequest) -> bytes:
    """Serialize the flat JSON body for a request."""
    operation = request.operation
    if operation is TransitOperation.ENCRYPT:
        value = base64.b64encode(request.payload).decode("ascii")
    else:
        try:
            value = request.payload.decode("ascii")
        except UnicodeDecodeError as e:
            raise InvalidArgumentError("Ciphertext token must be ASCII") from e
    return json.dumps({operation.request_field_name(): value}).encode("utf-8")


def endpoint_path(operation: TransitOperation, key_name: str) -> str:
    """``/v1/transit/<op>/<key>`` with the key quoted as one path segment."""
    return f"{TRANSIT_PATH}/{operation.endpoint_segment()}/{quote(key_name, safe='')}"


def build_request(
    operation: TransitOperation,
    key_name: str,
    payload: Union[str, bytes],
    config: TransitConfig,
) -> RequestSpec:
    """
    Build the RequestSpec for one transit call.

    No network activity happens here; argument errors surface before the
    transport is ever touched.
    """
    request = make_request(operation, key_name, payload)
    path = endpoint_path(request.operation, request.key_name)

    headers = {
        TOKEN_HEADER: config.token_provider.get_token(),
        "Content-Type": "application/json",
    }
    if config.namespace:
        headers[NAMESPACE_HEADER] = config.namespace

    return RequestSpec(
        url=config.base_url + path,
        path=path,
        body=encode_body(request),
        headers=headers,
        timeout=(config.open_timeout, config.read_timeout),
        verify=config.verify,
    )
