# pytransit/transit/decoder.py
"""
Decodes a successful transit response into a TransitResult.

Lease metadata is optional: transit responses normally carry an empty lease,
and its absence is not an error. The operation's own field under ``data``
is mandatory; when it is missing or mistyped decoding fails loudly instead
of returning an empty result.
"""
from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict

from pytransit.TransitOperation import TransitOperation, TransitResult
from pytransit.rest.transport import RestResponse
from pytransit.util.errors import MalformedResponseError


def parse_body(raw: RestResponse) -> Dict[str, Any]:
    """Parse the response body as a JSON object."""
    try:
        document = json.loads(raw.body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        content_type = raw.mime_type or "unknown content type"
        raise MalformedResponseError(
            f"Response body is not valid JSON ({content_type}): {e}"
        ) from e
    if not isinstance(document, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(document).__name__}"
        )
    return document


def _optional(document: Dict[str, Any], name: str, expected: type, default: Any) -> Any:
    value = document.get(name)
    if value is None:
        return default
    # bool is an int subclass; keep the two apart
    if expected is int and isinstance(value, bool):
        raise MalformedResponseError(f"Field {name!r} must be an integer, got bool")
    if not isinstance(value, expected):
        raise MalformedResponseError(
            f"Field {name!r} must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def decode_response(
    raw: RestResponse,
    operation: TransitOperation,
    retries: int = 0,
) -> TransitResult:
    """
    Build a TransitResult from a 200 response.

    Raises:
        MalformedResponseError: If the body is not a JSON object, ``data`` or
            its operation field is missing or not a string, a lease field
            has the wrong type, or decrypted plaintext is not valid base64
    """
    document = parse_body(raw)

    lease_id = _optional(document, "lease_id", str, "")
    renewable = _optional(document, "renewable", bool, False)
    lease_duration = _optional(document, "lease_duration", int, 0)

    data = document.get("data")
    if not isinstance(data, dict):
        raise MalformedResponseError("Response has no 'data' object")

    field_name = operation.response_field_name()
    value = data.get(field_name)
    if not isinstance(value, str):
        if value is None:
            raise MalformedResponseError(f"Response data has no {field_name!r} field")
        raise MalformedResponseError(
            f"Response field data.{field_name} must be a string, got {type(value).__name__}"
        )

    plaintext_bytes = None
    if operation is TransitOperation.DECRYPT:
        try:
            plaintext_bytes = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedResponseError(
                f"Response field data.{field_name} is not valid base64"
            ) from e
        payload = plaintext_bytes.decode("utf-8", errors="surrogateescape")
    else:
        payload = value

    return TransitResult(
        operation=operation,
        payload=payload,
        lease_id=lease_id,
        renewable=renewable,
        lease_duration=lease_duration,
        retries=retries,
        status_code=raw.status_code,
        plaintext_bytes=plaintext_bytes,
    )
