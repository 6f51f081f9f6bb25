# pytransit/TransitOperation.py
"""
Core transit types shared by the request builder, executor and decoder.

TransitOperation is a closed enumeration: each member knows which endpoint it
hits, which field it sends and which field it reads back. Adding a new
operation means adding a member and its three mappings here, nothing else.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pytransit.util.errors import TransitInternalError


class TransitOperation(Enum):
    """Operations supported by the transit engine."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"

    def endpoint_segment(self) -> str:
        """Path segment under /v1/transit/."""
        if self is TransitOperation.ENCRYPT:
            return "encrypt"
        if self is TransitOperation.DECRYPT:
            return "decrypt"
        raise TransitInternalError(f"Unknown transit operation: {self!r}")

    def request_field_name(self) -> str:
        """JSON body field carrying the input."""
        if self is TransitOperation.ENCRYPT:
            return "plaintext"
        if self is TransitOperation.DECRYPT:
            return "ciphertext"
        raise TransitInternalError(f"Unknown transit operation: {self!r}")

    def response_field_name(self) -> str:
        """Field under ``data`` carrying the result."""
        if self is TransitOperation.ENCRYPT:
            return "ciphertext"
        if self is TransitOperation.DECRYPT:
            return "plaintext"
        raise TransitInternalError(f"Unknown transit operation: {self!r}")


@dataclass(frozen=True)
class TransitRequest:
    """
    Input for a single transit call.

    ``payload`` holds the plaintext to encrypt, or the ciphertext token
    (as issued by Vault, e.g. ``vault:v1:...``) to decrypt.
    """

    operation: TransitOperation
    key_name: str
    payload: bytes


@dataclass(frozen=True)
class TransitResult:
    """
    Decoded outcome of a successful transit call.

    ``payload`` is the ciphertext token after encrypt, or the recovered
    plaintext after decrypt. Decrypt also exposes the exact recovered bytes
    as ``plaintext_bytes``; non UTF-8 bytes survive in ``payload`` as
    surrogate escapes.
    """

    operation: TransitOperation
    payload: str
    lease_id: str = ""
    renewable: bool = False
    lease_duration: int = 0
    retries: int = 0
    status_code: int = 200
    plaintext_bytes: Optional[bytes] = None

    @property
    def attempts(self) -> int:
        """Total attempts made, including the first."""
        return self.retries + 1

    def __repr__(self) -> str:
        # Keep plaintext out of reprs and tracebacks
        return (
            f"<TransitResult: {self.operation.value}, {len(self.payload)} chars, "
            f"retries={self.retries}>"
        )
