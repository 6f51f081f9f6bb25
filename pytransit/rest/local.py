# pytransit/rest/local.py
"""
In-process stand-in for the Vault transit engine.

LocalTransitTransport answers the same wire contract as a real Vault server
(POST /v1/transit/{encrypt|decrypt}/<key>) using AES-256-GCM keys held in
memory. Ciphertext tokens look like Vault's: ``vault:v<version>:<base64>``
where the base64 blob is ``nonce || ciphertext || tag``.

Best for: Testing, development, running without a Vault server.

Usage:
    transport = LocalTransitTransport(token="root")
    client = create_transit_client("http://vault.local", "root", transport=transport)
    token = client.encrypt("orders-key", "hello").payload
"""
from __future__ import annotations

import base64
import binascii
import json
import os
import threading
import uuid
from typing import Dict, List, Optional
from urllib.parse import unquote, urlparse

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from pytransit.rest.transport import RequestSpec, RestResponse, Transport

TRANSIT_PREFIX = "/v1/transit/"


class LocalTransitTransport(Transport):
    """
    AES-256-GCM backed transit engine living in the current process.

    Keys are created on first encrypt (like Vault's upsert behaviour) and can
    be rotated; old versions stay usable for decryption.
    """

    NONCE_SIZE: int = 12  # 96 bits, as used by aes256-gcm96
    KEY_SIZE: int = 32    # 256 bits

    def __init__(self, token: Optional[str] = None):
        self._token = token
        self._keys: Dict[str, List[bytes]] = {}
        self._lock = threading.Lock()
        self._scripted_failures: List[Optional[int]] = []
        self.calls = 0

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def fail_next(self, count: int = 1, status_code: Optional[int] = 503) -> None:
        """
        Make the next ``count`` calls fail.

        With a status code the call returns that status; with ``None`` it
        raises ConnectionError as an unreachable server would.
        """
        with self._lock:
            self._scripted_failures.extend([status_code] * count)

    def rotate_key(self, key_name: str) -> int:
        """Add a new version to a key and return its version number."""
        with self._lock:
            versions = self._keys.setdefault(key_name, [])
            versions.append(AESGCM.generate_key(bit_length=self.KEY_SIZE * 8))
            return len(versions)

    def key_version(self, key_name: str) -> int:
        with self._lock:
            return len(self._keys.get(key_name, []))

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def post(self, spec: RequestSpec) -> RestResponse:
        with self._lock:
            self.calls += 1
            scripted = bool(self._scripted_failures)
            failure = self._scripted_failures.pop(0) if scripted else None
        if scripted:
            if failure is None:
                raise ConnectionError(f"Connection refused: {spec.url}")
            return _error(failure, "scripted failure")

        if self._token is not None and spec.headers.get("X-Vault-Token") != self._token:
            return _error(403, "permission denied")

        path = spec.path or urlparse(spec.url).path
        if not path.startswith(TRANSIT_PREFIX):
            return _error(404, f"no handler for route '{path}'")
        operation, _, key_name = path[len(TRANSIT_PREFIX):].partition("/")
        if not key_name or "/" in key_name:
            return _error(404, f"no handler for route '{path}'")
        key_name = unquote(key_name)

        try:
            body = json.loads(spec.body.decode("utf-8") or "{}")
        except (UnicodeDecodeError, ValueError):
            return _error(400, "failed to parse JSON input")
        if not isinstance(body, dict):
            return _error(400, "failed to parse JSON input")

        if operation == "encrypt":
            return self._encrypt(key_name, body.get("plaintext"))
        if operation == "decrypt":
            return self._decrypt(key_name, body.get("ciphertext"))
        return _error(404, f"no handler for route '{path}'")

    def _encrypt(self, key_name: str, plaintext_b64: object) -> RestResponse:
        if not isinstance(plaintext_b64, str):
            return _error(400, "missing plaintext to encrypt")
        try:
            plaintext = base64.b64decode(plaintext_b64, validate=True)
        except (binascii.Error, ValueError):
            return _error(400, "failed to base64-decode plaintext")

        with self._lock:
            versions = self._keys.get(key_name)
            if not versions:
                versions = self._keys[key_name] = [
                    AESGCM.generate_key(bit_length=self.KEY_SIZE * 8)
                ]
            version = len(versions)
            key = versions[-1]

        nonce = os.urandom(self.NONCE_SIZE)
        sealed = AESGCM(key).encrypt(nonce, plaintext, None)
        token = f"vault:v{version}:" + base64.b64encode(nonce + sealed).decode("ascii")
        return _ok({"ciphertext": token, "key_version": version})

    def _decrypt(self, key_name: str, token: object) -> RestResponse:
        if not isinstance(token, str) or not token:
            return _error(400, "missing ciphertext to decrypt")

        prefix, version_tag, blob = _split_token(token)
        if prefix != "vault" or not version_tag.startswith("v") or not version_tag[1:].isdigit():
            return _error(400, "invalid ciphertext: no prefix")
        version = int(version_tag[1:])

        with self._lock:
            versions = self._keys.get(key_name)
            if not versions:
                return _error(404, "encryption key not found")
            if version < 1 or version > len(versions):
                return _error(400, "invalid key version")
            key = versions[version - 1]

        try:
            raw = base64.b64decode(blob, validate=True)
        except (binascii.Error, ValueError):
            return _error(400, "invalid ciphertext: could not decode")
        nonce, sealed = raw[: self.NONCE_SIZE], raw[self.NONCE_SIZE:]
        try:
            plaintext = AESGCM(key).decrypt(nonce, sealed, None)
        except (InvalidTag, ValueError):
            return _error(400, "cipher: message authentication failed")
        return _ok({"plaintext": base64.b64encode(plaintext).decode("ascii")})


def _split_token(token: str) -> tuple:
    parts = token.split(":", 2)
    if len(parts) != 3:
        return "", "", ""
    return parts[0], parts[1], parts[2]


def _ok(data: dict) -> RestResponse:
    body = {
        "request_id": str(uuid.uuid4()),
        "lease_id": "",
        "renewable": False,
        "lease_duration": 0,
        "data": data,
        "wrap_info": None,
        "warnings": None,
        "auth": None,
    }
    return RestResponse(200, json.dumps(body).encode("utf-8"), "application/json")


def _error(status_code: int, message: str) -> RestResponse:
    body = json.dumps({"errors": [message]}).encode("utf-8")
    return RestResponse(status_code, body, "application/json")
