# pytransit/util/config.py
"""
Connection and retry settings for the transit client.

A TransitConfig is a frozen snapshot: every call reads the same values from
start to finish. Use ``dataclasses.replace`` (or ``with_retries``) to derive
an adjusted copy.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional
from urllib.parse import urlparse

from pytransit.util.errors import ConfigurationError
from pytransit.util.token_providers import EnvTokenProvider, StaticTokenProvider, TokenProvider

DEFAULT_MAX_RETRIES = 0
DEFAULT_RETRY_INTERVAL = 1.0  # seconds
DEFAULT_OPEN_TIMEOUT = 5.0  # seconds
DEFAULT_READ_TIMEOUT = 30.0  # seconds

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class TransitConfig:
    """
    Settings for talking to the Vault transit engine.

    Attributes:
        address: Base URL of the Vault server, e.g. "https://vault:8200"
        token_provider: Source of the X-Vault-Token header value
        max_retries: Retries after the first attempt (0 disables retry)
        retry_interval: Constant delay between attempts, in seconds
        open_timeout: Connect timeout, in seconds
        read_timeout: Read timeout, in seconds
        verify_ssl: Whether to verify the server certificate
        ca_cert: Optional CA bundle path used for verification
        namespace: Optional Vault Enterprise namespace
    """

    address: str
    token_provider: TokenProvider
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_interval: float = DEFAULT_RETRY_INTERVAL
    open_timeout: float = DEFAULT_OPEN_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    verify_ssl: bool = True
    ca_cert: Optional[str] = None
    namespace: Optional[str] = None

    def __post_init__(self) -> None:
        parsed = urlparse(self.address or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                f"Vault address must be an http(s) URL, got {self.address!r}"
            )
        if not isinstance(self.token_provider, TokenProvider):
            raise ConfigurationError("token_provider must be a TokenProvider")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_interval < 0:
            raise ConfigurationError(
                f"retry_interval must be >= 0, got {self.retry_interval}"
            )
        if self.open_timeout <= 0 or self.read_timeout <= 0:
            raise ConfigurationError("Timeouts must be positive")

    @property
    def base_url(self) -> str:
        return self.address.rstrip("/")

    @property
    def verify(self):
        """Value for the transport's TLS verification setting (bool or CA bundle path)."""
        if self.verify_ssl and self.ca_cert:
            return self.ca_cert
        return self.verify_ssl

    def with_retries(self, max_retries: int, retry_interval: float) -> "TransitConfig":
        """Return a copy with a different retry policy."""
        return replace(self, max_retries=max_retries, retry_interval=retry_interval)

    @classmethod
    def from_token(cls, address: str, token: str, **options) -> "TransitConfig":
        """Build a config around a fixed token."""
        return cls(address=address, token_provider=StaticTokenProvider(token), **options)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TransitConfig":
        """
        Build a config from VAULT_* environment variables.

        VAULT_ADDR is required. The token is read from VAULT_TOKEN lazily, on
        each request, so a rotated token is picked up without rebuilding.
        """
        env = os.environ if environ is None else environ

        address = env.get("VAULT_ADDR", "").strip()
        if not address:
            raise ConfigurationError("Environment variable VAULT_ADDR not set")

        retry_ms = _env_float(env, "VAULT_RETRY_INTERVAL_MILLISECONDS", DEFAULT_RETRY_INTERVAL * 1000)
        return cls(
            address=address,
            token_provider=EnvTokenProvider("VAULT_TOKEN", environ=environ),
            max_retries=_env_int(env, "VAULT_MAX_RETRIES", DEFAULT_MAX_RETRIES),
            retry_interval=retry_ms / 1000.0,
            open_timeout=_env_float(env, "VAULT_OPEN_TIMEOUT", DEFAULT_OPEN_TIMEOUT),
            read_timeout=_env_float(env, "VAULT_READ_TIMEOUT", DEFAULT_READ_TIMEOUT),
            verify_ssl=_env_bool(env, "VAULT_SSL_VERIFY", True),
            ca_cert=env.get("VAULT_SSL_CERT") or env.get("VAULT_CACERT") or None,
            namespace=env.get("VAULT_NAMESPACE") or None,
        )


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"Environment variable {name} is not a number: {raw!r}") from e


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"Environment variable {name} is not an integer: {raw!r}") from e


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Environment variable {name} is not a boolean: {raw!r}")
