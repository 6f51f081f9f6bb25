# pytransit/util/token_providers.py
"""
Token Provider architecture for decoupling credential sourcing from requests.

Usage:
    config = TransitConfig(
        address="https://vault.example.com:8200",
        token_provider=EnvTokenProvider("VAULT_TOKEN"),
    )

The request builder asks the provider for the token on every call and puts
it in the ``X-Vault-Token`` header. Providers only source the token; logging
in and renewing it is the job of whatever put it there.
"""
import os
from abc import ABC, abstractmethod
from typing import Mapping, Optional

from pytransit.util.errors import ConfigurationError


class TokenNotFoundError(ConfigurationError):
    """Raised when a token cannot be retrieved."""


class TokenProvider(ABC):
    """
    Abstract base for token providers.

    Implement this to plug in a custom credential source.
    """

    @abstractmethod
    def get_token(self) -> str:
        """
        Retrieve the auth token.

        Returns:
            The token string, never empty

        Raises:
            TokenNotFoundError: If no token is available
        """
        ...

    def __repr__(self) -> str:
        # Never expose the token itself
        return f"<{self.__class__.__name__}>"


class StaticTokenProvider(TokenProvider):
    """
    Fixed in-memory token.

    Best for: Testing, scripts, tokens handed over by an auth layer.
    """

    def __init__(self, token: str):
        self._token = token

    def get_token(self) -> str:
        if not self._token:
            raise TokenNotFoundError("No Vault token configured")
        return self._token


class EnvTokenProvider(TokenProvider):
    """
    Read token from an environment variable at call time.

    Best for: Container deployments, CI/CD pipelines, agents that rotate the
    variable underneath a long-running process.
    """

    def __init__(self, env_var: str = "VAULT_TOKEN", environ: Optional[Mapping[str, str]] = None):
        self._env_var = env_var
        self._environ = environ

    def get_token(self) -> str:
        environ = os.environ if self._environ is None else self._environ
        value = environ.get(self._env_var, "").strip()
        if not value:
            raise TokenNotFoundError(f"Environment variable {self._env_var} not set")
        return value

    def __repr__(self) -> str:
        return f"<EnvTokenProvider env_var={self._env_var!r}>"
