"""Shared fixtures: scripted transports and configs."""
import json
from typing import Callable, List, Union

import pytest

from pytransit.rest.transport import RequestSpec, RestResponse, Transport
from pytransit.util.config import TransitConfig

ADDRESS = "https://vault.example.com:8200"
TOKEN = "s.test-token"

Outcome = Union[RestResponse, Exception]


class ScriptedTransport(Transport):
    """Replays a fixed list of outcomes and records every request."""

    def __init__(self, outcomes: List[Outcome]):
        self._outcomes = list(outcomes)
        self.requests: List[RequestSpec] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.requests)

    def post(self, spec: RequestSpec) -> RestResponse:
        self.requests.append(spec)
        # Repeat the last outcome once the script runs out
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


def json_response(document: object, status_code: int = 200) -> RestResponse:
    return RestResponse(status_code, json.dumps(document).encode("utf-8"), "application/json")


@pytest.fixture
def make_response() -> Callable[..., RestResponse]:
    return json_response


@pytest.fixture
def scripted() -> Callable[..., ScriptedTransport]:
    def factory(*outcomes: Outcome) -> ScriptedTransport:
        return ScriptedTransport(list(outcomes))

    return factory


@pytest.fixture
def config() -> TransitConfig:
    return TransitConfig.from_token(ADDRESS, TOKEN, max_retries=0, retry_interval=0.0)


@pytest.fixture
def encrypt_ok() -> RestResponse:
    return json_response(
        {
            "lease_id": "",
            "renewable": False,
            "lease_duration": 0,
            "data": {"ciphertext": "vault:v1:abcd"},
        }
    )
