"""End-to-end tests for TransitClient against stub and in-process transports."""
import json
import os
import threading

import pytest

from pytransit import (
    InvalidArgumentError,
    LocalTransitTransport,
    MalformedResponseError,
    OperationFailedError,
    RetryCancelledError,
    TransitClient,
    TransitConfig,
    TransitOperation,
    create_transit_client,
    create_transit_client_from_env,
)
from pytransit.rest.transport import RequestsTransport, RestResponse

ADDRESS = "http://vault.local:8200"
TOKEN = "s.root"


@pytest.fixture
def local() -> LocalTransitTransport:
    return LocalTransitTransport(token=TOKEN)


@pytest.fixture
def client(local: LocalTransitTransport) -> TransitClient:
    return create_transit_client(ADDRESS, TOKEN, transport=local, retry_interval=0.0)


class TestEncryptScenario:
    def test_orders_key_hello(self, scripted, config: TransitConfig, encrypt_ok: RestResponse) -> None:
        transport = scripted(encrypt_ok)
        result = TransitClient(config, transport).encrypt("orders-key", "hello")

        assert result.payload == "vault:v1:abcd"
        assert result.retries == 0
        assert result.operation is TransitOperation.ENCRYPT

        sent = transport.requests[0]
        assert sent.path == "/v1/transit/encrypt/orders-key"
        assert sent.headers["X-Vault-Token"] == "s.test-token"
        assert json.loads(sent.body) == {"plaintext": "aGVsbG8="}

    def test_missing_ciphertext_raises(self, scripted, config: TransitConfig, make_response) -> None:
        transport = scripted(make_response({"lease_id": "", "data": {}}))
        with pytest.raises(MalformedResponseError):
            TransitClient(config, transport).encrypt("orders-key", "hello")

    def test_empty_key_name_never_hits_transport(self, scripted, config: TransitConfig, encrypt_ok) -> None:
        transport = scripted(encrypt_ok)
        client = TransitClient(config, transport)
        with pytest.raises(InvalidArgumentError):
            client.encrypt("", "hello")
        with pytest.raises(InvalidArgumentError):
            client.decrypt("", "vault:v1:abcd")
        assert transport.calls == 0


class TestDecryptTagging:
    def test_decrypt_decodes_plaintext_field(self, scripted, config: TransitConfig, make_response) -> None:
        transport = scripted(make_response({"data": {"plaintext": "aGVsbG8="}}))
        result = TransitClient(config, transport).decrypt("orders-key", "vault:v1:abcd")
        assert result.payload == "hello"
        assert result.operation is TransitOperation.DECRYPT
        assert transport.requests[0].path == "/v1/transit/decrypt/orders-key"
        assert json.loads(transport.requests[0].body) == {"ciphertext": "vault:v1:abcd"}

    def test_encrypt_after_retries_is_still_encrypt(
        self, scripted, config: TransitConfig, encrypt_ok: RestResponse
    ) -> None:
        transport = scripted(RestResponse(503, b""), encrypt_ok)
        client = TransitClient(config, transport).with_retries(2, 0.0)
        result = client.encrypt("orders-key", "hello")
        assert result.operation is TransitOperation.ENCRYPT
        assert result.payload == "vault:v1:abcd"
        assert result.retries == 1


class TestRetries:
    def test_uses_configured_retry_budget(self, scripted) -> None:
        transport = scripted(ConnectionError("down"))
        client = create_transit_client(
            ADDRESS, TOKEN, transport=transport, max_retries=2, retry_interval=0.0
        )
        with pytest.raises(OperationFailedError) as exc_info:
            client.encrypt("k", "x")
        assert transport.calls == 3
        assert exc_info.value.retries == 2

    def test_with_retries_keeps_original(self, client: TransitClient) -> None:
        adjusted = client.with_retries(5, 0.1)
        assert adjusted.config.max_retries == 5
        assert client.config.max_retries == 0
        assert adjusted.transport is client.transport

    def test_cancel_event_is_forwarded(self, scripted) -> None:
        transport = scripted(RestResponse(503, b""))
        client = create_transit_client(
            ADDRESS, TOKEN, transport=transport, max_retries=3, retry_interval=10.0
        )
        cancel = threading.Event()
        timer = threading.Timer(0.05, cancel.set)
        timer.start()
        try:
            with pytest.raises(RetryCancelledError):
                client.encrypt("k", "x", cancel_event=cancel)
        finally:
            timer.cancel()
        assert transport.calls == 1


class TestRoundTrip:
    @pytest.mark.parametrize("plaintext", ["hello", "", "naïve ☃ 🚀", "x" * 10000])
    def test_decrypt_inverts_encrypt(self, client: TransitClient, plaintext: str) -> None:
        ciphertext = client.encrypt("orders-key", plaintext).payload
        assert ciphertext.startswith("vault:v1:")
        assert client.decrypt("orders-key", ciphertext).payload == plaintext

    def test_binary_round_trip(self, client: TransitClient) -> None:
        data = os.urandom(64)
        ciphertext = client.encrypt("blobs", data).payload
        assert client.decrypt("blobs", ciphertext).plaintext_bytes == data

    def test_ciphertexts_are_randomized(self, client: TransitClient) -> None:
        first = client.encrypt("k", "same").payload
        second = client.encrypt("k", "same").payload
        assert first != second

    def test_wrong_key_fails(self, client: TransitClient) -> None:
        ciphertext = client.encrypt("alpha", "secret").payload
        client.encrypt("beta", "warm-up")
        with pytest.raises(OperationFailedError) as exc_info:
            client.decrypt("beta", ciphertext)
        assert exc_info.value.status_code == 400

    def test_recovers_from_transient_failures(self, local: LocalTransitTransport) -> None:
        client = create_transit_client(
            ADDRESS, TOKEN, transport=local, max_retries=2, retry_interval=0.0
        )
        local.fail_next(1, status_code=503)
        local.fail_next(1, status_code=None)
        result = client.encrypt("orders-key", "hello")
        assert result.retries == 2
        assert local.calls == 3

    def test_bad_token_is_terminal(self, local: LocalTransitTransport) -> None:
        client = create_transit_client(ADDRESS, "s.wrong", transport=local)
        with pytest.raises(OperationFailedError) as exc_info:
            client.encrypt("orders-key", "hello")
        assert exc_info.value.status_code == 403
        assert "permission denied" in exc_info.value.last_error.body

    def test_concurrent_calls_are_independent(self, client: TransitClient) -> None:
        results = {}

        def worker(i: int) -> None:
            ct = client.encrypt("shared", f"message-{i}").payload
            results[i] = client.decrypt("shared", ct).payload

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results == {i: f"message-{i}" for i in range(8)}


class TestFactories:
    def test_default_transport_is_requests(self) -> None:
        client = create_transit_client(ADDRESS, TOKEN)
        assert isinstance(client.transport, RequestsTransport)
        client.close()

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, local: LocalTransitTransport) -> None:
        monkeypatch.setenv("VAULT_ADDR", ADDRESS)
        monkeypatch.setenv("VAULT_TOKEN", TOKEN)
        monkeypatch.setenv("VAULT_MAX_RETRIES", "3")
        client = create_transit_client_from_env(transport=local, retry_interval=0.0)
        assert client.config.max_retries == 3
        assert client.config.retry_interval == 0.0
        ct = client.encrypt("env-key", "hi").payload
        assert client.decrypt("env-key", ct).payload == "hi"

    def test_context_manager_closes_transport(self, scripted, config: TransitConfig, encrypt_ok) -> None:
        transport = scripted(encrypt_ok)
        with TransitClient(config, transport) as client:
            client.encrypt("k", "x")
        assert transport.closed is True
