"""Tests for the synchronous HTTP client."""

from __future__ import annotations

import json

import httpx
import pytest

from idmgmt.client.sync_client import SyncClient
from idmgmt.exceptions import (
    AuthError,
    ConnectionError_,
    NotFoundError,
    RequestError,
    ServerError,
)
from idmgmt.models import ManagerOptions
from idmgmt.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_options(
    base_url: str = "https://api.example.com",
    token: str | None = None,
    headers: dict[str, str] | None = None,
) -> ManagerOptions:
    return ManagerOptions(base_url=base_url, token=token, headers=headers or {})


@pytest.fixture(autouse=True)
def _clean_output():
    """Reset the global output manager between tests."""
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Context manager
# ---------------------------------------------------------------------------


class TestContextManager:
    def test_enter_creates_client(self) -> None:
        client = SyncClient(_make_options())
        assert client._client is None
        with client:
            assert client._client is not None
        assert client._client is None

    def test_request_outside_context_fails(self) -> None:
        client = SyncClient(_make_options())
        with pytest.raises(AssertionError):
            client.get("/users")


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestRequests:
    def test_post_json_body(self, transport) -> None:
        transport.reply(201, json={"id": 1})

        with SyncClient(_make_options(), transport=transport) as client:
            response = client.post("/device/verify", json_body={"user_code": "A"})

        assert response.status_code == 201
        request = transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.example.com/device/verify"
        assert json.loads(request.content) == {"user_code": "A"}

    def test_base_url_path_is_preserved(self, transport) -> None:
        options = _make_options(base_url="https://api.example.com/api/v2/")

        with SyncClient(options, transport=transport) as client:
            client.post("/device/activate")

        assert transport.requests[0].url.path == "/api/v2/device/activate"

    def test_base_url_query_is_kept_after_path(self, transport) -> None:
        options = _make_options(base_url="https://api.example.com/api?tenant=acme")

        with SyncClient(options, transport=transport) as client:
            client.post("/device/verify")

        url = transport.requests[0].url
        assert url.path == "/api/device/verify"
        assert url.params["tenant"] == "acme"

    def test_no_body_when_json_body_is_none(self, transport) -> None:
        with SyncClient(_make_options(), transport=transport) as client:
            client.post("/device/verify")
        assert transport.requests[0].content == b""

    def test_form_data_takes_precedence(self, transport) -> None:
        with SyncClient(_make_options(), transport=transport) as client:
            client.post("/form", data={"a": "1"}, json_body={"b": 2})
        assert transport.requests[0].content == b"a=1"

    def test_raw_body(self, transport) -> None:
        with SyncClient(_make_options(), transport=transport) as client:
            client.put("/raw", body="hello")
        assert transport.requests[0].content == b"hello"

    def test_query_params(self, transport) -> None:
        with SyncClient(_make_options(), transport=transport) as client:
            client.get("/users", params={"page": 2})
        assert transport.requests[0].url.params["page"] == "2"

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_verb_helpers(self, transport, method: str) -> None:
        with SyncClient(_make_options(), transport=transport) as client:
            getattr(client, method.lower())("/thing")
        assert transport.requests[0].method == method


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------


class TestHeaders:
    def test_accept_json_by_default(self, transport) -> None:
        with SyncClient(_make_options(), transport=transport) as client:
            client.get("/users")
        assert transport.requests[0].headers["Accept"] == "application/json"

    def test_token_becomes_bearer_header(self, transport) -> None:
        with SyncClient(_make_options(token="abc"), transport=transport) as client:
            client.get("/users")
        assert transport.requests[0].headers["Authorization"] == "Bearer abc"

    def test_no_authorization_without_token(self, transport) -> None:
        with SyncClient(_make_options(), transport=transport) as client:
            client.get("/users")
        assert "Authorization" not in transport.requests[0].headers

    def test_explicit_authorization_header_wins(self, transport) -> None:
        options = _make_options(token="abc", headers={"authorization": "Bearer xyz"})
        with SyncClient(options, transport=transport) as client:
            client.get("/users")
        assert transport.requests[0].headers.get_list("Authorization") == ["Bearer xyz"]

    def test_configured_headers_are_sent(self, transport) -> None:
        options = _make_options(headers={"X-Tenant": "acme"})
        with SyncClient(options, transport=transport) as client:
            client.get("/users")
        assert transport.requests[0].headers["X-Tenant"] == "acme"

    def test_per_request_headers_override(self, transport) -> None:
        options = _make_options(headers={"X-Tenant": "acme"})
        with SyncClient(options, transport=transport) as client:
            client.get("/users", headers={"X-Tenant": "other"})
        assert transport.requests[0].headers["X-Tenant"] == "other"


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


class TestErrorMapping:
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success_statuses_pass(self, transport, status: int) -> None:
        transport.reply(status)
        with SyncClient(_make_options(), transport=transport) as client:
            assert client.post("/ok").status_code == status

    @pytest.mark.parametrize(
        ("status", "exc_type"),
        [
            (400, RequestError),
            (401, AuthError),
            (403, AuthError),
            (404, NotFoundError),
            (300, RequestError),
            (304, RequestError),
            (409, RequestError),
            (500, ServerError),
            (502, ServerError),
            (503, ServerError),
        ],
    )
    def test_error_statuses_raise(self, transport, status: int, exc_type: type) -> None:
        transport.reply(status)
        with SyncClient(_make_options(), transport=transport) as client:
            with pytest.raises(exc_type) as exc_info:
                client.post("/fail")
        assert type(exc_info.value) is exc_type
        assert exc_info.value.status_code == status
        assert str(exc_info.value) == f"HTTP {status}"

    def test_error_message_from_json_body(self, transport) -> None:
        transport.reply(400, json={"error": "invalid_request", "error_description": "Bad code"})
        with SyncClient(_make_options(), transport=transport) as client:
            with pytest.raises(RequestError, match="HTTP 400: Bad code") as exc_info:
                client.post("/device/verify")
        assert exc_info.value.body == {"error": "invalid_request", "error_description": "Bad code"}
        assert exc_info.value.method == "POST"
        assert exc_info.value.url == "https://api.example.com/device/verify"

    def test_error_message_from_text_body(self, transport) -> None:
        transport.reply(502, text="Bad Gateway")
        with SyncClient(_make_options(), transport=transport) as client:
            with pytest.raises(ServerError, match="HTTP 502: Bad Gateway"):
                client.post("/fail")

    def test_transport_error_becomes_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with SyncClient(_make_options(), transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ConnectionError_, match="Connection refused") as exc_info:
                client.post("/device/verify")
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout_becomes_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with SyncClient(_make_options(), transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ConnectionError_):
                client.post("/device/verify")

    def test_redirect_loop_becomes_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        with SyncClient(_make_options(), transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ConnectionError_) as exc_info:
                client.post("/device/verify")
        assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)

    def test_single_attempt_on_server_error(self, transport) -> None:
        transport.reply(503)
        with SyncClient(_make_options(), transport=transport) as client:
            with pytest.raises(ServerError):
                client.post("/fail")
        assert len(transport.requests) == 1


# ---------------------------------------------------------------------------
# Dry run and debug output
# ---------------------------------------------------------------------------


class TestDryRun:
    def test_dry_run_sends_nothing(self, transport, capsys) -> None:
        set_output(OutputManager(no_color=True))
        options = _make_options(token="secret-token")

        with SyncClient(options, transport=transport, dry_run=True) as client:
            response = client.post("/device/verify", json_body={"user_code": "A"})

        assert transport.requests == []
        assert response.status_code == 200
        assert response.json()["dry_run"] is True

        err = capsys.readouterr().err
        assert "(dry-run) POST https://api.example.com/device/verify" in err
        assert "Authorization: ***" in err
        assert "secret-token" not in err
        assert '"user_code": "A"' in err

    def test_verbose_logs_request_and_status(self, transport, capsys) -> None:
        set_output(OutputManager(no_color=True, verbose=True))
        transport.reply(204)

        with SyncClient(_make_options(), transport=transport) as client:
            client.post("/device/activate")

        err = capsys.readouterr().err
        assert "[debug] POST https://api.example.com/device/activate" in err
        assert "[debug] HTTP 204 POST" in err
