# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Tests for the Login Gateway HTTP surface.
Backend is stubbed with httpx.MockTransport via dependency overrides.
Run: pytest test_main.py -v
"""

import asyncio
import json
import logging

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from main import app
from login_gateway.core.dependencies import get_backend_endpoint, get_backend_forwarder
from login_gateway.middleware import RateLimitMiddleware
from login_gateway.models.domain import BackendEndpoint
from login_gateway.services.backend_client import BackendForwarder

VALID = {"username": "validUser1", "password": "Passw0rd!"}


class BackendStub:
    """Records outbound calls and answers with a canned reply or error."""

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.error: type[Exception] | None = None
        self.respond(200, json={"success": True, "token": "abc"})

    def respond(self, status_code: int, **kwargs) -> None:
        self._reply = (status_code, kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error("simulated failure", request=request)
        status_code, kwargs = self._reply
        return httpx.Response(status_code, **kwargs)


@pytest.fixture
def backend():
    return BackendStub()


@pytest.fixture
def client(backend):
    stub_client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    app.dependency_overrides[get_backend_forwarder] = lambda: BackendForwarder(stub_client)
    app.dependency_overrides[get_backend_endpoint] = lambda: BackendEndpoint(url="http://backend.test/auth")
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    asyncio.run(stub_client.aclose())
    assert stub_client.is_closed


def _post(client, payload, content_type="application/json"):
    body = payload if isinstance(payload, (bytes, str)) else json.dumps(payload)
    return client.post("/", content=body, headers={"content-type": content_type})


# ============================================
# Health & Metrics
# ============================================
class TestSystem:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["service"] == "login-gateway"
        assert "version" in data

    def test_metrics_exposes_login_counters(self, client):
        _post(client, VALID)
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "login_gateway_login_outcomes_total" in resp.text

    def test_request_id_generated(self, client):
        resp = client.get("/health")
        assert resp.headers.get("X-Request-ID")

    def test_request_id_echoed(self, client):
        resp = client.post("/", json=VALID, headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"


# ============================================
# Input gate: method / content type / body
# ============================================
class TestInputGate:
    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "OPTIONS"])
    def test_non_post_is_405(self, client, backend, method):
        resp = client.request(method, "/", content=b"not json at all",
                              headers={"content-type": "application/json"})
        assert resp.status_code == 405
        assert resp.headers["allow"] == "POST"
        assert resp.json() == {"success": False, "message": "Method not allowed"}
        assert backend.calls == []

    def test_head_is_405(self, client):
        assert client.head("/").status_code == 405

    @pytest.mark.parametrize("method", ["TRACE", "PURGE", "PROPFIND"])
    def test_unrouted_method_gets_envelope(self, client, backend, method):
        resp = client.request(method, "/")
        assert resp.status_code == 405
        assert resp.headers["allow"] == "POST"
        assert resp.json() == {"success": False, "message": "Method not allowed"}
        assert backend.calls == []

    def test_wrong_method_on_system_route_gets_envelope(self, client):
        resp = client.post("/health")
        assert resp.status_code == 405
        assert resp.json() == {"success": False, "message": "Method not allowed"}

    def test_unknown_path_keeps_404(self, client):
        resp = client.get("/nope")
        assert resp.status_code == 404

    @pytest.mark.parametrize("content_type", ["text/plain", "application/x-www-form-urlencoded", ""])
    def test_wrong_content_type_is_415(self, client, backend, content_type):
        resp = _post(client, VALID, content_type=content_type)
        assert resp.status_code == 415
        assert resp.json()["success"] is False
        assert backend.calls == []

    def test_missing_content_type_is_415(self, client):
        resp = client.post("/", content=json.dumps(VALID).encode())
        assert resp.status_code == 415

    def test_json_with_charset_accepted(self, client):
        resp = _post(client, VALID, content_type="application/json; charset=utf-8")
        assert resp.status_code == 200

    @pytest.mark.parametrize("body", [
        b"not json",
        b"{\"username\":",
        b"",
        b"[1, 2]",
        pytest.param(b"[" * 100000 + b"]" * 100000, id="deeply-nested"),
    ])
    def test_malformed_json_is_400(self, client, backend, body):
        resp = _post(client, body)
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Bad request"}
        assert backend.calls == []

    @pytest.mark.parametrize("payload", [
        {"username": "validUser1"},
        {"password": "Passw0rd!"},
        {"username": "", "password": "Passw0rd!"},
        {"username": "validUser1", "password": 12345678},
    ])
    def test_missing_fields_is_400(self, client, payload):
        resp = _post(client, payload)
        assert resp.status_code == 400


# ============================================
# Validation
# ============================================
class TestValidation:
    def test_short_username_rejected(self, client, backend):
        resp = _post(client, {"username": "ab", "password": "Passw0rd!"})
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Invalid username or password format"}
        assert backend.calls == []

    def test_short_password_rejected(self, client, backend):
        resp = _post(client, {"username": "validUser1", "password": "short1"})
        assert resp.status_code == 401
        assert resp.json()["success"] is False
        assert backend.calls == []

    def test_sanitized_values_forwarded(self, client, backend):
        resp = _post(client, {"username": "  validUser1\x00", "password": "\tPassw0rd!\n"})
        assert resp.status_code == 200
        assert json.loads(backend.calls[0].content) == VALID

    def test_response_never_echoes_credentials(self, client):
        resp = _post(client, {"username": "ab", "password": "Passw0rd!"})
        assert "Passw0rd!" not in resp.text
        assert set(resp.json()) == {"success", "message"}


# ============================================
# Backend forwarding
# ============================================
class TestBackend:
    def test_success_returns_token_only(self, client, backend):
        backend.respond(200, json={
            "success": True, "token": "abc", "user": {"id": 1}, "internal": "x",
        })
        resp = _post(client, VALID)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "token": "abc"}
        assert len(backend.calls) == 1

    def test_backend_rejection_is_401(self, client, backend):
        backend.respond(200, json={"success": False, "message": "bad creds"})
        resp = _post(client, VALID)
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "bad creds"}

    @pytest.mark.parametrize("error", [httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout])
    def test_backend_unreachable_is_4xx(self, client, backend, error):
        backend.error = error
        resp = _post(client, VALID)
        assert 400 <= resp.status_code < 500
        assert resp.json() == {"success": False, "message": "Backend authentication failed"}

    def test_backend_non_json_reply(self, client, backend):
        backend.respond(500, text="Internal Server Error")
        resp = _post(client, VALID)
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Backend authentication failed"}

    def test_validation_and_backend_failures_share_status(self, client, backend):
        backend.error = httpx.ConnectError
        backend_failure = _post(client, VALID)
        validation_failure = _post(client, {"username": "ab", "password": "Passw0rd!"})
        assert backend_failure.status_code == validation_failure.status_code
        assert backend_failure.json().keys() == validation_failure.json().keys()

    def test_one_backend_call_per_request(self, client, backend):
        backend.error = httpx.ConnectError
        _post(client, VALID)
        assert len(backend.calls) == 1

    def test_unconfigured_backend(self, client, backend):
        app.dependency_overrides[get_backend_endpoint] = lambda: BackendEndpoint(url="")
        resp = _post(client, VALID)
        assert resp.status_code == 401
        assert resp.json()["message"] == "Backend authentication failed"
        assert backend.calls == []


# ============================================
# Logging never carries credential values
# ============================================
class TestLogging:
    @pytest.fixture
    def records(self):
        captured: list[str] = []

        class _ListHandler(logging.Handler):
            def emit(self, record):
                captured.append(self.format(record))

        handler = _ListHandler()
        names = ["login_gateway.services.login_service", "login_gateway.services.backend_client"]
        for name in names:
            logging.getLogger(name).addHandler(handler)
        yield captured
        for name in names:
            logging.getLogger(name).removeHandler(handler)

    def test_credentials_absent_from_logs(self, client, backend, records):
        _post(client, {"username": "ab", "password": "Sekr1tPass"})
        _post(client, {"username": "validUser1", "password": 5})
        backend.error = httpx.ConnectError
        _post(client, {"username": "validUser1", "password": "Sekr1tPass"})
        backend.error = None
        backend.respond(200, json={"success": True, "token": "tok-999"})
        _post(client, {"username": "validUser1", "password": "Sekr1tPass"})

        assert records
        joined = "\n".join(records)
        assert "Sekr1tPass" not in joined
        assert "validUser1" not in joined
        assert "tok-999" not in joined


# ============================================
# Async client (ASGI transport)
# ============================================
@pytest.mark.anyio
async def test_concurrent_requests_independent(backend):
    async with httpx.AsyncClient(transport=httpx.MockTransport(backend)) as stub_client:
        app.dependency_overrides[get_backend_forwarder] = lambda: BackendForwarder(stub_client)
        app.dependency_overrides[get_backend_endpoint] = lambda: BackendEndpoint(url="http://backend.test/auth")
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                good, bad = await asyncio.gather(
                    ac.post("/", json=VALID),
                    ac.post("/", json={"username": "ab", "password": "Passw0rd!"}),
                )
            assert good.status_code == 200
            assert bad.status_code == 401
            assert len(backend.calls) == 1
        finally:
            app.dependency_overrides.clear()
    assert stub_client.is_closed


# ============================================
# Rate limiting
# ============================================
def test_rate_limit_on_login_path():
    limited = FastAPI()
    limited.add_middleware(RateLimitMiddleware, max_requests=2, window_seconds=60, path="/")

    @limited.post("/")
    async def _login():
        return {"success": True}

    @limited.get("/health")
    async def _health():
        return {"status": "ok"}

    c = TestClient(limited)
    assert c.post("/").status_code == 200
    second = c.post("/")
    assert second.headers["X-RateLimit-Remaining"] == "0"
    blocked = c.post("/")
    assert blocked.status_code == 429
    assert blocked.json() == {"success": False, "message": "Rate limit exceeded. Try again later."}
    assert "Retry-After" in blocked.headers
    assert c.get("/health").status_code == 200


def test_rate_limit_disabled_by_default(client):
    for _ in range(20):
        assert _post(client, VALID).status_code == 200
