# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Dependency injection — HTTP client, backend endpoint and login service."""
import httpx
from fastapi import Depends

from login_gateway.core.config import settings
from login_gateway.models.domain import BackendEndpoint
from login_gateway.services.backend_client import BackendForwarder
from login_gateway.services.login_service import LoginService

_http_client: httpx.AsyncClient | None = None


def init_http_client():
    global _http_client
    _http_client = httpx.AsyncClient(timeout=settings.BACKEND_TIMEOUT)


async def close_http_client():
    global _http_client
    if _http_client:
        await _http_client.aclose()
    _http_client = None


def get_http_client() -> httpx.AsyncClient:
    assert _http_client is not None, "HTTP client not initialised (lifespan not started)"
    return _http_client


def get_backend_endpoint() -> BackendEndpoint:
    return BackendEndpoint(
        url=settings.BACKEND_AUTH_URL,
        secret=settings.BACKEND_AUTH_SECRET or None,
        timeout=settings.BACKEND_TIMEOUT,
    )


def get_backend_forwarder() -> BackendForwarder:
    return BackendForwarder(get_http_client())


def get_login_service(
    forwarder: BackendForwarder = Depends(get_backend_forwarder),
    endpoint: BackendEndpoint = Depends(get_backend_endpoint),
) -> LoginService:
    return LoginService(forwarder=forwarder, endpoint=endpoint)
