# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Backend forwarder — one POST to the authentication backend.
Network errors, timeouts and unusable replies become BackendUnavailable;
nothing else escapes.
"""

import time

import httpx
from pydantic import ValidationError

from login_gateway.core.errors import BackendUnavailable
from login_gateway.core.logging import get_logger
from login_gateway.metrics import BACKEND_FAILURES, BACKEND_LATENCY
from login_gateway.models.domain import BackendEndpoint, Credentials
from login_gateway.schemas import BackendResult, ResponseEnvelope

logger = get_logger(__name__)


class BackendForwarder:
    """Sends sanitized credentials to the backend and minimizes its reply."""

    def __init__(self, http_client: httpx.AsyncClient):
        self._client = http_client

    async def forward(self, credentials: Credentials, endpoint: BackendEndpoint) -> ResponseEnvelope:
        """Return the backend's verdict as an envelope. No retry, no caching."""
        if not endpoint.configured:
            BACKEND_FAILURES.labels(reason="unconfigured").inc()
            logger.error("Backend URL is not configured")
            raise BackendUnavailable("backend url not configured")

        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if endpoint.secret:
            headers["Authorization"] = f"Bearer {endpoint.secret}"

        start = time.monotonic()
        try:
            resp = await self._client.post(
                endpoint.url,
                json={"username": credentials.username, "password": credentials.password},
                headers=headers,
                timeout=endpoint.timeout,
            )
        except httpx.HTTPError as exc:
            BACKEND_FAILURES.labels(reason="network").inc()
            logger.warning("Backend unreachable: %s", type(exc).__name__)
            raise BackendUnavailable(f"backend unreachable: {type(exc).__name__}") from exc
        finally:
            BACKEND_LATENCY.observe(time.monotonic() - start)

        try:
            result = BackendResult.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            BACKEND_FAILURES.labels(reason="invalid_reply").inc()
            logger.warning("Backend reply unusable: status=%d", resp.status_code)
            raise BackendUnavailable("backend reply is not a JSON verdict") from exc

        logger.info("Backend verdict: success=%s, status=%d", result.success, resp.status_code)
        return ResponseEnvelope.from_backend(result)
