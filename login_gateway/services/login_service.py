# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Login pipeline — input gate, validator, backend forwarder.
Business logic layer. No FastAPI dependency.
"""

from typing import Awaitable, Callable, Optional

from login_gateway.core.errors import LoginGatewayError, MethodNotAllowed, ValidationFailure
from login_gateway.core.logging import get_logger
from login_gateway.metrics import LOGIN_OUTCOMES
from login_gateway.models.domain import BackendEndpoint, Invalid, LoginOutcome
from login_gateway.schemas import ResponseEnvelope
from login_gateway.services import input_gate, validator
from login_gateway.services.backend_client import BackendForwarder

logger = get_logger(__name__)


class LoginService:
    def __init__(self, forwarder: BackendForwarder, endpoint: BackendEndpoint):
        self._forwarder = forwarder
        self._endpoint = endpoint

    async def handle(
        self,
        method: str,
        content_type: Optional[str],
        read_body: Callable[[], Awaitable[bytes]],
        request_id: Optional[str] = None,
    ) -> LoginOutcome:
        """Run one login request to a terminal outcome. Never raises LoginGatewayError."""
        try:
            credentials = await input_gate.read_credentials(method, content_type, read_body)
            verdict = validator.validate(credentials)
            if isinstance(verdict, Invalid):
                raise ValidationFailure(verdict.reason)
            envelope = await self._forwarder.forward(verdict.credentials, self._endpoint)
        except LoginGatewayError as exc:
            return self._reject(exc, request_id)

        if envelope.success:
            LOGIN_OUTCOMES.labels(outcome="success").inc()
            return LoginOutcome(status_code=200, envelope=envelope)
        LOGIN_OUTCOMES.labels(outcome="backend_rejected").inc()
        logger.info("Login rejected by backend", extra={"request_id": request_id})
        return LoginOutcome(status_code=401, envelope=envelope)

    @staticmethod
    def _reject(exc: LoginGatewayError, request_id: Optional[str]) -> LoginOutcome:
        LOGIN_OUTCOMES.labels(outcome=exc.outcome).inc()
        logger.info(
            "Login request rejected: outcome=%s, reason=%s",
            exc.outcome,
            exc.reason,
            extra={"request_id": request_id},
        )
        headers = {"Allow": input_gate.ALLOWED_METHOD} if isinstance(exc, MethodNotAllowed) else {}
        return LoginOutcome(
            status_code=exc.status_code,
            envelope=ResponseEnvelope.failure(exc.public_message),
            headers=headers,
        )
