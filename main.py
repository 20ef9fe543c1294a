# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Login Gateway
=============
Accepts a username/password pair as a JSON POST, sanitizes and validates it,
forwards it to the configured authentication backend and relays a minimized
{success, token, message} envelope. Tokens are never issued or stored here.

Port: 8080
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from login_gateway.controllers import login_controller, system_controller
from login_gateway.core.config import settings
from login_gateway.core.dependencies import close_http_client, init_http_client
from login_gateway.core.errors import MethodNotAllowed
from login_gateway.core.logging import get_logger
from login_gateway.middleware import MetricsMiddleware, RateLimitMiddleware, RequestIDMiddleware
from login_gateway.schemas import ResponseEnvelope
from login_gateway.services.input_gate import ALLOWED_METHOD

logger = get_logger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_http_client()
    if not settings.BACKEND_AUTH_URL:
        logger.warning("BACKEND_AUTH_URL is not set; every login will fail")
    logger.info("Login gateway starting (version %s)", settings.SERVICE_VERSION)
    yield
    await close_http_client()
    logger.info("Login gateway shut down")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Login Gateway",
    description="Validates credentials and forwards them to the authentication backend.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

# Last added runs first: request ID is assigned before metrics and rate limiting.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)

app.include_router(system_controller.router)
app.include_router(login_controller.router)


# ── 405 envelope for methods the router rejects before the login handler ──
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code != 405:
        return await http_exception_handler(request, exc)
    headers = {"Allow": ALLOWED_METHOD} if request.url.path == settings.LOGIN_PATH else exc.headers
    return JSONResponse(
        status_code=405,
        content=ResponseEnvelope.failure(MethodNotAllowed.public_message).to_body(),
        headers=headers,
    )


# ── Global exception handler ─────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content=ResponseEnvelope.failure("Internal server error").to_body(),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
