# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""HTTP Middleware — request ID propagation, Prometheus metrics, rate limiting."""
import time
import uuid

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from login_gateway.core.config import settings
from login_gateway.metrics import RATE_LIMITED, REQUEST_COUNT, REQUEST_LATENCY
from login_gateway.schemas import ResponseEnvelope
from login_gateway.services.rate_limiter import SlidingWindowRateLimiter

SKIP_PATHS = ("/health", "/metrics", "/openapi.json", "/docs", "/redoc")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start
        path = request.url.path
        if path not in SKIP_PATHS:
            REQUEST_COUNT.labels(method=request.method, endpoint=path, status=str(response.status_code)).inc()
            REQUEST_LATENCY.labels(method=request.method, endpoint=path).observe(duration)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client sliding window on the login path. Disabled when max_requests is 0."""

    def __init__(self, app, max_requests: int = settings.RATE_LIMIT_RPM,
                 window_seconds: int = 60, path: str = settings.LOGIN_PATH):
        super().__init__(app)
        self.max_requests = max_requests
        self.path = path
        self.limiter = SlidingWindowRateLimiter(max_requests, window_seconds)

    async def dispatch(self, request: Request, call_next):
        if self.max_requests <= 0 or request.url.path != self.path:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        allowed, remaining, retry_after = self.limiter.is_allowed(client_ip)

        if not allowed:
            RATE_LIMITED.inc()
            return JSONResponse(
                status_code=429,
                content=ResponseEnvelope.failure("Rate limit exceeded. Try again later.").to_body(),
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(self.max_requests),
                    "X-RateLimit-Remaining": "0",
                },
            )
        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
