# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "login_gateway_requests_total",
    "Total HTTP requests to the login gateway",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "login_gateway_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
RATE_LIMITED = Counter(
    "login_gateway_rate_limited_total",
    "Login requests rejected by rate limiting",
)

# ── Business Metrics (updated by service layer only) ──
LOGIN_OUTCOMES = Counter(
    "login_gateway_login_outcomes_total",
    "Login requests by terminal outcome",
    ["outcome"],
)
BACKEND_LATENCY = Histogram(
    "login_gateway_backend_duration_seconds",
    "Latency of calls to the authentication backend",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
BACKEND_FAILURES = Counter(
    "login_gateway_backend_failures_total",
    "Backend calls that did not yield a usable verdict",
    ["reason"],
)
