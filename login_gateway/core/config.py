# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven, read once at import.
Single source of truth for every tunable parameter.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "login-gateway")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8080"))

    # Backend authentication service
    BACKEND_AUTH_URL: str = os.getenv("BACKEND_AUTH_URL", "").strip()
    BACKEND_AUTH_SECRET: str = os.getenv("BACKEND_AUTH_SECRET", "")
    BACKEND_TIMEOUT: float = float(os.getenv("BACKEND_TIMEOUT", "10.0"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Rate limiting on the login path (0 disables)
    LOGIN_PATH: str = "/"
    RATE_LIMIT_RPM: int = int(os.getenv("RATE_LIMIT_RPM", "0"))
    RATE_LIMIT_ENABLED: bool = RATE_LIMIT_RPM > 0


settings = Settings()
