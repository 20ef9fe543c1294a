# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
"""

from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from login_gateway.schemas import ResponseEnvelope


class Credentials(BaseModel):
    """A username/password pair. Lives for one request, never persisted."""
    model_config = ConfigDict(frozen=True)

    username: str = Field(..., repr=False)
    password: str = Field(..., repr=False)


# ── Input gate outcome ──
class Parsed(BaseModel):
    credentials: Credentials


class Malformed(BaseModel):
    reason: str


ParseResult = Union[Parsed, Malformed]


# ── Validator outcome ──
class Valid(BaseModel):
    credentials: Credentials


class Invalid(BaseModel):
    reason: str


ValidationResult = Union[Valid, Invalid]


class BackendEndpoint(BaseModel):
    """Where and how to reach the authentication backend."""
    model_config = ConfigDict(frozen=True)

    url: str = ""
    secret: Optional[str] = Field(default=None, repr=False)
    timeout: float = Field(default=10.0, gt=0)

    @property
    def configured(self) -> bool:
        return bool(self.url)


class LoginOutcome(BaseModel):
    """Final status + envelope for one login request."""
    status_code: int
    envelope: ResponseEnvelope
    headers: Dict[str, str] = Field(default_factory=dict)
