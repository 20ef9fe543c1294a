# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


class LoginRequest(BaseModel):
    """Inbound body. Fields other than username/password are ignored."""
    model_config = ConfigDict(extra="ignore")

    username: StrictStr = Field(..., min_length=1, repr=False)
    password: StrictStr = Field(..., min_length=1, repr=False)


class BackendResult(BaseModel):
    """Backend verdict. Anything beyond these three fields is discarded."""
    model_config = ConfigDict(extra="ignore")

    success: StrictBool
    token: Optional[StrictStr] = Field(default=None, repr=False)
    message: Optional[StrictStr] = None


class ResponseEnvelope(BaseModel):
    success: bool
    token: Optional[str] = Field(default=None, repr=False)
    message: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> "ResponseEnvelope":
        return cls(success=False, message=message)

    @classmethod
    def from_backend(cls, result: BackendResult) -> "ResponseEnvelope":
        return cls(success=result.success, token=result.token, message=result.message)

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
