# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Error taxonomy for the login pipeline.

Each error carries the HTTP status and the public message the caller sees.
``reason`` is internal detail for logs and never contains credential values.
"""

from typing import Optional


class LoginGatewayError(Exception):
    status_code: int = 400
    public_message: str = "Bad request"
    outcome: str = "error"

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or self.public_message
        super().__init__(self.reason)


class MethodNotAllowed(LoginGatewayError):
    status_code = 405
    public_message = "Method not allowed"
    outcome = "method_not_allowed"


class UnsupportedMediaType(LoginGatewayError):
    status_code = 415
    public_message = "Unsupported media type"
    outcome = "unsupported_media_type"


class MalformedRequest(LoginGatewayError):
    """Bad JSON or missing/empty ``username`` / ``password``."""

    status_code = 400
    public_message = "Bad request"
    outcome = "malformed_request"


# ValidationFailure and BackendUnavailable share a status so the caller
# cannot tell which stage rejected the request.
class ValidationFailure(LoginGatewayError):
    status_code = 401
    public_message = "Invalid username or password format"
    outcome = "validation_failed"


class BackendUnavailable(LoginGatewayError):
    """Network error, timeout, or a reply that is not a usable JSON verdict."""

    status_code = 401
    public_message = "Backend authentication failed"
    outcome = "backend_unavailable"
