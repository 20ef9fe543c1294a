# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Input gate — method, content type, JSON body and field schema.
Turns the raw request into Credentials or raises a LoginGatewayError.
"""

import json
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError

from login_gateway.core.errors import MalformedRequest, MethodNotAllowed, UnsupportedMediaType
from login_gateway.models.domain import Credentials, Malformed, Parsed, ParseResult
from login_gateway.schemas import LoginRequest

ALLOWED_METHOD = "POST"


def check_method(method: str) -> None:
    if method.upper() != ALLOWED_METHOD:
        raise MethodNotAllowed(f"method {method.upper()} not allowed")


def is_json_media_type(content_type: Optional[str]) -> bool:
    """True for application/json and application/*+json, ignoring parameters."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == "application/json":
        return True
    return media_type.startswith("application/") and media_type.endswith("+json")


def check_content_type(content_type: Optional[str]) -> None:
    if not is_json_media_type(content_type):
        raise UnsupportedMediaType("missing or non-JSON content type")


def parse_credentials(body: bytes) -> ParseResult:
    """Decode the body and check its shape before touching any field."""
    try:
        document = json.loads(body)
    except (ValueError, UnicodeDecodeError, RecursionError):
        return Malformed(reason="body is not valid JSON")
    if not isinstance(document, dict):
        return Malformed(reason="body is not a JSON object")
    try:
        request = LoginRequest.model_validate(document)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        return Malformed(reason=f"missing or invalid fields: {', '.join(fields)}")
    return Parsed(credentials=Credentials(username=request.username, password=request.password))


async def read_credentials(
    method: str,
    content_type: Optional[str],
    read_body: Callable[[], Awaitable[bytes]],
) -> Credentials:
    """Run the gate checks in order. The body is read once, and only for POST."""
    check_method(method)
    check_content_type(content_type)
    result = parse_credentials(await read_body())
    if isinstance(result, Malformed):
        raise MalformedRequest(result.reason)
    return result.credentials
