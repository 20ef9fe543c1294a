# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Login — the single credential-forwarding endpoint."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from login_gateway.core.config import settings
from login_gateway.core.dependencies import get_login_service
from login_gateway.services.login_service import LoginService

router = APIRouter(tags=["Auth"])

# Every method is routed here so non-POST requests get a JSON 405 envelope.
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route(settings.LOGIN_PATH, methods=_ALL_METHODS)
async def login(request: Request, service: LoginService = Depends(get_login_service)):
    outcome = await service.handle(
        method=request.method,
        content_type=request.headers.get("content-type"),
        read_body=request.body,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        status_code=outcome.status_code,
        content=outcome.envelope.to_body(),
        headers=outcome.headers,
    )
