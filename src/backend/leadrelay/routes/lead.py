from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from leadrelay.parsing import get_header
from leadrelay.services.handler import CORS_HEADERS, handle_lead_request
from leadrelay.utils.logger import get_logger

router = APIRouter(prefix="", tags=["lead"])
logger = get_logger(__name__)

# Every verb is routed here so that unsupported ones get the JSON 405 payload.
LEAD_METHODS = ["GET", "POST", "OPTIONS", "PUT", "PATCH", "DELETE"]


@router.api_route("/lead", methods=LEAD_METHODS)
async def lead_webhook(request: Request) -> JSONResponse:
    """Receive a website lead form submission and relay it to Telegram and email."""
    body = await request.body()
    is_base64 = get_header(request.headers, "x-body-encoding").lower() == "base64"
    status_code, payload = await handle_lead_request(
        request.method,
        headers=request.headers,
        body=body,
        is_base64=is_base64,
    )
    return JSONResponse(content=payload, status_code=status_code, headers=CORS_HEADERS)
