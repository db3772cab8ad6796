from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from leadrelay.formatting import build_lead_message
from leadrelay.models.lead import LeadSubmission
from leadrelay.parsing import Body, get_header, parse_body
from leadrelay.services.delivery import deliver_lead
from leadrelay.utils.logger import get_logger

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}
JSON_HEADERS = {"Content-Type": "application/json; charset=utf-8", **CORS_HEADERS}

HandlerResult = Tuple[int, Dict[str, Any]]


def _healthcheck(now: Optional[datetime]) -> HandlerResult:
    moment = now or datetime.now(timezone.utc)
    return 200, {"ok": True, "ts": moment.astimezone(timezone.utc).isoformat()}


async def _handle_submission(
    headers: Optional[Mapping[str, Any]],
    body: Body,
    is_base64: bool,
    now: Optional[datetime],
) -> HandlerResult:
    payload = parse_body(body, get_header(headers, "content-type"), is_base64)
    lead = LeadSubmission.from_mapping(payload)
    if not lead.phone:
        logger.info("Rejected lead without phone (fields received: %s)", sorted(payload))
        return 400, {"ok": False, "error": "Required field: phone"}

    text = build_lead_message(lead, now=now)
    report = await deliver_lead(text)
    if report.ok:
        return 200, report.to_response()
    if report.all_skipped:
        logger.error("No delivery channel is configured; lead was not relayed.")
        return 500, report.to_response()
    return 502, report.to_response()


async def handle_lead_request(
    method: str,
    headers: Optional[Mapping[str, Any]] = None,
    body: Body = None,
    is_base64: bool = False,
    now: Optional[datetime] = None,
) -> HandlerResult:
    """
    Run one webhook call through dispatch, validation, formatting and delivery.

    Returns the HTTP status code and the JSON payload. Every exception is
    turned into a 500 payload here, so callers never see one.
    """
    verb = (method or "").upper()
    if verb == "OPTIONS":
        return 200, {"ok": True}
    if verb == "GET":
        return _healthcheck(now)
    if verb != "POST":
        logger.info("Rejected %s request to the lead endpoint", verb or "<empty>")
        return 405, {"ok": False, "error": "Method not allowed. Use POST."}

    try:
        return await _handle_submission(headers, body, is_base64, now)
    except Exception as exc:
        logger.exception("Unhandled error while processing lead")
        return 500, {"ok": False, "error": "Server error", "details": str(exc)}
