import base64
import binascii
import json
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import parse_qsl

from leadrelay.utils.logger import get_logger

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

Body = Union[bytes, str, None]


def get_header(headers: Optional[Mapping[str, Any]], name: str) -> str:
    """Case-insensitive header lookup that tolerates missing header maps."""
    if not headers:
        return ""
    wanted = name.lower()
    for key, value in headers.items():
        if str(key).lower() == wanted:
            return "" if value is None else str(value)
    return ""


def decode_body(body: Body, is_base64: bool = False) -> str:
    if body is None:
        return ""
    if is_base64:
        try:
            raw = base64.b64decode(body, validate=False)
            return raw.decode("utf-8")
        except (binascii.Error, ValueError):
            logger.warning("Discarding request body that is not valid base64/UTF-8.")
            return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def _parse_json(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text or "{}")
    except (ValueError, RecursionError):
        logger.debug("Request body is not valid JSON.")
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def _parse_form(text: str) -> Dict[str, Any]:
    try:
        return dict(parse_qsl(text or "", keep_blank_values=True))
    except ValueError:
        logger.debug("Request body is not valid form data.")
        return {}


def parse_body(body: Body, content_type: Optional[str], is_base64: bool = False) -> Dict[str, Any]:
    """
    Parse a request body into a flat mapping.

    The content type selects JSON or URL-encoded parsing; anything else gets a
    best-effort JSON parse. Malformed input degrades to an empty mapping so the
    caller reports missing fields instead of a parse error.
    """
    text = decode_body(body, is_base64)
    kind = (content_type or "").lower()
    if JSON_CONTENT_TYPE in kind:
        return _parse_json(text)
    if FORM_CONTENT_TYPE in kind:
        return _parse_form(text)
    return _parse_json(text)
