import asyncio
import json
from typing import Any, Dict, Optional

from leadrelay.services.handler import JSON_HEADERS, handle_lead_request
from leadrelay.utils.logger import get_logger

logger = get_logger(__name__)


def handler(event: Optional[Dict[str, Any]], context: Any = None) -> Dict[str, Any]:
    """
    Entry point for API-gateway style functions (AWS Lambda, Netlify).

    ``event`` carries ``httpMethod``, ``headers``, ``body`` and
    ``isBase64Encoded``; the return value is the matching proxy response.
    """
    event = event or {}
    method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    status_code, payload = asyncio.run(
        handle_lead_request(
            method,
            headers=event.get("headers") or {},
            body=event.get("body"),
            is_base64=bool(event.get("isBase64Encoded")),
        )
    )
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(payload, ensure_ascii=False),
    }
