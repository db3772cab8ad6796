import time
from typing import Any, Optional

import requests
from requests import RequestException

from leadrelay.config import Settings, settings
from leadrelay.models.delivery import ChannelResult
from leadrelay.utils.logger import get_logger

logger = get_logger(__name__)

NAME = "telegram"
MAX_MESSAGE_LENGTH = 4096


class TelegramDeliveryError(RuntimeError):
    """Represents one failed sendMessage attempt."""

    def __init__(self, detail: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.response = response


def is_configured(config: Optional[Settings] = None) -> bool:
    cfg = config or settings
    return bool(cfg.telegram_bot_token and cfg.telegram_chat_id)


def _send_message_url(cfg: Settings) -> str:
    base = cfg.telegram_api_base.rstrip("/")
    return f"{base}/bot{cfg.telegram_bot_token}/sendMessage"


def _truncate(text: str) -> str:
    if len(text) <= MAX_MESSAGE_LENGTH:
        return text
    return text[: MAX_MESSAGE_LENGTH - 1] + "…"


def _response_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _attempt(cfg: Settings, text: str) -> None:
    try:
        response = requests.post(
            _send_message_url(cfg),
            json={
                "chat_id": cfg.telegram_chat_id,
                "text": text,
                "disable_web_page_preview": True,
            },
            timeout=cfg.telegram_timeout,
        )
    except RequestException as exc:
        # requests puts the URL, and so the bot token, into its messages.
        detail = str(exc).replace(cfg.telegram_bot_token, "<token>")
        raise TelegramDeliveryError(f"Telegram request failed: {detail}") from exc

    body = _response_body(response)
    if not response.ok or not (isinstance(body, dict) and body.get("ok") is True):
        detail = "Telegram send failed"
        if isinstance(body, dict) and body.get("description"):
            detail = f"{detail}: {body['description']}"
        raise TelegramDeliveryError(detail, response.status_code, body)


def send(text: str, config: Optional[Settings] = None) -> ChannelResult:
    """Post the lead message to the configured chat, retrying once on failure."""
    cfg = config or settings
    if not is_configured(cfg):
        logger.warning("Telegram is not configured (TELEGRAM_BOT_TOKEN/TELEGRAM_CHAT_ID); skipping.")
        return ChannelResult.skipped("Missing TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID")

    message = _truncate(text)
    attempts = max(1, cfg.telegram_attempts)
    last_error: Optional[TelegramDeliveryError] = None
    for attempt in range(attempts):
        try:
            _attempt(cfg, message)
            logger.info("Lead delivered to Telegram chat %s", cfg.telegram_chat_id)
            return ChannelResult.delivered()
        except TelegramDeliveryError as exc:
            last_error = exc
            logger.warning(
                "Telegram attempt %d/%d failed (status=%s): %s",
                attempt + 1,
                attempts,
                exc.status_code,
                exc.detail,
            )
        if attempt < attempts - 1:
            time.sleep(cfg.telegram_retry_delay)

    logger.error("Telegram delivery failed after %d attempts: %s", attempts, last_error.detail)
    return ChannelResult.failed(
        last_error.detail,
        status_code=last_error.status_code,
        response=last_error.response,
    )
