import smtplib
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid
from typing import List, Optional

from leadrelay.config import Settings, settings
from leadrelay.models.delivery import ChannelResult
from leadrelay.utils.logger import get_logger

logger = get_logger(__name__)

NAME = "email"
IMPLICIT_TLS_PORT = 465


def _recipients(cfg: Settings) -> List[str]:
    return [
        recipient.strip()
        for recipient in (cfg.lead_to_email or "").split(",")
        if recipient.strip()
    ]


def is_configured(config: Optional[Settings] = None) -> bool:
    cfg = config or settings
    return bool(cfg.smtp_host and cfg.smtp_username and cfg.smtp_password and _recipients(cfg))


def build_message(text: str, cfg: Settings) -> EmailMessage:
    domain = cfg.smtp_username.split("@")[-1] if "@" in cfg.smtp_username else None
    message = EmailMessage()
    message["Subject"] = cfg.lead_notification_subject
    message["From"] = formataddr((cfg.lead_from_name, cfg.smtp_username))
    message["To"] = ", ".join(_recipients(cfg))
    message["Date"] = formatdate(localtime=False)
    message["Message-ID"] = make_msgid(domain=domain)
    message.set_content(text)
    return message


def _transmit(message: EmailMessage, cfg: Settings) -> None:
    use_ssl = cfg.smtp_port == IMPLICIT_TLS_PORT
    server_cls = smtplib.SMTP_SSL if use_ssl else smtplib.SMTP
    with server_cls(cfg.smtp_host, cfg.smtp_port, timeout=cfg.smtp_timeout) as smtp:
        if not use_ssl:
            # Raises SMTPNotSupportedError rather than logging in over plaintext.
            smtp.starttls()
        smtp.login(cfg.smtp_username, cfg.smtp_password)
        smtp.send_message(message)


def send(text: str, config: Optional[Settings] = None) -> ChannelResult:
    """Email the lead message through the configured SMTP relay."""
    cfg = config or settings
    if not is_configured(cfg):
        logger.warning(
            "SMTP is not configured (SMTP_HOST/SMTP_USER/SMTP_PASS/LEAD_TO_EMAIL); skipping email."
        )
        return ChannelResult.skipped("Missing SMTP_HOST, SMTP_USER, SMTP_PASS or LEAD_TO_EMAIL")

    message = build_message(text, cfg)
    try:
        _transmit(message, cfg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception("Failed to send lead notification email: %s", exc)
        return ChannelResult.failed(f"Email send failed: {exc}")

    logger.info("Lead notification email sent to %s", message["To"])
    return ChannelResult.delivered(message_id=message["Message-ID"])
