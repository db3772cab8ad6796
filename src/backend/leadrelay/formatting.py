from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlsplit
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat

from leadrelay.config import settings
from leadrelay.models.lead import LeadSubmission
from leadrelay.utils.logger import get_logger
from leadrelay.utils.text import PLACEHOLDER, normalize_block, normalize_text, or_placeholder

logger = get_logger(__name__)

HEADER = "🔥 NEW LEAD"
ASAP_MARKERS = {
    "asap",
    "now",
    "immediately",
    "urgent",
    "emergency",
    "today",
    "same day",
    "same-day",
}
TRUTHY_FLAGS = {"true", "1", "yes", "y", "on", "checked"}
FALSY_FLAGS = {"false", "0", "no", "n", "off"}


def lead_priority(preferred_time: str) -> str:
    marker = normalize_text(preferred_time).lower()
    if marker in ASAP_MARKERS or marker.startswith("asap"):
        return "High"
    return "Normal"


def page_domain(page_url: str) -> str:
    url = (page_url or "").strip()
    if not url:
        return PLACEHOLDER
    if "://" not in url:
        url = f"//{url}"
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return PLACEHOLDER
    if not host or any(ch.isspace() for ch in host):
        return PLACEHOLDER
    return host[4:] if host.startswith("www.") else host


def format_flag(value: str) -> str:
    lowered = (value or "").strip().lower()
    if not lowered:
        return PLACEHOLDER
    if lowered in TRUTHY_FLAGS:
        return "Yes"
    if lowered in FALSY_FLAGS:
        return "No"
    return normalize_text(value)


def format_phone(raw: str, region: Optional[str] = None) -> str:
    phone = normalize_text(raw)
    if not phone:
        return PLACEHOLDER
    try:
        number = phonenumbers.parse(phone, region or settings.phone_default_region)
    except NumberParseException:
        return phone
    if not phonenumbers.is_valid_number(number):
        return phone
    e164 = phonenumbers.format_number(number, PhoneNumberFormat.E164)
    if e164 == phone:
        return phone
    return f"{phone} ({e164})"


def _reference_zone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.lead_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown LEAD_TIMEZONE %r; using UTC.", settings.lead_timezone)
        return ZoneInfo("UTC")


def format_timestamps(now: Optional[datetime] = None) -> List[str]:
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(_reference_zone())
    utc = moment.astimezone(timezone.utc)
    return [
        f"Time: {local.strftime('%Y-%m-%d %H:%M')} {local.tzname()}",
        f"UTC: {utc.strftime('%Y-%m-%d %H:%M:%S')}",
    ]


def build_lead_message(lead: LeadSubmission, now: Optional[datetime] = None) -> str:
    """Render a lead as the plain-text report sent to every channel."""
    lines = [HEADER, f"Priority: {lead_priority(lead.preferred_time)}", ""]

    for label, value in [
        ("Name", normalize_text(lead.name)),
        ("Phone", format_phone(lead.phone)),
        ("Email", normalize_text(lead.email)),
        ("Address", normalize_text(lead.address)),
        ("ZIP", normalize_text(lead.zip)),
    ]:
        lines.append(f"{label}: {or_placeholder(value)}")
    lines.append("")

    lines.append(f"Appliance: {or_placeholder(normalize_text(lead.appliance))}")
    lines.append(f"Preferred time: {or_placeholder(normalize_text(lead.preferred_time))}")
    lines.append("Issue:")
    lines.append(or_placeholder(normalize_block(lead.issue)))
    lines.append("")

    lines.append(f"Diagnostic fee acknowledged: {format_flag(lead.fee_ack)}")
    lines.append(f"Consent: {format_flag(lead.consent)}")
    lines.append("")

    source = or_placeholder(normalize_text(lead.utm_source))
    medium = or_placeholder(normalize_text(lead.utm_medium))
    campaign = or_placeholder(normalize_text(lead.utm_campaign))
    lines.append(f"Page: {or_placeholder(normalize_text(lead.page_url))}")
    lines.append(f"Domain: {page_domain(lead.page_url)}")
    lines.append("UTM:")
    lines.append(f"{source} / {medium} / {campaign}")
    for label, value in [
        ("content", lead.utm_content),
        ("term", lead.utm_term),
        ("gclid", lead.gclid),
        ("fbclid", lead.fbclid),
    ]:
        lines.append(f"{label}: {or_placeholder(normalize_text(value))}")
    lines.append("")

    lines.extend(format_timestamps(now))
    return "\n".join(lines)

