import re
import unicodedata
from typing import Any

CONTROL_CHAR_RE = re.compile(r"[\u0000-\u0008\u000b-\u001f\u007f-\u009f]")
INLINE_WHITESPACE_RE = re.compile(r"\s+")
BLANK_LINES_RE = re.compile(r"\n{3,}")

PLACEHOLDER = "-"


def safe_string(value: Any) -> str:
    """Coerce a loosely typed form value to a trimmed string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(part for part in (safe_string(item) for item in value) if part)
    return str(value).strip()


def normalize_text(value: str) -> str:
    """Normalize whitespace, strip control characters, and unify Unicode."""
    if not value:
        return ""
    text = unicodedata.normalize("NFC", value)
    text = CONTROL_CHAR_RE.sub(" ", text)
    text = INLINE_WHITESPACE_RE.sub(" ", text)
    return text.strip()


def normalize_block(value: str) -> str:
    """Like :func:`normalize_text` but keeps line breaks for free-text fields."""
    if not value:
        return ""
    text = unicodedata.normalize("NFC", value).replace("\r\n", "\n").replace("\r", "\n")
    lines = [normalize_text(CONTROL_CHAR_RE.sub(" ", line)) for line in text.split("\n")]
    return BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


def or_placeholder(value: str) -> str:
    return value if value else PLACEHOLDER
