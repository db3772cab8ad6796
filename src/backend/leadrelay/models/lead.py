from typing import Any, Dict, Mapping, Tuple

from pydantic import BaseModel

from leadrelay.utils.text import safe_string

# Accepted request keys per logical field, highest priority first.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("name", "full_name", "customer_name", "fullName"),
    "phone": ("phone", "phone_number", "phoneNumber", "tel", "telephone"),
    "email": ("email", "email_address", "emailAddress"),
    "address": ("address", "street_address", "street", "address1"),
    "zip": ("zip", "zip_code", "zipcode", "postal_code", "postalCode"),
    "appliance": ("appliance", "appliance_type", "applianceType", "device"),
    "issue": ("issue", "problem", "message", "description", "details"),
    "preferred_time": ("preferred_time", "preferredTime", "time_window", "best_time"),
    "fee_ack": (
        "fee_ack",
        "fee_acknowledged",
        "feeAck",
        "service_fee_ack",
        "diagnostic_fee_ack",
    ),
    "consent": ("consent", "sms_consent", "smsConsent", "agree", "terms"),
    "page_url": ("page_url", "pageUrl", "url", "page"),
    "utm_source": ("utm_source", "utmSource"),
    "utm_medium": ("utm_medium", "utmMedium"),
    "utm_campaign": ("utm_campaign", "utmCampaign"),
    "utm_content": ("utm_content", "utmContent"),
    "utm_term": ("utm_term", "utmTerm"),
    "gclid": ("gclid",),
    "fbclid": ("fbclid",),
}


def resolve_field(payload: Mapping[str, Any], aliases: Tuple[str, ...]) -> str:
    for key in aliases:
        value = safe_string(payload.get(key))
        if value:
            return value
    return ""


class LeadSubmission(BaseModel):
    name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    zip: str = ""
    appliance: str = ""
    issue: str = ""
    preferred_time: str = ""
    fee_ack: str = ""
    consent: str = ""
    page_url: str = ""
    utm_source: str = ""
    utm_medium: str = ""
    utm_campaign: str = ""
    utm_content: str = ""
    utm_term: str = ""
    gclid: str = ""
    fbclid: str = ""

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "LeadSubmission":
        """Resolve every logical field from its aliases; unknown keys are dropped."""
        if not isinstance(payload, Mapping):
            payload = {}
        return cls(
            **{field: resolve_field(payload, aliases) for field, aliases in FIELD_ALIASES.items()}
        )
