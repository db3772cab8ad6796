import pytest

from leadrelay.config import Settings, settings

CHANNEL_DEFAULTS = {
    "telegram_bot_token": None,
    "telegram_chat_id": None,
    "telegram_retry_delay": 0.0,
    "telegram_attempts": 2,
    "smtp_host": None,
    "smtp_port": 465,
    "smtp_username": None,
    "smtp_password": None,
    "lead_to_email": None,
    "lead_timezone": "America/New_York",
    "phone_default_region": "US",
    "success_policy": "all",
}

CONFIGURED = {
    "telegram_bot_token": "123456:TEST-TOKEN",
    "telegram_chat_id": "-1001234",
    "smtp_host": "smtp.example.com",
    "smtp_username": "leads@example.com",
    "smtp_password": "secret",
    "lead_to_email": "owner@example.com",
}


def make_settings(**overrides) -> Settings:
    values = {**CHANNEL_DEFAULTS, **overrides}
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep the process-wide settings independent of the developer's environment."""
    for name, value in CHANNEL_DEFAULTS.items():
        monkeypatch.setattr(settings, name, value)
    return settings


@pytest.fixture
def configured_settings(monkeypatch, isolated_settings):
    for name, value in CONFIGURED.items():
        monkeypatch.setattr(settings, name, value)
    return settings


@pytest.fixture
def make_config():
    return make_settings
