from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Telegram bot delivery
    telegram_bot_token: Optional[str] = Field(
        None, validation_alias=AliasChoices("TELEGRAM_BOT_TOKEN", "telegram_bot_token")
    )
    telegram_chat_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("TELEGRAM_CHAT_ID", "telegram_chat_id")
    )
    telegram_api_base: str = "https://api.telegram.org"
    telegram_timeout: float = 8.0
    telegram_retry_delay: float = 0.7
    telegram_attempts: int = 2

    # Email delivery
    smtp_host: Optional[str] = None
    smtp_port: int = 465
    smtp_username: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("SMTP_USER", "SMTP_USERNAME", "smtp_username"),
    )
    smtp_password: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("SMTP_PASS", "SMTP_PASSWORD", "smtp_password"),
    )
    smtp_timeout: float = 10.0
    lead_to_email: Optional[str] = Field(
        None, validation_alias=AliasChoices("LEAD_TO_EMAIL", "TO_EMAIL", "lead_to_email")
    )
    lead_from_name: str = "Website Leads"
    lead_notification_subject: str = Field(
        "New website lead",
        validation_alias=AliasChoices("LEAD_SUBJECT", "lead_notification_subject"),
    )

    # Message formatting
    lead_timezone: str = "America/New_York"
    phone_default_region: str = "US"

    # "all" requires every channel to deliver; "any" is the older, looser rule.
    success_policy: Literal["all", "any"] = Field(
        "all", validation_alias=AliasChoices("LEAD_SUCCESS_POLICY", "success_policy")
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
