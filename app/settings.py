from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    # Email provider
    sendgrid_api_key: Optional[str] = None
    sendgrid_base_url: str = "https://api.sendgrid.com"
    from_email: str = "no-reply@yourdomain.com"
    contact_receiver: str = Field(
        default="you@example.com",
        validation_alias=AliasChoices("contact_receiver", "to_email"),
    )

    # Policies
    frontend_origin: str = "*"
    dispatch_policy: Literal["fail_open", "fail_closed"] = "fail_closed"
    require_email_provider: bool = False
    trust_proxy: bool = False

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_max: int = 6
    rate_limit_window_seconds: int = 900
    rate_limit_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"

    # Validation
    max_name_length: int = 100
    max_message_length: int = 5000
    strict_email: bool = True
    max_body_bytes: int = 10 * 1024

    # Fallback persistence
    submission_log_path: str = "data/submissions.jsonl"
    audit_log_path: str = "contact_logs.txt"
    submission_source: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def email_enabled(self) -> bool:
        return bool(self.sendgrid_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
