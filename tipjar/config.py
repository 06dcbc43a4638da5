"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache), single instance per process
    - config_valid() is the one "configuration valid" signal consumed by sessions

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box locally
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tipjar.core.domain_types import (
    DEFAULT_REFRESH_INTERVAL,
    PAYMENT_CONFIRM_DELAY,
    THANK_YOU_DISPLAY_SECONDS,
    VISIT_SETTLE_DELAY,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    environment: str = "development"
    debug: bool = False

    # Payment gateways (only their presence matters to sessions)
    aba_payment_url: str = ""
    acleda_payment_url: str = ""
    acleda_payment_data: str = ""
    acleda_key: str = "khqr"
    recipient_name: str = "Ozo. Designer"

    # Supporter feed
    api_base_url: str = "https://0zodesigner.github.io"
    donations_endpoint: str = "/donate/supporters.json"
    refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL
    http_timeout_seconds: float = 10.0

    # Session clocks
    default_timer: str = "10:53"
    tick_seconds: float = 1.0
    payment_auto_confirm: bool = True
    payment_confirm_delay_seconds: float = PAYMENT_CONFIRM_DELAY
    thank_you_seconds: float = THANK_YOU_DISPLAY_SECONDS
    visit_settle_seconds: float = VISIT_SETTLE_DELAY

    # Abandoned sessions
    session_idle_ttl_seconds: float = 900.0
    session_sweep_interval_seconds: float = 60.0

    # Telegram notification channel
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    telegram_api_url: str = "https://api.telegram.org/bot"

    # API
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:3001"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator(
        "refresh_interval_seconds",
        "tick_seconds",
        "session_idle_ttl_seconds",
        "session_sweep_interval_seconds",
    )
    @classmethod
    def positive_period(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("period must be positive")
        return v

    @property
    def feed_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}{self.donations_endpoint}"

    @property
    def telegram_configured(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)

    def config_problems(self) -> list[str]:
        """Required payment settings that are missing, as readable messages."""
        errors = []
        if not self.aba_payment_url:
            errors.append("ABA payment URL is not configured")
        if not self.acleda_payment_url or not self.acleda_payment_data:
            errors.append("ACLEDA payment configuration is incomplete")
        return errors

    def config_valid(self) -> bool:
        return not self.config_problems()


@lru_cache
def get_settings() -> Settings:
    return Settings()
