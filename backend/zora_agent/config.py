"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded for production)
    - get_settings() is cached (lru_cache) — single instance per process
    - Production refuses to start with the development session secret or with
      any MOCK_* flag enabled

Design Decisions:
    - Defaults provided for all non-secret settings and every provider mocked by
      default: `uvicorn zora_agent.main:app` works out-of-the-box
      in development; production must set MOCK_TWITTER=0, MOCK_STRIPE=0 and
      MOCK_MARKET_DATA=0 explicitly
    - MOCK_* flags decide, once at startup, which provider implementation is built
"""

from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SESSION_SECRET = "dev-session-secret-change-me"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    environment: str = "development"
    port: int = 3000
    base_url: str = "http://localhost:3000"

    # Sessions
    session_secret: str = DEV_SESSION_SECRET
    session_max_age_seconds: int = 24 * 60 * 60

    # Provider mocks
    mock_twitter: bool = True
    mock_stripe: bool = True
    mock_market_data: bool = True

    # Twitter OAuth 2.0
    twitter_client_id: str = ""
    twitter_client_secret: str = ""
    twitter_callback_url: str = "http://localhost:3000/auth/twitter/callback"

    # Stripe
    stripe_secret_key: str = ""
    stripe_publishable_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_price_id: str = ""
    mock_payment_secret: str = "mockpay-secret"

    # Market data
    zora_api_url: str = "https://api.zora.co/v1"
    http_timeout_seconds: float = 10.0

    # Storage
    data_dir: Path = Path("data")
    analytics_history_points: int = 48

    # Refresh job
    analytics_job_enabled: bool = True
    analytics_refresh_minutes: float = 30
    analytics_refresh_batch: int = 20

    # Rate limiting (analytics endpoints)
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max_requests: int = 100

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @model_validator(mode="after")
    def require_production_secrets(self):
        if not self.is_production:
            return self
        if self.session_secret == DEV_SESSION_SECRET:
            raise ValueError("SESSION_SECRET must be set in production")
        enabled_mocks = [
            name for name in ("mock_twitter", "mock_stripe", "mock_market_data")
            if getattr(self, name)
        ]
        if enabled_mocks:
            raise ValueError(
                f"Provider mocks must be disabled in production: "
                f"{', '.join(m.upper() for m in enabled_mocks)}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
