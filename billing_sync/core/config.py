from functools import lru_cache
import logging
import os

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from billing_sync.core.logger import setup_logger, init_sentry

PLACEHOLDER_STRIPE_API_KEY = "your_stripe_api_key"


class Settings(BaseSettings):
    # Application settings
    ENVIRONMENT: str = "development"  # Options: development, production, test
    APP_NAME: str = "billing-sync"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_DIR: str = "logs"

    # Database settings
    DATABASE_URL: str
    TEST_DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"

    # Sentry settings
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "development"
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    # Stripe settings
    STRIPE_API_KEY: str = PLACEHOLDER_STRIPE_API_KEY
    STRIPE_API_BASE_URL: str = "https://api.stripe.com"
    STRIPE_API_VERSION: str | None = None
    STRIPE_TIMEOUT_SECONDS: float = 80.0

    model_config: SettingsConfigDict = SettingsConfigDict(  # type: ignore
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _validate_production_secrets(self) -> "Settings":
        """Ensure the placeholder Stripe key is overridden in production."""
        if self.ENVIRONMENT != "production":
            return self

        if self.STRIPE_API_KEY == PLACEHOLDER_STRIPE_API_KEY:
            raise ValueError(
                "ENVIRONMENT is 'production' but STRIPE_API_KEY still has its "
                "placeholder value. Set it via environment variables or .env file."
            )

        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()  # type: ignore


settings = get_settings()

if not settings.DEBUG:
    init_sentry(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
    )


def _component_logger(component: str, log_name: str) -> logging.Logger:
    return setup_logger(
        name=f"{component}_logger",
        log_file=os.path.join(settings.LOG_DIR, f"{log_name}.log"),
        level=logging.INFO,
        sentry_tag=log_name,
    )


app_logger = _component_logger("app", "app")
database_logger = _component_logger("database", "database")
stripe_logger = _component_logger("stripe", "stripe")
job_logger = _component_logger("job", "jobs")
sync_logger = _component_logger("sync", "sync")

__all__ = [
    "settings",
    "get_settings",
    "app_logger",
    "database_logger",
    "stripe_logger",
    "job_logger",
    "sync_logger",
]
