"""
Test suite for application settings and component loggers.

Run tests:
    pytest tests/core/test_config.py -v
"""

import logging

import pytest
from pydantic import ValidationError

from billing_sync.core.config import Settings, get_settings


def _settings(**overrides) -> Settings:
    values = {"DATABASE_URL": "sqlite+aiosqlite:///:memory:"}
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


class TestSettings:

    def test_defaults(self):
        settings = _settings()

        assert settings.APP_NAME == "billing-sync"
        assert settings.STRIPE_API_BASE_URL == "https://api.stripe.com"
        assert settings.STRIPE_API_VERSION is None
        assert settings.STRIPE_TIMEOUT_SECONDS == 80.0
        assert settings.LOG_DIR == "logs"

    def test_production_rejects_placeholder_stripe_key(self):
        with pytest.raises(ValidationError, match="STRIPE_API_KEY"):
            _settings(ENVIRONMENT="production", STRIPE_API_KEY="your_stripe_api_key")

    def test_production_accepts_real_stripe_key(self):
        settings = _settings(ENVIRONMENT="production", STRIPE_API_KEY="sk_live_123")

        assert settings.STRIPE_API_KEY == "sk_live_123"

    def test_placeholder_allowed_outside_production(self):
        settings = _settings(ENVIRONMENT="development", STRIPE_API_KEY="your_stripe_api_key")

        assert settings.ENVIRONMENT == "development"

    def test_database_url_is_required(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestComponentLoggers:

    @pytest.mark.parametrize(
        "attr, name",
        [
            ("app_logger", "app_logger"),
            ("database_logger", "database_logger"),
            ("stripe_logger", "stripe_logger"),
            ("job_logger", "job_logger"),
            ("sync_logger", "sync_logger"),
        ],
    )
    def test_logger_is_configured(self, attr, name):
        import billing_sync.core.config as config_module

        logger = getattr(config_module, attr)

        assert isinstance(logger, logging.Logger)
        assert logger.name == name
        assert logger.level == logging.INFO
