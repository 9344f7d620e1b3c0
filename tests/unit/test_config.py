"""
Unit Tests - Configuration
"""
import pytest
from pydantic import ValidationError

from salesdash.config import Settings
from salesdash.config.settings import RedisSettings, StoreSettings


class TestSettings:
    """Tests for settings validation"""

    def test_defaults(self):
        settings = Settings()

        assert settings.decoder.schema_version == "pdf-v1"
        assert settings.decoder.min_tokens == 10
        assert settings.store.report_key == "dashboard_data"
        assert settings.quality.enforce_website_order_balance is False

    def test_store_backend_normalized(self):
        assert StoreSettings(backend="MEMORY").backend == "memory"

    def test_unknown_store_backend(self):
        with pytest.raises(ValidationError):
            StoreSettings(backend="sqlite")

    def test_unknown_environment(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "qa")
        with pytest.raises(ValidationError):
            Settings()

    def test_environment_from_env(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "Production")
        settings = Settings()

        assert settings.app_env == "production"
        assert settings.is_production

    def test_decoder_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("DECODER_SCHEMA_VERSION", "dashboard-v1")
        monkeypatch.setenv("DECODER_BRANCH_NAMES", '["A", "B", "C", "D"]')

        decoder = Settings().decoder

        assert decoder.schema_version == "dashboard-v1"
        assert decoder.branch_names == ["A", "B", "C", "D"]

    def test_redis_url(self):
        assert RedisSettings(host="cache", port=6380, db=2).get_url() == "redis://cache:6380/2"
        assert RedisSettings(password="s3cret").get_url() == "redis://:s3cret@localhost:6379/0"
