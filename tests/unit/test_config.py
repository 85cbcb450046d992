"""Unit tests for configuration loading."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from billing.config import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        for name in ("DATABASE_URL", "IGV_RATE", "TRANSACTION_MAX_RETRIES", "LOG_LEVEL", "LOG_FILE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.database_url == "sqlite:///./billing.db"
        assert settings.database_echo is False
        assert settings.igv_rate == Decimal("0.18")
        assert settings.transaction_max_retries == 3
        assert settings.log_level == "INFO"
        assert settings.log_file == "logs/server.log"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DATABASE_URL", "postgresql://billing@localhost/billing")
        monkeypatch.setenv("IGV_RATE", "0.10")
        monkeypatch.setenv("TRANSACTION_MAX_RETRIES", "5")

        settings = get_settings()

        assert settings.database_url == "postgresql://billing@localhost/billing"
        assert settings.igv_rate == Decimal("0.10")
        assert settings.transaction_max_retries == 5

    def test_env_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        (tmp_path / ".env").write_text("LOG_LEVEL=DEBUG\nUNRELATED_KEY=ignored\n")

        assert Settings().log_level == "DEBUG"

    def test_negative_igv_rate_rejected(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("IGV_RATE", "-0.18")

        with pytest.raises(ValidationError):
            Settings()

    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            Settings(transaction_max_retries=-1)
