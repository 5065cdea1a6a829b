"""Tests for configuration and structured logging."""

import logging

import pytest
from pydantic import ValidationError

from wealthway.activity import ActivityLogger, configure_logging
from wealthway.config import (
    AppSettings,
    GeminiSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from wealthway.models.activity import ActivityEventBuilder


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """No .env file and no inherited GEMINI_ variables."""
    monkeypatch.chdir(tmp_path)
    for name in ("GEMINI_API_KEY", "GEMINI_MODEL_NAME", "WEALTHWAY_STORAGE_DATA_PATH",
                 "LOG_LEVEL", "CURRENCY_CODE", "DEFAULT_CYCLE_START_DAY"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for environment-driven settings."""

    def test_app_defaults(self):
        app = AppSettings()
        assert app.currency_symbol == "¥"
        assert app.currency_code == "JPY"
        assert app.default_cycle_start_day == 1
        assert app.log_level == "INFO"

    def test_app_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", " debug ")
        monkeypatch.setenv("CURRENCY_CODE", "USD")
        app = AppSettings()
        assert app.log_level == "DEBUG"
        assert app.currency_code == "USD"

    def test_default_cycle_day_is_bounded(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_CYCLE_START_DAY", "29")
        with pytest.raises(ValidationError):
            AppSettings()

    def test_gemini_requires_key(self):
        with pytest.raises(ValidationError):
            GeminiSettings()

    def test_gemini_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        gemini = GeminiSettings()
        assert gemini.api_key == "test-key"
        assert gemini.model_name == "gemini-1.5-flash"

    def test_empty_storage_path_means_memory(self, monkeypatch):
        monkeypatch.setenv("WEALTHWAY_STORAGE_DATA_PATH", "")
        assert StorageSettings().data_path is None

    def test_storage_default_path(self):
        assert StorageSettings().data_path == ".wealthway/state.json"

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_validate_all_settings_reports_missing_key(self):
        results = validate_all_settings()
        assert results["gemini"] is False
        assert "gemini_error" in results
        assert results["storage"] is True
        assert results["app"] is True


class BrokenLogger:
    def info(self, *args, **kwargs):
        raise RuntimeError("handler closed")


class TestActivityLogger:
    """Tests for the activity logger."""

    def test_severity_selects_level(self, activity_logger, recording_logger):
        activity_logger.log_storage_error("save_transactions", "disk full")
        activity_logger.log_external_service_error("gemini", "timeout")
        activity_logger.log_transaction_rejected("missing amount")
        activity_logger.log_transaction_deleted("tx1")
        assert [level for level, _, _ in recording_logger.records] == ["error", "warning", "debug", "info"]

    def test_event_fields_are_passed_through(self, activity_logger, recording_logger):
        activity_logger.log_cycle_start_day_changed(1, 16)
        _, event, kwargs = recording_logger.records[0]
        assert event == "activity_event"
        assert kwargs["event_type"] == "cycle_start_day_changed"
        assert kwargs["details"] == {"old": 1, "new": 16}

    def test_logging_failure_does_not_raise(self, capsys):
        ActivityLogger(logger=BrokenLogger()).log(ActivityEventBuilder.transaction_deleted("tx1"))
        assert "Failed to write activity event" in capsys.readouterr().err

    def test_configure_logging_is_repeatable(self):
        """Later calls only change the level."""
        configure_logging("DEBUG")
        configure_logging("WARNING")
        assert logging.getLogger().level == logging.WARNING
        configure_logging("INFO")
