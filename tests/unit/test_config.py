"""
Test engine settings models and loaders.

These tests validate settings files, environment overrides and the fallback
order used by the HTTP service.
"""

import json

import pytest
from pydantic import ValidationError

from cart_promotions.config import (
    EngineSettings,
    get_settings_from_env,
    load_settings,
    load_settings_with_fallback,
)
from cart_promotions.shared.exceptions import ConfigurationError

_ENV_NAMES = (
    "PROMO_CONFIG_FILE",
    "PROMO_CURRENCY_SYMBOL",
    "PROMO_TIP_PREFIX",
    "PROMO_LOG_LEVEL",
    "PROMO_ENFORCE_SCHEDULE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the caller's environment and working directory."""
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestEngineSettings:
    def test_defaults(self):
        settings = EngineSettings()

        assert settings.currency_symbol == "R"
        assert settings.tip_prefix == "💡 "
        assert settings.log_level == "INFO"
        assert settings.enforce_schedule is False

    def test_log_level_is_normalised(self):
        assert EngineSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            EngineSettings(log_level="CHATTY")

    def test_empty_currency_symbol(self):
        with pytest.raises(ValidationError):
            EngineSettings(currency_symbol="")

    def test_unknown_fields_are_rejected(self):
        with pytest.raises(ValidationError):
            EngineSettings(minimum_quantity=3)

    def test_file_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "promotions.json"
        EngineSettings(currency_symbol="$", enforce_schedule=True).to_file(path)

        loaded = EngineSettings.from_file(path)

        assert loaded.currency_symbol == "$"
        assert loaded.enforce_schedule is True

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            EngineSettings.from_file(tmp_path / "missing.json")

    def test_from_invalid_json(self, tmp_path):
        path = tmp_path / "promotions.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            EngineSettings.from_file(path)

    def test_from_invalid_values(self, tmp_path):
        path = tmp_path / "promotions.json"
        path.write_text(json.dumps({"log_level": "LOUD"}))

        with pytest.raises(ConfigurationError) as exc_info:
            EngineSettings.from_file(path)
        assert exc_info.value.file_path == path


class TestLoadSettings:
    def test_explicit_directory(self, tmp_path):
        (tmp_path / "promotions.json").write_text(json.dumps({"currency_symbol": "£"}))
        assert load_settings(tmp_path).currency_symbol == "£"

    def test_searches_config_directory(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "promotions.json").write_text(json.dumps({"tip_prefix": ">> "}))

        assert load_settings().tip_prefix == ">> "

    def test_nothing_found(self):
        with pytest.raises(FileNotFoundError, match="promotions.json"):
            load_settings()


class TestEnvironment:
    def test_no_variables(self):
        assert get_settings_from_env() is None

    def test_individual_variables(self, monkeypatch):
        monkeypatch.setenv("PROMO_CURRENCY_SYMBOL", "$")
        monkeypatch.setenv("PROMO_ENFORCE_SCHEDULE", "yes")

        settings = get_settings_from_env()

        assert settings.currency_symbol == "$"
        assert settings.enforce_schedule is True
        assert settings.tip_prefix == "💡 "

    def test_invalid_flag(self, monkeypatch):
        monkeypatch.setenv("PROMO_ENFORCE_SCHEDULE", "sometimes")

        with pytest.raises(ConfigurationError):
            get_settings_from_env()

    def test_invalid_level(self, monkeypatch):
        monkeypatch.setenv("PROMO_LOG_LEVEL", "SHOUTY")

        with pytest.raises(ConfigurationError):
            get_settings_from_env()

    def test_config_file_variable(self, monkeypatch, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"currency_symbol": "¥"}))
        monkeypatch.setenv("PROMO_CONFIG_FILE", str(path))
        monkeypatch.setenv("PROMO_CURRENCY_SYMBOL", "$")

        assert get_settings_from_env().currency_symbol == "¥"


class TestFallback:
    def test_explicit_path_first(self, tmp_path, monkeypatch):
        path = tmp_path / "explicit.json"
        path.write_text(json.dumps({"currency_symbol": "$"}))
        monkeypatch.setenv("PROMO_CURRENCY_SYMBOL", "€")

        assert load_settings_with_fallback(path).currency_symbol == "$"

    def test_environment_before_default_locations(self, tmp_path, monkeypatch):
        (tmp_path / "promotions.json").write_text(json.dumps({"currency_symbol": "£"}))
        monkeypatch.setenv("PROMO_CURRENCY_SYMBOL", "€")

        assert load_settings_with_fallback().currency_symbol == "€"

    def test_invalid_environment_is_skipped(self, tmp_path, monkeypatch):
        (tmp_path / "promotions.json").write_text(json.dumps({"currency_symbol": "£"}))
        monkeypatch.setenv("PROMO_LOG_LEVEL", "SHOUTY")

        assert load_settings_with_fallback().currency_symbol == "£"

    def test_missing_explicit_path_falls_through(self, tmp_path):
        assert load_settings_with_fallback(tmp_path / "gone.json") == EngineSettings()

    def test_built_in_defaults(self):
        assert load_settings_with_fallback() == EngineSettings()
