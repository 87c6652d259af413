"""Tests for config loading, validation and dotted-key access."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from skyvoice.config.credentials import MissingSecretError, llm_api_key, require_secret
from skyvoice.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from skyvoice.config.schema import AppConfig
from skyvoice.models.common import Timeframe


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.llm.max_tokens == 80
        assert config.timing.search_debounce_ms == 300
        assert config.device.latitude == 42.36
        # Untouched sections keep their defaults.
        assert config.forecast.exclude == "hrrr"

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "nope.yaml")
        assert config == AppConfig()

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).timing.summary_debounce_ms == 50

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"forecast": {"api_key": "secret"}}))
        with pytest.raises(ValidationError):
            load_config(path)

    def test_save_round_trip(self, tmp_path: Path, default_config: AppConfig):
        path = tmp_path / "out" / "config.yaml"
        save_config(default_config, path)
        assert load_config(path) == default_config


class TestDefaults:
    def test_timing(self, default_config: AppConfig):
        assert default_config.timing.search_debounce_ms == 500
        assert default_config.timing.summary_debounce_ms == 50
        assert default_config.timing.personality_transition_ms == 2000
        assert default_config.timing.location_timeout_seconds == 20

    def test_search_and_llm(self, default_config: AppConfig):
        assert default_config.search.min_query_length == 3
        assert default_config.search.max_candidates == 5
        assert default_config.llm.max_tokens == 100
        assert default_config.llm.temperature == 0.7

    def test_latitude_bounds(self):
        with pytest.raises(ValidationError):
            AppConfig(device={"latitude": 123.0})


class TestDottedKeys:
    def test_get(self, default_config: AppConfig):
        assert get_config_value(default_config, "llm.model") == "gpt-4o-mini"

    def test_get_unknown(self, default_config: AppConfig):
        with pytest.raises(KeyError):
            get_config_value(default_config, "llm.nope")

    def test_set_coerces_types(self, default_config: AppConfig):
        config = set_config_value(default_config, "timing.search_debounce_ms", "250")
        config = set_config_value(config, "llm.temperature", "0.2")
        config = set_config_value(config, "device.services_enabled", "false")
        assert config.timing.search_debounce_ms == 250
        assert config.llm.temperature == 0.2
        assert config.device.services_enabled is False
        # Input config is untouched.
        assert default_config.timing.search_debounce_ms == 500

    def test_set_enum(self, default_config: AppConfig):
        config = set_config_value(default_config, "display.default_timeframe", "week")
        assert config.display.default_timeframe == Timeframe.WEEK

    def test_set_unknown(self, default_config: AppConfig):
        with pytest.raises(KeyError):
            set_config_value(default_config, "timing.nope", "1")

    def test_set_invalid_value(self, default_config: AppConfig):
        with pytest.raises(ValidationError):
            set_config_value(default_config, "search.max_candidates", "0")


class TestCredentials:
    def test_first_present_wins(self, monkeypatch):
        monkeypatch.setenv("LLM_API_KEY", "primary")
        monkeypatch.setenv("OPENAI_API_KEY", "fallback")
        assert llm_api_key() == "primary"

    def test_blank_is_missing(self, monkeypatch):
        monkeypatch.setenv("SKYVOICE_TEST_SECRET", "   ")
        with pytest.raises(MissingSecretError) as exc:
            require_secret("SKYVOICE_TEST_SECRET")
        assert exc.value.env_var == "SKYVOICE_TEST_SECRET"
        assert str(exc.value) == "SKYVOICE_TEST_SECRET not set"
