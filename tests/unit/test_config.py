"""Tests for stock_signals.core.config."""

import os

import pytest
from pydantic import ValidationError

from stock_signals.core.config import (
    DEFAULT_SYMBOLS,
    PipelineConfig,
    ProviderConfig,
    StockSignalsConfig,
    _merge_env_vars,
    load_config,
)
from stock_signals.core.exceptions import ConfigError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No STOCK_SIGNALS_* variables and no stock-signals.yml in cwd."""
    for key in list(os.environ):
        if key.startswith("STOCK_SIGNALS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


class TestPipelineConfig:
    def test_defaults(self):
        c = PipelineConfig()
        assert c.symbols == DEFAULT_SYMBOLS
        assert c.window_size == 3
        assert c.lookback_weeks == 2
        assert c.output_path == "data.csv"

    def test_symbol_string_is_split(self):
        c = PipelineConfig(symbols="aapl, msft ,,goog")
        assert c.symbols == ["AAPL", "MSFT", "GOOG"]

    def test_empty_symbols_rejected(self):
        with pytest.raises(ValidationError, match="symbols must not be empty"):
            PipelineConfig(symbols=[])

    def test_window_must_be_positive(self):
        with pytest.raises(ValidationError, match="window_size must be >= 1"):
            PipelineConfig(window_size=0)

    def test_lookback_must_be_positive(self):
        with pytest.raises(ValidationError, match="lookback_weeks must be >= 1"):
            PipelineConfig(lookback_weeks=0)


class TestProviderConfig:
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError, match="timeout must be > 0"):
            ProviderConfig(timeout=0)

    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError, match="request_delay must be >= 0"):
            ProviderConfig(request_delay=-1)


class TestLoadConfig:
    def test_defaults(self, clean_env):
        config = load_config()
        assert isinstance(config, StockSignalsConfig)
        assert config.pipeline.window_size == 3
        assert config.provider.base_url == "https://query2.finance.yahoo.com"

    def test_yaml_loading(self, clean_env, tmp_path):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text(
            "pipeline:\n  symbols: [TSLA, NVDA]\n  window_size: 5\n"
            "provider:\n  timeout: 3\n"
        )
        config = load_config(config_path=str(yaml_file))
        assert config.pipeline.symbols == ["TSLA", "NVDA"]
        assert config.pipeline.window_size == 5
        assert config.provider.timeout == 3.0

    def test_default_file_in_cwd(self, clean_env, tmp_path):
        (tmp_path / "stock-signals.yml").write_text("pipeline:\n  output_path: out.csv\n")
        assert load_config().pipeline.output_path == "out.csv"

    def test_env_overrides_yaml(self, clean_env, tmp_path, monkeypatch):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("pipeline:\n  window_size: 5\n")
        monkeypatch.setenv("STOCK_SIGNALS_PIPELINE__WINDOW_SIZE", "7")
        monkeypatch.setenv("STOCK_SIGNALS_PIPELINE__SYMBOLS", "IBM,ORCL")
        config = load_config(config_path=str(yaml_file))
        assert config.pipeline.window_size == 7
        assert config.pipeline.symbols == ["IBM", "ORCL"]

    def test_config_env_var_points_to_file(self, clean_env, tmp_path, monkeypatch):
        yaml_file = tmp_path / "custom.yml"
        yaml_file.write_text("pipeline:\n  lookback_weeks: 4\n")
        monkeypatch.setenv("STOCK_SIGNALS_CONFIG", str(yaml_file))
        assert load_config().pipeline.lookback_weeks == 4

    def test_missing_file_raises(self, clean_env):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(config_path="/nonexistent/config.yml")

    def test_missing_env_file_raises(self, clean_env, monkeypatch):
        monkeypatch.setenv("STOCK_SIGNALS_CONFIG", "/nonexistent/env.yml")
        with pytest.raises(ConfigError, match="STOCK_SIGNALS_CONFIG not found"):
            load_config()

    def test_non_mapping_yaml_raises(self, clean_env, tmp_path):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(config_path=str(yaml_file))

    def test_invalid_yaml_raises(self, clean_env, tmp_path):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("pipeline: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to parse YAML"):
            load_config(config_path=str(yaml_file))

    def test_validation_error_names_field(self, clean_env, monkeypatch):
        monkeypatch.setenv("STOCK_SIGNALS_PIPELINE__WINDOW_SIZE", "0")
        with pytest.raises(ConfigError, match="pipeline.window_size") as exc_info:
            load_config()
        assert exc_info.value.context == {
            "source": "defaults",
            "field": "pipeline.window_size",
            "value": "0",
        }

    def test_validation_error_names_yaml_source(self, clean_env, tmp_path):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("provider:\n  timeout: -1\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path=str(yaml_file))
        assert exc_info.value.context["source"] == str(yaml_file)
        assert exc_info.value.context["field"] == "provider.timeout"

    def test_numeric_output_path_from_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("STOCK_SIGNALS_PIPELINE__OUTPUT_PATH", "2024")
        assert load_config().pipeline.output_path == "2024"

    def test_numeric_output_path_from_yaml(self, clean_env, tmp_path):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("pipeline:\n  output_path: 2024\n")
        assert load_config(config_path=str(yaml_file)).pipeline.output_path == "2024"

    def test_env_numbers_coerced_by_field_type(self, clean_env, monkeypatch):
        monkeypatch.setenv("STOCK_SIGNALS_PROVIDER__TIMEOUT", "2.5")
        monkeypatch.setenv("STOCK_SIGNALS_PIPELINE__LOOKBACK_WEEKS", "6")
        config = load_config()
        assert config.provider.timeout == 2.5
        assert config.pipeline.lookback_weeks == 6


class TestEnvHelpers:
    def test_merge_does_not_mutate_base(self, monkeypatch):
        monkeypatch.setenv("TEST_PREFIX_PIPELINE__WINDOW_SIZE", "9")
        base = {"pipeline": {"window_size": 3}}
        merged = _merge_env_vars(base, "TEST_PREFIX_")
        assert merged["pipeline"]["window_size"] == "9"
        assert base["pipeline"]["window_size"] == 3

    def test_merge_replaces_non_mapping_section(self, monkeypatch):
        monkeypatch.setenv("TEST_PREFIX_PIPELINE__WINDOW_SIZE", "4")
        merged = _merge_env_vars({"pipeline": "oops"}, "TEST_PREFIX_")
        assert merged == {"pipeline": {"window_size": "4"}}

    def test_merge_skips_config_selector(self, monkeypatch):
        monkeypatch.setenv("TEST_PREFIX_CONFIG", "/some/file.yml")
        assert _merge_env_vars({}, "TEST_PREFIX_") == {}
