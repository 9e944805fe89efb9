"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from stock_signals.core.exceptions import ConfigError

DEFAULT_SYMBOLS = ["AAPL", "MSFT", "UBER", "GOOG"]
DEFAULT_WINDOW_SIZE = 3

ENV_PREFIX = "STOCK_SIGNALS_"
CONFIG_ENV_VAR = ENV_PREFIX + "CONFIG"
DEFAULT_CONFIG_FILE = "stock-signals.yml"


class ProviderConfig(BaseModel):
    """Yahoo Finance chart API access configuration."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://query2.finance.yahoo.com"
    timeout: float = 15.0
    request_delay: float = 0.5

    @field_validator("timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be > 0")
        return v

    @field_validator("request_delay")
    @classmethod
    def delay_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("request_delay must be >= 0")
        return v


class PipelineConfig(BaseModel):
    """Defaults for a signal run (overridable per-run from the CLI)."""

    model_config = ConfigDict(frozen=True)

    symbols: list[str] = DEFAULT_SYMBOLS
    window_size: int = DEFAULT_WINDOW_SIZE
    lookback_weeks: int = 2
    output_path: str = "data.csv"

    @field_validator("symbols", mode="before")
    @classmethod
    def split_symbol_string(cls, v):
        """Accept "AAPL, MSFT" as well as a list (env vars are strings)."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",")]
        return v

    @field_validator("symbols")
    @classmethod
    def symbols_not_empty(cls, v: list[str]) -> list[str]:
        cleaned = [s.strip().upper() for s in v if s.strip()]
        if not cleaned:
            raise ValueError("symbols must not be empty")
        return cleaned

    @field_validator("output_path", mode="before")
    @classmethod
    def output_path_as_str(cls, v):
        """YAML reads an unquoted ``output_path: 2024`` as a number."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("window_size")
    @classmethod
    def window_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("window_size must be >= 1")
        return v

    @field_validator("lookback_weeks")
    @classmethod
    def lookback_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("lookback_weeks must be >= 1")
        return v


class StockSignalsConfig(BaseModel):
    """Root configuration for stock-signals."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderConfig = ProviderConfig()
    pipeline: PipelineConfig = PipelineConfig()


def load_config(
    config_path: str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> StockSignalsConfig:
    """Build the run configuration.

    Environment variables win over the YAML file, which wins over the
    defaults above. A double underscore nests, so
    ``STOCK_SIGNALS_PIPELINE__SYMBOLS=AAPL,GOOG`` sets ``pipeline.symbols``.

    The YAML file is ``config_path`` if given, else the file named by
    ``STOCK_SIGNALS_CONFIG``, else ``./stock-signals.yml`` when present.

    Environment values are passed through as strings and coerced by each
    field's type, so ``STOCK_SIGNALS_PIPELINE__OUTPUT_PATH=2024`` names the
    file ``2024`` while ``..._WINDOW_SIZE=5`` is the integer 5.

    Raises
    ------
    ConfigError
        ``context["source"]`` is the YAML path, or ``"defaults"`` when no
        file was read. Validation failures add ``field`` (dotted path such
        as ``pipeline.window_size``) and the rejected ``value``.
    """
    yaml_path = _resolve_config_path(config_path)
    source = str(yaml_path) if yaml_path is not None else "defaults"
    base = _load_yaml(yaml_path) if yaml_path is not None else {}
    merged = _merge_env_vars(base, env_prefix)

    try:
        return StockSignalsConfig.model_validate(merged)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigError(
            f"Invalid setting {field} (from {source}): {first['msg']}",
            context={"source": source, "field": field, "value": first.get("input")},
        ) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Pick the YAML file to read, or None to run on defaults and env alone."""
    if explicit is not None:
        candidate, origin = explicit, "config_path"
    else:
        candidate, origin = os.environ.get(CONFIG_ENV_VAR), CONFIG_ENV_VAR
        if not candidate:
            default = Path(DEFAULT_CONFIG_FILE)
            return default if default.exists() else None

    p = Path(candidate)
    if not p.exists():
        where = "" if origin == "config_path" else f" from {origin}"
        raise ConfigError(
            f"Config file{where} not found: {candidate}",
            context={"source": candidate, "field": origin, "value": candidate},
        )
    return p


def _load_yaml(path: Path) -> dict:
    """Read a stock-signals.yml mapping; an empty file means no overrides."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(
            f"Cannot read config file {path}: {e}",
            context={"source": str(path)},
        ) from e
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config {path}: {e}",
            context={"source": str(path)},
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"YAML config must be a mapping of sections, got {type(data).__name__}",
            context={"source": str(path)},
        )
    return data


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay ``<prefix>SECTION__KEY`` variables onto the YAML mapping.

    Values stay strings. ``<prefix>CONFIG`` selects the file and is skipped.
    """
    result = dict(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        parts = [p.lower() for p in key[len(prefix) :].split("__")]
        if parts == ["config"]:
            continue

        # Copy nested dicts so the YAML mapping is never mutated
        target = result
        for part in parts[:-1]:
            existing = target.get(part)
            nested = dict(existing) if isinstance(existing, dict) else {}
            target[part] = nested
            target = nested
        target[parts[-1]] = value

    return result
