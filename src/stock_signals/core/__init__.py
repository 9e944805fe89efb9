"""stock_signals.core — Foundation types, config, and exceptions."""

from stock_signals.core.config import (
    PipelineConfig,
    ProviderConfig,
    StockSignalsConfig,
    load_config,
)
from stock_signals.core.exceptions import (
    ConfigError,
    InvalidResponseError,
    OutputError,
    ProviderError,
    ProviderUnavailableError,
    StockSignalsError,
)
from stock_signals.core.models import (
    OutputRow,
    PriceChange,
    PriceObservation,
    PriceSeries,
    RunParams,
    Symbol,
    as_utc,
)

__all__ = [
    # Type aliases
    "Symbol",
    # Models
    "PriceObservation",
    "PriceSeries",
    "PriceChange",
    "OutputRow",
    "RunParams",
    "as_utc",
    # Config
    "StockSignalsConfig",
    "ProviderConfig",
    "PipelineConfig",
    "load_config",
    # Exceptions
    "StockSignalsError",
    "ConfigError",
    "ProviderError",
    "ProviderUnavailableError",
    "InvalidResponseError",
    "OutputError",
]
