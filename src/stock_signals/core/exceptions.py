"""Custom exception hierarchy for stock-signals."""

from typing import Any


class StockSignalsError(Exception):
    """Base exception for all stock-signals errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(StockSignalsError):
    """Invalid or missing configuration.

    Raised by load_config() during startup. Should be treated as fatal.

    Context keys:
        source: str — the YAML file read, or "defaults"
        field: str — dotted setting path (pipeline.window_size), or the
            option that named a missing file
        value: Any — the rejected value
    """


class ProviderError(StockSignalsError):
    """The price data source failed for a symbol.

    Policy: raise immediately. One failing symbol aborts the whole run;
    rows already written stay in the output.

    Context keys:
        symbol: str — the symbol being fetched
    """


class ProviderUnavailableError(ProviderError):
    """The data-source client could not be constructed or connected.

    Context keys:
        url: str — the endpoint that was being contacted
    """


class InvalidResponseError(ProviderError):
    """The data source answered, but the payload is not usable price data.

    Covers HTTP error statuses, non-JSON bodies, API-level error objects
    and malformed CSV files.

    Context keys:
        status_code: int | None — HTTP status code if applicable
        reason: str — why the response was rejected
    """


class OutputError(StockSignalsError):
    """The output file could not be opened or written.

    Context keys:
        path: str — the output path
    """
