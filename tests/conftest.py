"""Shared pytest fixtures for stock-signals."""

import pytest

from stock_signals.core.exceptions import InvalidResponseError
from stock_signals.core.models import PriceSeries, RunParams

from tests.fakes import END, START, make_series


@pytest.fixture
def sample_series() -> PriceSeries:
    return make_series("AAPL", [2.0, 4.5, 5.3, 6.5, 4.7])


@pytest.fixture
def run_params() -> RunParams:
    return RunParams(symbols=["AAPL", "MSFT"], start=START, end=END)


@pytest.fixture
def failing_error() -> InvalidResponseError:
    return InvalidResponseError("bad payload", context={"symbol": "MSFT"})
