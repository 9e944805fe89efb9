"""Signals module: descriptive statistics over a series of closing prices."""

from stock_signals.signals.base import StockSignal
from stock_signals.signals.difference import PriceDifference
from stock_signals.signals.extremes import MaxPrice, MinPrice
from stock_signals.signals.moving_average import WindowedSMA

__all__ = [
    "MaxPrice",
    "MinPrice",
    "PriceDifference",
    "StockSignal",
    "WindowedSMA",
]
