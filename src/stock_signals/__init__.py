"""stock-signals: descriptive price signals per ticker, streamed to CSV."""

__version__ = "0.1.0"
