"""Yahoo Finance price provider — direct HTTP implementation.

Uses the unauthenticated ``/v8/finance/chart/`` endpoint via httpx.
The chart endpoint provides daily adjusted closes without authentication.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any

import httpx

from stock_signals.core.config import ProviderConfig
from stock_signals.core.exceptions import InvalidResponseError, ProviderUnavailableError
from stock_signals.core.models import PriceObservation, PriceSeries, as_utc

logger = logging.getLogger(__name__)

_CHART_PATH = "/v8/finance/chart"
_USER_AGENT = "Mozilla/5.0 (compatible; stock-signals/0.1)"


class YahooFinanceAdapter:
    """Transforms raw Yahoo Finance chart JSON into PriceObservation records.

    Uses ``indicators.adjclose`` when present and falls back to the plain
    ``indicators.quote.close`` otherwise.
    """

    def adapt(self, raw_data: Any, symbol: str) -> list[PriceObservation]:
        """Parse a chart ``result[0]`` object.

        Bars whose price is null (holidays, missing data) are skipped.

        Raises
        ------
        ValueError
            The payload does not have the chart result shape.
        """
        if not isinstance(raw_data, dict):
            raise ValueError(
                f"chart result must be an object, got {type(raw_data).__name__}"
            )

        timestamps: list[int] = raw_data.get("timestamp") or []
        if not timestamps:
            return []

        indicators = raw_data.get("indicators") or {}
        quotes = (indicators.get("quote") or [{}])[0]
        adjclose_data = indicators.get("adjclose") or [{}]
        adj_closes: list[float | None] = adjclose_data[0].get("adjclose") or []
        closes: list[float | None] = quotes.get("close") or []

        observations: list[PriceObservation] = []
        for i, ts in enumerate(timestamps):
            price = adj_closes[i] if i < len(adj_closes) else None
            if price is None:
                price = closes[i] if i < len(closes) else None
            if price is None:
                continue

            observations.append(
                PriceObservation(
                    timestamp=datetime.fromtimestamp(int(ts), tz=timezone.utc),
                    adj_close=float(price),
                )
            )

        logger.debug("Parsed %d observations for %s", len(observations), symbol)
        return observations


class YahooFinancePriceProvider:
    """Fetches daily adjusted closes from Yahoo Finance's chart API.

    Parameters
    ----------
    config : ProviderConfig | None
        Base URL, timeout and minimum delay between requests.
    adapter : YahooFinanceAdapter | None
        Custom adapter instance. Uses default if None.

    Use via ``async with YahooFinancePriceProvider(...) as provider:`` to
    share one HTTP client across symbols. Outside a context each request
    opens its own client.
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        adapter: YahooFinanceAdapter | None = None,
    ) -> None:
        config = config or ProviderConfig()
        self._base_url = config.base_url.rstrip("/")
        self._timeout = config.timeout
        self._delay = config.request_delay
        self._adapter = adapter or YahooFinanceAdapter()
        self._last_request_time: float = 0.0
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> YahooFinancePriceProvider:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": _USER_AGENT},
                timeout=self._timeout,
            )
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the shared HTTP client. Called automatically by __aexit__."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str, params: dict[str, str]) -> httpx.Response:
        """GET through the shared client, or a one-off client outside ``async with``."""
        if self._client is not None:
            return await self._client.get(url, params=params)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.get(
                url,
                params=params,
                headers={"User-Agent": _USER_AGENT},
            )

    async def _rate_limit(self) -> None:
        """Enforce minimum delay between requests."""
        now = time.monotonic()
        elapsed = now - self._last_request_time
        if elapsed < self._delay:
            await asyncio.sleep(self._delay - elapsed)
        self._last_request_time = time.monotonic()

    async def _fetch_chart(
        self, symbol: str, start: datetime, end: datetime
    ) -> dict | None:
        """Fetch the raw ``chart.result[0]`` object for one symbol.

        Returns None when the API reports no results for the range.
        """
        await self._rate_limit()

        url = f"{self._base_url}{_CHART_PATH}/{symbol}"
        params = {
            "interval": "1d",
            "period1": str(int(start.timestamp())),
            "period2": str(int(end.timestamp())),
            "events": "div,split",
            "includeAdjustedClose": "true",
        }

        try:
            resp = await self._get(url, params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Yahoo Finance HTTP error for %s: %s %s",
                symbol,
                e.response.status_code,
                e.response.text[:200],
            )
            raise InvalidResponseError(
                f"Yahoo Finance returned HTTP {e.response.status_code} for {symbol}",
                context={
                    "symbol": symbol,
                    "status_code": e.response.status_code,
                    "reason": "http_status",
                },
            ) from e
        except httpx.RequestError as e:
            logger.error("Yahoo Finance request error for %s: %s", symbol, e)
            raise ProviderUnavailableError(
                f"Could not reach Yahoo Finance for {symbol}: {e}",
                context={"symbol": symbol, "url": url},
            ) from e
        except ValueError as e:
            raise InvalidResponseError(
                f"Yahoo Finance returned a non-JSON body for {symbol}",
                context={"symbol": symbol, "reason": "invalid_json"},
            ) from e

        chart = data.get("chart") if isinstance(data, dict) else None
        if not isinstance(chart, dict):
            raise InvalidResponseError(
                f"Yahoo Finance response for {symbol} has no chart object",
                context={"symbol": symbol, "reason": "missing_chart"},
            )

        err = chart.get("error")
        if err:
            # Usually {"code": ..., "description": ...}, sometimes a bare string
            if isinstance(err, dict):
                code, description = err.get("code"), err.get("description")
            else:
                code, description = "api_error", str(err)
            logger.error(
                "Yahoo Finance API error for %s: %s: %s", symbol, code, description
            )
            raise InvalidResponseError(
                f"Yahoo Finance API error for {symbol}: {description}",
                context={"symbol": symbol, "reason": str(code)},
            )

        results = chart.get("result")
        if not results:
            logger.warning("Yahoo Finance returned no results for %s", symbol)
            return None

        return results[0]

    async def get_series(
        self, symbol: str, start: datetime, end: datetime
    ) -> PriceSeries:
        """Fetch and sort the adjusted closes for one symbol."""
        start, end = as_utc(start), as_utc(end)
        raw = await self._fetch_chart(symbol, start, end)
        if raw is None:
            return PriceSeries.from_observations(symbol, start, end, [])

        try:
            observations = self._adapter.adapt(raw, symbol)
        except (ValueError, TypeError, AttributeError, IndexError) as e:
            raise InvalidResponseError(
                f"Malformed Yahoo Finance chart data for {symbol}: {e}",
                context={"symbol": symbol, "reason": "malformed_chart"},
            ) from e

        return PriceSeries.from_observations(symbol, start, end, observations)
