"""
Yahoo Finance price provider.

Uses yfinance's Ticker.history for OHLCV bars. No API key required.
"""

import logging
from typing import NamedTuple

import pandas as pd
import yfinance as yf

from domain import PriceBar, PriceSeries
from ports import ErrorCode, UpstreamUnavailableError

from .base import BasePriceProvider

logger = logging.getLogger(__name__)


class HistoryWindow(NamedTuple):
    """yfinance interval and how far back to request it."""
    interval: str
    period: str


# Intraday intervals are limited by Yahoo to short lookbacks
TIMEFRAME_WINDOWS = {
    "1m": HistoryWindow("1m", "5d"),
    "5m": HistoryWindow("5m", "1mo"),
    "15m": HistoryWindow("15m", "1mo"),
    "1h": HistoryWindow("1h", "3mo"),
    "1d": HistoryWindow("1d", "1y"),
    "1wk": HistoryWindow("1wk", "5y"),
}


def frame_to_series(symbol: str, timeframe: str, frame: pd.DataFrame) -> PriceSeries:
    """
    Convert a yfinance history frame into a PriceSeries.

    Rows missing high, low or close are dropped; missing volume counts as 0.
    """
    frame = frame.dropna(subset=["High", "Low", "Close"])
    bars = []
    for ts, row in frame.iterrows():
        volume = row.get("Volume", 0.0)
        open_price = row.get("Open")
        bars.append(PriceBar(
            high=float(row["High"]),
            low=float(row["Low"]),
            close=float(row["Close"]),
            volume=0.0 if pd.isna(volume) else float(volume),
            timestamp=ts.to_pydatetime() if hasattr(ts, "to_pydatetime") else None,
            open=None if open_price is None or pd.isna(open_price) else float(open_price),
        ))
    return PriceSeries(symbol=symbol, timeframe=timeframe, bars=tuple(bars))


class YahooPriceProvider(BasePriceProvider):
    """
    Yahoo Finance price provider.

    Example:
        >>> provider = YahooPriceProvider()
        >>> series = provider.fetch("AAPL", "1d")  # doctest: +SKIP
    """

    @property
    def source_name(self) -> str:
        return "yahoo"

    def _fetch_impl(self, symbol: str, timeframe: str) -> PriceSeries:
        window = TIMEFRAME_WINDOWS.get(timeframe)
        if window is None:
            raise UpstreamUnavailableError(
                self.source_name,
                f"Unsupported timeframe: {timeframe}",
                symbol=symbol,
                timeframe=timeframe,
            )

        frame = yf.Ticker(symbol).history(
            period=window.period,
            interval=window.interval,
            auto_adjust=self._config.auto_adjust,
        )

        if frame is None or frame.empty:
            logger.warning(f"No data returned from yfinance for {symbol} {timeframe}")
            raise UpstreamUnavailableError(
                self.source_name,
                f"No data for {symbol}",
                symbol=symbol,
                timeframe=timeframe,
                code=ErrorCode.UPSTREAM_EMPTY,
            )

        return frame_to_series(symbol.upper(), timeframe, frame)
