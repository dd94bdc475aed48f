"""
In-memory price provider.

Serves pre-built series, for tests, dry runs and replaying captured data.
"""

from typing import Iterable

from config import ProviderConfig
from domain import PriceSeries
from ports import ErrorCode, UpstreamUnavailableError

from .base import BasePriceProvider


class StaticPriceProvider(BasePriceProvider):
    """
    Provider backed by a dict keyed on (symbol, timeframe).

    Example:
        >>> s = PriceSeries.from_ohlcv("ACME", "1d", [11.0], [9.0], [10.0])
        >>> provider = StaticPriceProvider([s], config=ProviderConfig())
        >>> provider.fetch("acme", "1d") is s
        True
    """

    def __init__(self, series: Iterable[PriceSeries] = (), config: ProviderConfig | None = None):
        super().__init__(config)
        self._series: dict[tuple[str, str], PriceSeries] = {}
        for s in series:
            self.add(s)

    @property
    def source_name(self) -> str:
        return "static"

    def add(self, series: PriceSeries) -> None:
        """Register (or replace) the series for its symbol and timeframe."""
        self._series[(series.symbol.upper(), series.timeframe)] = series

    def _fetch_impl(self, symbol: str, timeframe: str) -> PriceSeries:
        try:
            return self._series[(symbol.upper(), timeframe)]
        except KeyError:
            raise UpstreamUnavailableError(
                self.source_name,
                f"No data for {symbol} {timeframe}",
                symbol=symbol,
                timeframe=timeframe,
                code=ErrorCode.UPSTREAM_EMPTY,
            ) from None
