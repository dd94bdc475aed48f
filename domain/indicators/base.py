"""Value types returned by technical indicators."""

from typing import NamedTuple, Union


class Band(NamedTuple):
    """Upper/middle/lower envelope (Bollinger, Keltner)."""
    upper: float
    middle: float
    lower: float

    @property
    def width(self) -> float:
        return self.upper - self.lower


class OscillatorPair(NamedTuple):
    """Fast/slow oscillator lines (Stochastic %K/%D)."""
    k: float
    d: float


class Directional(NamedTuple):
    """Directional indicators +DI / -DI."""
    di_plus: float
    di_minus: float


class AdxValue(NamedTuple):
    """Average Directional Index with its directional components."""
    adx: float
    di_plus: float
    di_minus: float

    @property
    def directional(self) -> Directional:
        return Directional(self.di_plus, self.di_minus)


class MacdValue(NamedTuple):
    """Latest MACD reading.

    Example:
        >>> MacdValue(1.5, 1.0, 0.5).bullish
        True
    """
    macd_line: float
    signal_line: float
    histogram: float

    @property
    def bullish(self) -> bool:
        return self.macd_line > self.signal_line and self.histogram > 0

    @property
    def bearish(self) -> bool:
        return self.macd_line < self.signal_line and self.histogram < 0


class IchimokuValue(NamedTuple):
    """Ichimoku cloud components for the latest bar."""
    tenkan: float
    kijun: float
    senkou_a: float
    senkou_b: float
    chikou: float

    @property
    def bullish(self) -> bool:
        return self.senkou_a > self.senkou_b


IndicatorValue = Union[float, Band, OscillatorPair, Directional, AdxValue, MacdValue, IchimokuValue]
