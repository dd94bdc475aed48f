"""Keltner Channels."""

from domain.indicators.atr import atr
from domain.indicators.base import Band
from domain.indicators.moving_averages import ema


def keltner_channels(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 20,
    multiplier: float = 2.0
) -> Band:
    """Calculate Keltner Channels.

    Middle = EMA(period) of closes, upper/lower = middle +/- multiplier * ATR(period)

    Example:
        >>> keltner_channels([11.0] * 25, [9.0] * 25, [10.0] * 25)
        Band(upper=14.0, middle=10.0, lower=6.0)

    Notes:
        - Inherits the EMA and ATR insufficient-data fallbacks
    """
    middle = ema(closes, period)
    offset = multiplier * atr(highs, lows, closes, period)
    return Band(middle + offset, middle, middle - offset)
