"""Ichimoku Kinko Hyo cloud."""

from domain.indicators.base import IchimokuValue
from domain.indicators.utils import check_same_length, midpoint

TENKAN_PERIOD = 9
KIJUN_PERIOD = 26
SENKOU_B_PERIOD = 52

NEUTRAL_ICHIMOKU = IchimokuValue(0.0, 0.0, 0.0, 0.0, 0.0)


def ichimoku(
    highs: list[float],
    lows: list[float],
    closes: list[float]
) -> IchimokuValue:
    """Calculate the Ichimoku components for the latest bar.

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices

    Returns:
        IchimokuValue(tenkan, kijun, senkou_a, senkou_b, chikou)

    Notes:
        - Tenkan: 9-bar high/low midpoint, Kijun: 26-bar midpoint
        - Senkou A = (Tenkan + Kijun) / 2, Senkou B: 52-bar midpoint
        - Chikou is the current close (no forward/backward displacement)
        - Returns all zeros with fewer than 52 bars
    """
    check_same_length(highs, lows, closes)
    if len(closes) < SENKOU_B_PERIOD:
        return NEUTRAL_ICHIMOKU

    tenkan = midpoint(highs, lows, TENKAN_PERIOD)
    kijun = midpoint(highs, lows, KIJUN_PERIOD)
    senkou_a = (tenkan + kijun) / 2.0
    senkou_b = midpoint(highs, lows, SENKOU_B_PERIOD)

    return IchimokuValue(tenkan, kijun, senkou_a, senkou_b, float(closes[-1]))
