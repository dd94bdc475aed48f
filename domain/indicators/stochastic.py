"""Stochastic Oscillator indicators."""

from domain.indicators.base import OscillatorPair
from domain.indicators.moving_averages import sma
from domain.indicators.utils import check_same_length, clamp

NEUTRAL_STOCHASTIC = OscillatorPair(50.0, 50.0)


def stochastic_k_series(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    k_period: int = 14
) -> list[float]:
    """%K for every bar that has a full `k_period` window."""
    check_same_length(highs, lows, closes)
    k_values = []

    for i in range(k_period - 1, len(closes)):
        highest_high = max(highs[i - k_period + 1:i + 1])
        lowest_low = min(lows[i - k_period + 1:i + 1])

        # WHY: Prevent division by zero in flat markets
        if highest_high == lowest_low:
            k_values.append(50.0)
        else:
            k = 100.0 * (closes[i] - lowest_low) / (highest_high - lowest_low)
            k_values.append(clamp(k, 0.0, 100.0))

    return k_values


def stochastic(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    k_period: int = 14,
    d_period: int = 3
) -> OscillatorPair:
    """Calculate Stochastic Oscillator (%K and %D).

    %K = 100 * (Close - Lowest Low) / (Highest High - Lowest Low)
    %D = SMA of %K

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        k_period: Lookback period for %K (default: 14)
        d_period: SMA period for %D (default: 3)

    Returns:
        OscillatorPair(k, d), both on a 0-100 scale

    Example:
        >>> highs = [50, 51, 52, 53, 54, 55, 56, 57, 58, 59, 60, 61, 62, 63, 64]
        >>> lows = [48, 49, 50, 51, 52, 53, 54, 55, 56, 57, 58, 59, 60, 61, 62]
        >>> closes = [49, 50, 51, 52, 53, 54, 55, 56, 57, 58, 59, 60, 61, 62, 63]
        >>> round(stochastic(highs, lows, closes, 14, 3).k, 2)
        93.33

    Notes:
        - Returns (50, 50) with fewer than `k_period` bars
        - %D falls back to the latest %K until `d_period` %K values exist
    """
    if k_period <= 0 or len(closes) < k_period:
        return NEUTRAL_STOCHASTIC

    k_values = stochastic_k_series(highs, lows, closes, k_period)
    return OscillatorPair(k_values[-1], clamp(sma(k_values, d_period), 0.0, 100.0))
