"""Momentum indicators."""

from domain.indicators.utils import check_same_length, clamp

NEUTRAL_WILLIAMS_R = -50.0


def cci(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 20
) -> float:
    """Calculate Commodity Channel Index.

    CCI = (Typical Price - SMA of Typical Price) / (0.015 * Mean Deviation)
    Typical Price = (High + Low + Close) / 3

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        period: CCI period (default: 20)

    Returns:
        Latest CCI value

    Example:
        >>> cci([102] * 25, [98] * 25, [100] * 25, 20)
        0.0

    Notes:
        - Returns 0.0 with fewer than `period` bars
        - Oscillator with no bounded range (typically -200 to +200)
    """
    check_same_length(highs, lows, closes)
    if period <= 0 or len(closes) < period:
        return 0.0

    tp_window = [
        (highs[i] + lows[i] + closes[i]) / 3.0
        for i in range(len(closes) - period, len(closes))
    ]
    sma_tp = sum(tp_window) / period
    mean_deviation = sum(abs(tp - sma_tp) for tp in tp_window) / period

    # WHY: Prevent division by zero
    if mean_deviation == 0:
        return 0.0
    return (tp_window[-1] - sma_tp) / (0.015 * mean_deviation)


def williams_r(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 14
) -> float:
    """Calculate Williams %R.

    Williams %R = -100 * (Highest High - Close) / (Highest High - Lowest Low)

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        period: Lookback period (default: 14)

    Returns:
        Latest Williams %R value (-100 to 0)

    Example:
        >>> highs = [50, 51, 52, 53, 54, 55, 56, 57, 58, 59, 60, 61, 62, 63, 64]
        >>> lows = [48, 49, 50, 51, 52, 53, 54, 55, 56, 57, 58, 59, 60, 61, 62]
        >>> closes = [49, 50, 51, 52, 53, 54, 55, 56, 57, 58, 59, 60, 61, 62, 63]
        >>> round(williams_r(highs, lows, closes, 14), 2)
        -6.67

    Notes:
        - Returns -50 with fewer than `period` bars or a flat window
        - Values range from -100 (oversold) to 0 (overbought)
    """
    check_same_length(highs, lows, closes)
    if period <= 0 or len(closes) < period:
        return NEUTRAL_WILLIAMS_R

    highest_high = max(highs[-period:])
    lowest_low = min(lows[-period:])

    # WHY: Prevent division by zero in flat markets
    if highest_high == lowest_low:
        return NEUTRAL_WILLIAMS_R

    wr = (highest_high - closes[-1]) / (highest_high - lowest_low) * -100.0
    return clamp(wr, -100.0, 0.0)
