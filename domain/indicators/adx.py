"""Average Directional Index (ADX) and Directional Movement (DMI)."""

from domain.indicators.atr import true_ranges
from domain.indicators.base import AdxValue
from domain.indicators.utils import check_same_length, mean

NEUTRAL_ADX = AdxValue(0.0, 0.0, 0.0)


def _wilder_smooth(values: list[float], period: int) -> list[float]:
    """Apply Wilder's smoothing to a list of values.

    Internal helper for ADX calculation.

    Args:
        values: List of values to smooth
        period: Smoothing period

    Returns:
        Smoothed values, one per input from index period - 1 onward
        (empty when fewer than `period` values exist)
    """
    if period <= 0 or len(values) < period:
        return []

    # First smoothed value is simple average
    smooth_value = sum(values[:period]) / period
    result = [smooth_value]

    # Subsequent values use Wilder's smoothing
    for value in values[period:]:
        smooth_value = (smooth_value * (period - 1) + value) / period
        result.append(smooth_value)

    return result


def directional_movement(
    highs: list[float],
    lows: list[float]
) -> tuple[list[float], list[float]]:
    """+DM and -DM for every bar after the first.

    Example:
        >>> directional_movement([10, 12, 11], [9, 10, 8])
        ([2.0, 0.0], [0.0, 2.0])
    """
    plus_dm = []
    minus_dm = []

    for i in range(1, len(highs)):
        high_diff = highs[i] - highs[i - 1]
        low_diff = lows[i - 1] - lows[i]

        # WHY: +DM is upward movement, -DM is downward movement
        if high_diff > low_diff and high_diff > 0:
            plus_dm.append(float(high_diff))
            minus_dm.append(0.0)
        elif low_diff > high_diff and low_diff > 0:
            plus_dm.append(0.0)
            minus_dm.append(float(low_diff))
        else:
            plus_dm.append(0.0)
            minus_dm.append(0.0)

    return plus_dm, minus_dm


def adx(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 14
) -> AdxValue:
    """Calculate Average Directional Index (ADX), +DI, and -DI.

    ADX measures trend strength (0-100 scale).
    +DI and -DI indicate directional movement.

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        period: ADX period (default: 14)

    Returns:
        AdxValue(adx, di_plus, di_minus) for the latest bar

    Example:
        >>> adx([50] * 30, [48] * 30, [49] * 30, 14)
        AdxValue(adx=0.0, di_plus=0.0, di_minus=0.0)

    Notes:
        - Returns zeros with fewer than period + 1 bars
        - +DM, -DM and TR use Wilder's smoothing
        - ADX is the Wilder average of DX once `period` DX values exist,
          the plain mean of the available DX before that
    """
    check_same_length(highs, lows, closes)
    if period <= 0 or len(closes) < period + 1:
        return NEUTRAL_ADX

    plus_dm, minus_dm = directional_movement(highs, lows)
    tr = true_ranges(highs, lows, closes)

    smoothed_plus_dm = _wilder_smooth(plus_dm, period)
    smoothed_minus_dm = _wilder_smooth(minus_dm, period)
    smoothed_tr = _wilder_smooth(tr, period)

    dx = []
    plus_di = 0.0
    minus_di = 0.0
    for s_plus, s_minus, s_tr in zip(smoothed_plus_dm, smoothed_minus_dm, smoothed_tr):
        # WHY: A zero range carries no directional information
        if s_tr == 0:
            plus_di = minus_di = 0.0
        else:
            plus_di = 100.0 * s_plus / s_tr
            minus_di = 100.0 * s_minus / s_tr

        di_sum = plus_di + minus_di
        dx.append(0.0 if di_sum == 0 else 100.0 * abs(plus_di - minus_di) / di_sum)

    smoothed_dx = _wilder_smooth(dx, period)
    adx_value = smoothed_dx[-1] if smoothed_dx else mean(dx)

    return AdxValue(adx_value, plus_di, minus_di)
