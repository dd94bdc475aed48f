"""Average True Range (ATR) indicator."""

from domain.indicators.utils import check_same_length, mean


def true_ranges(
    highs: list[float],
    lows: list[float],
    closes: list[float]
) -> list[float]:
    """True range for every bar after the first.

    True Range = max(high - low, abs(high - prev_close), abs(low - prev_close))
    """
    check_same_length(highs, lows, closes)
    result = []
    for i in range(1, len(closes)):
        high_low = highs[i] - lows[i]
        high_prev_close = abs(highs[i] - closes[i - 1])
        low_prev_close = abs(lows[i] - closes[i - 1])
        result.append(max(high_low, high_prev_close, low_prev_close))
    return result


def atr(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 14
) -> float:
    """Calculate Average True Range as a simple mean of recent true ranges.

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        period: ATR period (default: 14)

    Returns:
        SMA(period) of the true range

    Example:
        >>> highs = [48, 49, 50, 51, 52, 53, 54, 55, 56, 57,
        ...          58, 59, 60, 61, 62]
        >>> lows = [46, 47, 48, 49, 50, 51, 52, 53, 54, 55,
        ...         56, 57, 58, 59, 60]
        >>> closes = [47, 48, 49, 50, 51, 52, 53, 54, 55, 56,
        ...           57, 58, 59, 60, 61]
        >>> atr(highs, lows, closes, 14)
        2.0

    Notes:
        - Returns 0.0 with fewer than two bars (no previous close)
        - With fewer than `period` true ranges, averages what exists
    """
    ranges = true_ranges(highs, lows, closes)
    if not ranges:
        return 0.0
    if period <= 0:
        return mean(ranges)
    return mean(ranges[-period:])
