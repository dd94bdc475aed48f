"""Pivot Points and Fibonacci retracement levels."""

from typing import NamedTuple

from domain.indicators.utils import check_same_length, highest, lowest

FIBONACCI_RATIOS = (0.236, 0.382, 0.5, 0.618, 0.786)


class PivotLevels(NamedTuple):
    """Pivot point levels for a trading period."""
    pivot: float
    r1: float
    r2: float
    r3: float
    s1: float
    s2: float
    s3: float


class FibonacciLevels(NamedTuple):
    """Retracement levels measured down from the window high."""
    high: float
    low: float
    level_236: float
    level_382: float
    level_500: float
    level_618: float
    level_786: float

    def by_ratio(self) -> dict[float, float]:
        """Map each retracement ratio to its price level."""
        return dict(zip(FIBONACCI_RATIOS, self[2:]))


def standard_pivots(high: float, low: float, close: float) -> PivotLevels:
    """Calculate Standard Pivot Points.

    Standard pivot points are used to identify potential support and resistance levels.

    Args:
        high: Period high price
        low: Period low price
        close: Period close price

    Returns:
        PivotLevels with pivot, resistance (R1-R3), and support (S1-S3) levels

    Example:
        >>> levels = standard_pivots(high=105, low=95, close=100)
        >>> levels.pivot
        100.0
        >>> levels.r1
        105.0

    Notes:
        - Pivot = (High + Low + Close) / 3
        - R1 = (2 * Pivot) - Low
        - S1 = (2 * Pivot) - High
        - R2 = Pivot + (High - Low)
        - S2 = Pivot - (High - Low)
        - R3 = High + 2 * (Pivot - Low)
        - S3 = Low - 2 * (High - Pivot)
    """
    pivot = (high + low + close) / 3.0

    r1 = (2 * pivot) - low
    s1 = (2 * pivot) - high

    r2 = pivot + (high - low)
    s2 = pivot - (high - low)

    r3 = high + 2 * (pivot - low)
    s3 = low - 2 * (high - pivot)

    return PivotLevels(
        pivot=pivot,
        r1=r1,
        r2=r2,
        r3=r3,
        s1=s1,
        s2=s2,
        s3=s3
    )


def fibonacci_retracement(
    highs: list[float],
    lows: list[float],
    lookback: int = 50
) -> FibonacciLevels:
    """Calculate Fibonacci retracement levels over a recent window.

    Args:
        highs: List of high prices
        lows: List of low prices
        lookback: Number of most recent bars defining the swing (default: 50)

    Returns:
        FibonacciLevels where each level = high - ratio * (high - low)

    Example:
        >>> fib = fibonacci_retracement([110, 120, 115], [100, 105, 102])
        >>> fib.level_500
        110.0

    Notes:
        - Uses every bar when fewer than `lookback` exist
        - Levels are strictly decreasing whenever high > low
    """
    check_same_length(highs, lows)
    if not highs:
        return FibonacciLevels(*([0.0] * 7))

    high = float(highest(highs, lookback))
    low = float(lowest(lows, lookback))
    price_range = high - low

    return FibonacciLevels(
        high,
        low,
        *(high - ratio * price_range for ratio in FIBONACCI_RATIOS)
    )
