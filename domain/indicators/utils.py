"""Utility functions for technical analysis."""


def clamp(value: float, low: float, high: float) -> float:
    """Limit value to the closed range [low, high].

    Example:
        >>> clamp(105.0, 0.0, 100.0)
        100.0
    """
    return max(low, min(high, value))


def mean(values: list[float]) -> float:
    """Arithmetic mean, 0.0 for an empty list."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def highest(values: list[float], period: int) -> float:
    """Highest value over the last `period` entries.

    Example:
        >>> highest([10, 12, 11, 15, 14, 13], 3)
        15

    Notes:
        - Uses every available value when fewer than `period` exist
    """
    window = values[-period:] if period > 0 else values
    return max(window)


def lowest(values: list[float], period: int) -> float:
    """Lowest value over the last `period` entries.

    Example:
        >>> lowest([10, 12, 11, 15, 14, 13], 3)
        13
    """
    window = values[-period:] if period > 0 else values
    return min(window)


def midpoint(highs: list[float], lows: list[float], period: int) -> float:
    """Midpoint of the highest high and lowest low over `period` bars."""
    return (highest(highs, period) + lowest(lows, period)) / 2.0


def check_same_length(*columns: list[float]) -> None:
    """Raise ValueError when parallel price columns differ in length."""
    lengths = {len(c) for c in columns}
    if len(lengths) > 1:
        raise ValueError("all input lists must have same length")


def sign(value: float) -> int:
    """Return -1, 0 or 1 according to the sign of value."""
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0
