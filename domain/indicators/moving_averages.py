"""Moving average indicators."""

from domain.indicators.utils import mean


def sma(values: list[float], period: int) -> float:
    """Calculate Simple Moving Average of the most recent values.

    Args:
        values: List of values to calculate SMA over
        period: Number of periods for the moving average

    Returns:
        Mean of the last `period` values

    Example:
        >>> sma([10, 11, 12, 13, 14, 15], 3)
        14.0

    Notes:
        - With fewer than `period` values the last value is returned
        - An empty list yields 0.0
    """
    if not values:
        return 0.0
    if period <= 0 or len(values) < period:
        return float(values[-1])
    return sum(values[-period:]) / period


def ema_series(values: list[float], period: int) -> list[float | None]:
    """Calculate the Exponential Moving Average for every bar.

    Seeded with the SMA of the first `period` values, then
    ema = value * alpha + ema * (1 - alpha) with alpha = 2/(period+1).

    Args:
        values: List of values to calculate EMA over
        period: Number of periods for the moving average

    Returns:
        List of EMA values, with None before the seed bar

    Example:
        >>> ema_series([10, 11, 12, 13, 14, 15], 3)
        [None, None, 11.0, 12.0, 13.0, 14.0]
    """
    if not values or period <= 0 or len(values) < period:
        return [None] * len(values) if values else []

    alpha = 2.0 / (period + 1)
    result: list[float | None] = [None] * (period - 1)

    # WHY: First EMA value is SMA of first 'period' values
    current = sum(values[:period]) / period
    result.append(current)

    for i in range(period, len(values)):
        current = (values[i] * alpha) + (current * (1 - alpha))
        result.append(current)

    return result


def ema(values: list[float], period: int) -> float:
    """Calculate the latest Exponential Moving Average.

    Args:
        values: List of values to calculate EMA over
        period: Number of periods for the moving average

    Returns:
        Most recent EMA value

    Example:
        >>> ema([10, 11, 12, 13, 14, 15], 3)
        14.0

    Notes:
        - With fewer than `period` values the mean of what is available
          is returned (0.0 for an empty list)
    """
    if not values:
        return 0.0
    if period <= 0 or len(values) < period:
        return mean(values)
    return ema_series(values, period)[-1]
