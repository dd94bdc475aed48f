"""Bollinger Bands indicator."""

from domain.indicators.base import Band
from domain.indicators.moving_averages import sma


def bollinger_bands(
    closes: list[float],
    period: int = 20,
    std_dev: float = 2.0
) -> Band:
    """Calculate Bollinger Bands for the latest bar.

    Upper Band = SMA + (std_dev * standard_deviation)
    Middle Band = SMA
    Lower Band = SMA - (std_dev * standard_deviation)

    Args:
        closes: List of closing prices
        period: Period for SMA and standard deviation (default: 20)
        std_dev: Number of standard deviations for bands (default: 2.0)

    Returns:
        Band(upper, middle, lower)

    Example:
        >>> prices = [20, 21, 22, 23, 24, 25, 24, 23, 22, 21,
        ...           20, 21, 22, 23, 24, 25, 26, 27, 28, 29,
        ...           30, 29, 28, 27, 26]
        >>> bollinger_bands(prices, period=20).middle
        25.0

    Notes:
        - Population standard deviation over the last `period` closes
        - With fewer than `period` closes all three bands collapse onto
          the SMA fallback (the last close)
    """
    middle = sma(closes, period)
    if period <= 0 or len(closes) < period:
        return Band(middle, middle, middle)

    window = closes[-period:]
    variance = sum((x - middle) ** 2 for x in window) / period
    band = std_dev * variance ** 0.5

    return Band(middle + band, middle, middle - band)
