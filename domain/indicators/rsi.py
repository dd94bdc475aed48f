"""Relative Strength Index (RSI) indicator."""

from domain.indicators.utils import clamp

NEUTRAL_RSI = 50.0


def rsi(closes: list[float], period: int = 14) -> float:
    """Calculate RSI using Wilder's smoothing method.

    Args:
        closes: List of closing prices
        period: RSI period (default: 14)

    Returns:
        Latest RSI value (0-100)

    Example:
        >>> rsi([float(p) for p in range(90, 120)], 14)
        100.0

    Notes:
        - Seed averages are simple means of the first `period` gains/losses
        - Wilder's smoothing: new avg = (prev_avg * (period-1) + current) / period
        - Returns 50 when fewer than period + 1 closes exist
        - Returns 100 when there were no losses (50 if there was no movement)
    """
    if period <= 0 or len(closes) < period + 1:
        return NEUTRAL_RSI

    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = closes[i] - closes[i - 1]
        if change > 0:
            gains += change
        else:
            losses -= change

    avg_gain = gains / period
    avg_loss = losses / period

    for i in range(period + 1, len(closes)):
        change = closes[i] - closes[i - 1]
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0

        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        # WHY: a completely flat window carries no momentum either way
        return 100.0 if avg_gain > 0 else NEUTRAL_RSI

    rs = avg_gain / avg_loss
    return clamp(100.0 - (100.0 / (1.0 + rs)), 0.0, 100.0)
