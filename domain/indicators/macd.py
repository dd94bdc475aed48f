"""MACD (Moving Average Convergence Divergence) indicator."""

from domain.indicators.base import MacdValue
from domain.indicators.moving_averages import ema, ema_series


def macd_history(closes: list[float], fast: int = 12, slow: int = 26) -> list[float]:
    """Return the MACD line for every bar from the slow seed bar onwards.

    Element j is EMA(fast) - EMA(slow) computed on closes[:slow + j].
    Empty when fewer than `slow` closes exist.
    """
    if len(closes) < slow or fast <= 0 or slow <= 0:
        return []

    fast_ema = ema_series(closes, fast)
    slow_ema = ema_series(closes, slow)

    history = []
    for i in range(slow - 1, len(closes)):
        history.append(fast_ema[i] - slow_ema[i])
    return history


def macd(
    closes: list[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9
) -> MacdValue:
    """Calculate the latest MACD reading.

    MACD Line = EMA(fast) - EMA(slow)
    Signal Line = EMA(signal) of the historical MACD line
    Histogram = MACD Line - Signal Line

    Args:
        closes: List of closing prices
        fast: Fast EMA period (default: 12)
        slow: Slow EMA period (default: 26)
        signal: Signal line EMA period (default: 9)

    Returns:
        MacdValue(macd_line, signal_line, histogram)

    Example:
        >>> prices = [100 * 1.01 ** i for i in range(60)]
        >>> macd(prices).bullish
        True

    Notes:
        - Returns MacdValue(0, 0, 0) with fewer than `slow` closes
        - While the MACD history is shorter than `signal`, the signal
          line is the mean of the available history
    """
    history = macd_history(closes, fast, slow)
    if not history:
        return MacdValue(0.0, 0.0, 0.0)

    macd_line = history[-1]
    signal_line = ema(history, signal)
    return MacdValue(macd_line, signal_line, macd_line - signal_line)


def macd_histogram_series(
    closes: list[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9
) -> list[float]:
    """Histogram value for every bar where the signal line is seeded.

    Used for divergence checks; empty until `slow + signal - 1` closes exist.
    """
    history = macd_history(closes, fast, slow)
    signal_values = ema_series(history, signal)
    return [
        m - s
        for m, s in zip(history, signal_values)
        if s is not None
    ]
