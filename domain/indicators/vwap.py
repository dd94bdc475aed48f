"""Volume Weighted Average Price (VWAP) indicator."""

from domain.indicators.utils import check_same_length


def vwap(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    volumes: list[float]
) -> float:
    """Calculate Volume Weighted Average Price over the full series.

    VWAP = Sum(Typical Price * Volume) / Sum(Volume)
    Typical Price = (High + Low + Close) / 3

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        volumes: List of volume values

    Returns:
        VWAP of the whole input

    Example:
        >>> vwap([102, 103, 104], [100, 101, 102], [101, 102, 103], [1000, 1000, 2000])
        102.25

    Notes:
        - No session reset: the whole series is one anchor period
        - Falls back to the last typical price when total volume is zero
    """
    if not closes:
        return 0.0
    check_same_length(highs, lows, closes, volumes)

    cumulative_tp_volume = 0.0
    cumulative_volume = 0.0

    for i in range(len(closes)):
        typical_price = (highs[i] + lows[i] + closes[i]) / 3.0
        cumulative_tp_volume += typical_price * volumes[i]
        cumulative_volume += volumes[i]

    # WHY: Prevent division by zero
    if cumulative_volume == 0:
        return (highs[-1] + lows[-1] + closes[-1]) / 3.0
    return cumulative_tp_volume / cumulative_volume
