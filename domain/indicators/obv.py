"""On-Balance Volume (OBV) indicator."""

from domain.indicators.utils import check_same_length


def obv_series(closes: list[float], volumes: list[float]) -> list[float]:
    """Calculate On-Balance Volume for every bar.

    OBV is a cumulative indicator that adds volume on up closes
    and subtracts volume on down closes.

    Args:
        closes: List of closing prices
        volumes: List of volume values

    Returns:
        List of OBV values

    Example:
        >>> obv_series([10, 11, 10, 12, 11], [1000, 1500, 1200, 1800, 1000])
        [0.0, 1500.0, 300.0, 2100.0, 1100.0]

    Notes:
        - First value is always 0
        - If price unchanged, volume is not added or subtracted
    """
    if not closes:
        return []
    check_same_length(closes, volumes)

    result = [0.0]
    cumulative = 0.0

    for i in range(1, len(closes)):
        if closes[i] > closes[i - 1]:
            cumulative += volumes[i]
        elif closes[i] < closes[i - 1]:
            cumulative -= volumes[i]
        result.append(cumulative)

    return result


def obv(closes: list[float], volumes: list[float]) -> float:
    """Latest On-Balance Volume value (0.0 with fewer than two bars)."""
    series = obv_series(closes, volumes)
    return series[-1] if series else 0.0
