"""Volume-flow indicators."""

from domain.indicators.utils import check_same_length, clamp

NEUTRAL_MFI = 50.0


def mfi(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    volumes: list[float],
    period: int = 14
) -> float:
    """Calculate Money Flow Index.

    Raw money flow = typical price * volume. Flow is positive when the
    typical price rose from the previous bar and negative when it fell.
    MFI = 100 - 100 / (1 + positive flow / negative flow)

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        volumes: List of volume values
        period: Number of money flows to include (default: 14)

    Returns:
        Latest MFI value (0-100)

    Example:
        >>> highs = [float(h) for h in range(11, 27)]
        >>> lows = [float(h) for h in range(9, 25)]
        >>> closes = [float(h) for h in range(10, 26)]
        >>> mfi(highs, lows, closes, [1000.0] * 16, 14)
        100.0

    Notes:
        - Returns 50 with fewer than period + 1 bars
        - Unchanged typical price contributes to neither flow
        - No negative flow gives 100 (50 when there is no flow at all)
    """
    check_same_length(highs, lows, closes, volumes)
    if period <= 0 or len(closes) < period + 1:
        return NEUTRAL_MFI

    typical = [(highs[i] + lows[i] + closes[i]) / 3.0 for i in range(len(closes))]

    positive_flow = 0.0
    negative_flow = 0.0
    for i in range(len(closes) - period, len(closes)):
        raw_flow = typical[i] * volumes[i]
        if typical[i] > typical[i - 1]:
            positive_flow += raw_flow
        elif typical[i] < typical[i - 1]:
            negative_flow += raw_flow

    if negative_flow == 0:
        return 100.0 if positive_flow > 0 else NEUTRAL_MFI

    money_ratio = positive_flow / negative_flow
    return clamp(100.0 - (100.0 / (1.0 + money_ratio)), 0.0, 100.0)


def cmf(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    volumes: list[float],
    period: int = 21
) -> float:
    """Calculate Chaikin Money Flow.

    Money flow multiplier = ((close - low) - (high - close)) / (high - low)
    CMF = Sum(multiplier * volume) / Sum(volume) over `period` bars

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        volumes: List of volume values
        period: Lookback period (default: 21)

    Returns:
        Latest CMF value (-1 to 1)

    Example:
        >>> cmf([12.0] * 21, [10.0] * 21, [12.0] * 21, [500.0] * 21)
        1.0

    Notes:
        - Returns 0.0 with fewer than `period` bars
        - Bars with high == low contribute no flow
    """
    check_same_length(highs, lows, closes, volumes)
    if period <= 0 or len(closes) < period:
        return 0.0

    flow_volume = 0.0
    total_volume = 0.0
    for i in range(len(closes) - period, len(closes)):
        total_volume += volumes[i]
        spread = highs[i] - lows[i]
        if spread == 0:
            continue
        multiplier = ((closes[i] - lows[i]) - (highs[i] - closes[i])) / spread
        flow_volume += multiplier * volumes[i]

    if total_volume == 0:
        return 0.0
    return flow_volume / total_volume
