"""
Multi-timeframe trend analysis.

Each timeframe is classified independently from its own SMA pair; the
consensus is a plain majority vote, so evaluation order never matters.
"""

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Mapping

from config.schema import TrendConfig

from .enums import TrendDirection
from .indicators.moving_averages import sma
from .indicators.rsi import rsi
from .indicators.utils import sign
from .models import TimeframeAnalysis, TimeframeVote, TrendConsensus
from .primitives import PriceSeries

logger = logging.getLogger(__name__)

# Vote share reported when bullish and bearish timeframes cancel out
TIE_CONFIDENCE = 0.5


def analyze_timeframe(
    series: PriceSeries,
    short_period: int = 20,
    long_period: int = 50,
    rsi_period: int = 14,
) -> TimeframeAnalysis:
    """
    Classify one timeframe as bullish, bearish or neutral.

    Bullish when close > SMA(short) > SMA(long), bearish when
    close < SMA(short) < SMA(long), neutral otherwise. A series shorter
    than `long_period` is always neutral with zero strength.

    Strength is |score| / 3 where score adds +1/-1 for each of
    close vs SMA(short), SMA(short) vs SMA(long) and close vs SMA(long).

    Example:
        >>> s = PriceSeries.from_ohlcv("X", "1d", *([[float(p) for p in range(60)]] * 3))
        >>> analyze_timeframe(s).trend.value
        'bullish'
    """
    closes = series.closes
    close = closes[-1]
    sma_short = sma(closes, short_period)
    sma_long = sma(closes, long_period)

    if len(closes) < long_period:
        trend = TrendDirection.NEUTRAL
        strength = 0.0
    else:
        score = sign(close - sma_short) + sign(sma_short - sma_long) + sign(close - sma_long)
        strength = abs(score) / 3.0
        if close > sma_short > sma_long:
            trend = TrendDirection.BULLISH
        elif close < sma_short < sma_long:
            trend = TrendDirection.BEARISH
        else:
            trend = TrendDirection.NEUTRAL

    return TimeframeAnalysis(
        timeframe=series.timeframe,
        trend=trend,
        strength=strength,
        close=close,
        sma_short=sma_short,
        sma_long=sma_long,
        rsi=rsi(closes, rsi_period),
        bar_count=len(closes),
    )


def vote(votes: list[TimeframeVote]) -> tuple[TrendDirection, float]:
    """
    Majority vote over timeframe classifications.

    Returns:
        (trend, confidence) where confidence = winning votes / total

    Notes:
        - No votes: neutral, 0.0
        - Equal non-zero bullish and bearish counts not beaten by neutral:
          neutral, 0.5
        - A directional label tied with neutral resolves to neutral
    """
    if not votes:
        return TrendDirection.NEUTRAL, 0.0

    counts = Counter(v.trend for v in votes)
    bullish = counts[TrendDirection.BULLISH]
    bearish = counts[TrendDirection.BEARISH]
    neutral = counts[TrendDirection.NEUTRAL]
    total = len(votes)

    if bullish == bearish and bullish > 0 and bullish >= neutral:
        return TrendDirection.NEUTRAL, TIE_CONFIDENCE

    top = max(bullish, bearish, neutral)
    if neutral == top:
        return TrendDirection.NEUTRAL, neutral / total
    if bullish == top:
        return TrendDirection.BULLISH, bullish / total
    return TrendDirection.BEARISH, bearish / total


def aggregate_trend(
    series_by_timeframe: Mapping[str, PriceSeries],
    config: TrendConfig | None = None,
) -> TrendConsensus:
    """
    Analyze every timeframe and vote on the overall trend.

    Timeframes are analyzed on a thread pool when `config.parallel` is set
    and there is more than one; all results are joined before voting.

    Args:
        series_by_timeframe: Timeframe label -> series for that timeframe
        config: Trend settings; defaults when omitted

    Returns:
        TrendConsensus with per-timeframe votes and their underlying
        analyses (SMA pair, RSI) in input order
    """
    config = config or TrendConfig()
    labels = list(series_by_timeframe)

    def _analyze(label: str) -> TimeframeAnalysis:
        return analyze_timeframe(
            series_by_timeframe[label],
            config.short_period,
            config.long_period,
            config.rsi_period,
        )

    if config.parallel and len(labels) > 1:
        workers = min(config.max_workers, len(labels))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="trend") as executor:
            # WHY: map preserves input order regardless of completion order
            analyses = list(executor.map(_analyze, labels))
    else:
        analyses = [_analyze(label) for label in labels]

    # Keyed and labelled by the caller's timeframe, not the series' own label
    details = {
        label: analysis.model_copy(update={"timeframe": label})
        for label, analysis in zip(labels, analyses)
    }
    per_timeframe = {label: analysis.vote for label, analysis in details.items()}
    trend, confidence = vote(list(per_timeframe.values()))
    distinct = {v.trend for v in per_timeframe.values()}

    consensus = TrendConsensus(
        trend=trend,
        confidence=confidence,
        per_timeframe=per_timeframe,
        details=details,
        has_divergence=len(distinct) > 1,
    )
    logger.debug(
        f"Trend consensus {consensus.trend.value} ({consensus.confidence:.2f}) "
        f"over {len(labels)} timeframe(s), divergence={consensus.has_divergence}"
    )
    return consensus
