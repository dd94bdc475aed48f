"""
Composite technical score and buy/sell signals.

The score starts neutral at 0.5 and each condition nudges it; it is
clamped to [0, 1] after every contribution so no single term can push
it out of range.
"""

import logging

from config.schema import SignalConfig

from .enums import Recommendation, SignalDirection, TrendDirection
from .indicators.adx import NEUTRAL_ADX
from .indicators.base import MacdValue
from .indicators.indicator_set import IndicatorSet
from .indicators.rsi import NEUTRAL_RSI
from .indicators.utils import clamp, sign
from .models import SignalSummary, TradingSignal, TrendConsensus

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5
_NO_MACD = MacdValue(0.0, 0.0, 0.0)


def composite_score(
    rsi_value: float,
    macd_value: MacdValue,
    trend: TrendConsensus,
    config: SignalConfig | None = None,
    adx_value: float = 0.0,
) -> tuple[float, list[str]]:
    """
    Combine RSI extremes, MACD direction and trend into one score.

    An ADX above `adx_threshold` confirms whatever direction the other
    terms produced: the score moves a further `adx_weight` away from
    neutral. A neutral score stays neutral.

    Returns:
        (score in [0, 1], reasons for every contribution applied)

    Example:
        >>> score, _ = composite_score(25.0, MacdValue(0.0, 0.0, 0.0), TrendConsensus())
        >>> score
        0.8
    """
    config = config or SignalConfig()
    score = NEUTRAL_SCORE
    reasons: list[str] = []

    if rsi_value < config.rsi_oversold:
        score = clamp(score + config.rsi_weight, 0.0, 1.0)
        reasons.append(f"RSI {rsi_value:.1f} below {config.rsi_oversold:g} (oversold)")
    elif rsi_value > config.rsi_overbought:
        score = clamp(score - config.rsi_weight, 0.0, 1.0)
        reasons.append(f"RSI {rsi_value:.1f} above {config.rsi_overbought:g} (overbought)")

    if macd_value.bullish:
        score = clamp(score + config.macd_weight, 0.0, 1.0)
        reasons.append("MACD line above signal line")
    elif macd_value.bearish:
        score = clamp(score - config.macd_weight, 0.0, 1.0)
        reasons.append("MACD line below signal line")

    if trend.trend == TrendDirection.BULLISH:
        score = clamp(score + config.trend_weight * trend.confidence, 0.0, 1.0)
        reasons.append(f"Bullish trend consensus ({trend.confidence:.0%})")
    elif trend.trend == TrendDirection.BEARISH:
        score = clamp(score - config.trend_weight * trend.confidence, 0.0, 1.0)
        reasons.append(f"Bearish trend consensus ({trend.confidence:.0%})")

    # Offsetting terms can leave float residue around 0.5
    direction = sign(round(score - NEUTRAL_SCORE, 9))
    if adx_value > config.adx_threshold and direction != 0:
        score = clamp(score + direction * config.adx_weight, 0.0, 1.0)
        reasons.append(f"Strong trend confirmed by ADX {adx_value:.1f}")

    return score, reasons


def recommend(score: float, config: SignalConfig | None = None) -> Recommendation:
    """Map a composite score onto buy / hold / sell."""
    config = config or SignalConfig()
    if score >= config.buy_threshold:
        return Recommendation.BUY
    if score <= config.sell_threshold:
        return Recommendation.SELL
    return Recommendation.HOLD


def synthesize_signals(
    indicators: IndicatorSet,
    trend: TrendConsensus,
    config: SignalConfig | None = None,
) -> SignalSummary:
    """
    Build the signal summary for one indicator set.

    Signals are independent flags: an oversold RSI and a bearish MACD
    produce one buy and one sell signal side by side.

    Args:
        indicators: Full indicator set
        trend: Multi-timeframe trend consensus
        config: Weights and thresholds; defaults when omitted

    Returns:
        SignalSummary with score, recommendation, signals and reasons
    """
    config = config or SignalConfig()
    rsi_value = indicators.get("rsi", NEUTRAL_RSI)
    macd_value = indicators.get("macd", _NO_MACD)
    adx_value = indicators.get("adx", NEUTRAL_ADX).adx

    score, reasons = composite_score(rsi_value, macd_value, trend, config, adx_value)

    signals = []
    if rsi_value < config.rsi_oversold:
        signals.append(TradingSignal(
            kind="rsi_oversold",
            direction=SignalDirection.BUY,
            strength=config.rsi_signal_strength,
            reason=f"RSI at {rsi_value:.1f}",
        ))
    if macd_value.bullish:
        signals.append(TradingSignal(
            kind="macd_bullish_crossover",
            direction=SignalDirection.BUY,
            strength=config.macd_signal_strength,
            reason=f"MACD histogram {macd_value.histogram:+.4f}",
        ))
    if rsi_value > config.rsi_overbought:
        signals.append(TradingSignal(
            kind="rsi_overbought",
            direction=SignalDirection.SELL,
            strength=config.rsi_signal_strength,
            reason=f"RSI at {rsi_value:.1f}",
        ))
    if macd_value.bearish:
        signals.append(TradingSignal(
            kind="macd_bearish_crossover",
            direction=SignalDirection.SELL,
            strength=config.macd_signal_strength,
            reason=f"MACD histogram {macd_value.histogram:+.4f}",
        ))

    recommendation = recommend(score, config)
    logger.debug(
        f"Composite score {score:.3f} -> {recommendation.value} with {len(signals)} signal(s)"
    )

    return SignalSummary(
        score=score,
        recommendation=recommendation,
        signals=signals,
        reasons=reasons,
    )
