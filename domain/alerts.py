"""
Rule-based alerts.

Rules run in a fixed order and each produces at most one alert, so the
output order is stable. Severity and confidence are for the caller to
sort on.
"""

import logging
from typing import Sequence

from config.schema import AlertThresholdsConfig, IndicatorPeriodsConfig

from .enums import Severity
from .indicators.base import MacdValue
from .indicators.indicator_set import IndicatorSet
from .indicators.macd import macd_history
from .indicators.rsi import NEUTRAL_RSI
from .indicators.utils import sign
from .models import Alert, LevelAnalysis, PatternDetection
from .primitives import PriceSeries

logger = logging.getLogger(__name__)


def _rsi_alert(rsi_value: float, config: AlertThresholdsConfig) -> Alert | None:
    if rsi_value > config.rsi_overbought:
        return Alert(
            kind="rsi_overbought",
            severity=Severity.HIGH,
            message=f"RSI at {rsi_value:.1f} is above {config.rsi_overbought:g}",
            suggested_action="consider_sell",
            confidence=config.rsi_confidence,
        )
    if rsi_value < config.rsi_oversold:
        return Alert(
            kind="rsi_oversold",
            severity=Severity.HIGH,
            message=f"RSI at {rsi_value:.1f} is below {config.rsi_oversold:g}",
            suggested_action="consider_buy",
            confidence=config.rsi_confidence,
        )
    return None


def _resistance_alert(close: float, levels: LevelAnalysis, config: AlertThresholdsConfig) -> Alert | None:
    level = levels.nearest_resistance(close)
    if level is None or level.distance(close) > config.resistance_proximity:
        return None
    return Alert(
        kind="resistance_test",
        severity=Severity.MEDIUM,
        message=(
            f"Price {close:.2f} is {level.distance(close):.2%} below "
            f"{level.origin.value} resistance {level.price:.2f}"
        ),
        suggested_action="watch_breakout",
        confidence=level.strength,
    )


def _pattern_alert(patterns: Sequence[PatternDetection], config: AlertThresholdsConfig) -> Alert | None:
    qualifying = [p for p in patterns if p.confidence > config.pattern_confidence]
    if not qualifying:
        return None
    # max() keeps the first of equally confident patterns
    best = max(qualifying, key=lambda p: p.confidence)
    target = f", target {best.price_target:.2f}" if best.price_target else ""
    return Alert(
        kind="pattern_completed",
        severity=Severity.CRITICAL,
        message=f"{best.direction.value.capitalize()} {best.pattern} completed ({best.confidence:.0%}{target})",
        suggested_action=f"confirm_{best.direction.value}",
        confidence=best.confidence,
    )


def detect_macd_divergence(
    closes: list[float],
    macd_value: MacdValue,
    lookback: int = 10,
    fast: int = 12,
    slow: int = 26,
) -> int:
    """
    Compare recent price direction with the MACD histogram sign.

    Args:
        closes: Closing prices
        macd_value: Latest MACD reading for the same closes
        lookback: Bars defining the recent price direction
        fast: MACD fast period
        slow: MACD slow period

    Returns:
        -1 for bearish divergence (price up, histogram negative),
        +1 for bullish divergence (price down, histogram positive),
        0 when they agree, either is flat, or there is too little data
    """
    if lookback < 2 or len(closes) < lookback:
        return 0
    if len(macd_history(closes, fast, slow)) < lookback:
        return 0

    price_direction = sign(closes[-1] - closes[-lookback])
    histogram_direction = sign(macd_value.histogram)
    if price_direction == 0 or histogram_direction == 0:
        return 0
    if price_direction == histogram_direction:
        return 0
    return histogram_direction


def generate_alerts(
    series: PriceSeries,
    indicators: IndicatorSet,
    levels: LevelAnalysis,
    patterns: Sequence[PatternDetection] | None = None,
    config: AlertThresholdsConfig | None = None,
    periods: IndicatorPeriodsConfig | None = None,
) -> list[Alert]:
    """
    Evaluate every alert rule in order.

    Rules:
        1. RSI above overbought / below oversold threshold
        2. Close within `resistance_proximity` of the nearest resistance
        3. External pattern with confidence above `pattern_confidence`
           (skipped when no patterns are supplied)
        4. MACD histogram disagreeing with price direction

    Returns:
        Alerts in rule order; empty when nothing fires
    """
    config = config or AlertThresholdsConfig()
    periods = periods or IndicatorPeriodsConfig()
    close = series.last.close
    alerts: list[Alert] = []

    rsi_alert = _rsi_alert(indicators.get("rsi", NEUTRAL_RSI), config)
    if rsi_alert:
        alerts.append(rsi_alert)

    resistance_alert = _resistance_alert(close, levels, config)
    if resistance_alert:
        alerts.append(resistance_alert)

    if patterns:
        pattern_alert = _pattern_alert(patterns, config)
        if pattern_alert:
            alerts.append(pattern_alert)

    macd_value = indicators.get("macd", MacdValue(0.0, 0.0, 0.0))
    divergence = detect_macd_divergence(
        series.closes, macd_value, config.divergence_lookback, periods.ema_fast, periods.ema_slow
    )
    if divergence:
        flavour = "Bullish" if divergence > 0 else "Bearish"
        alerts.append(Alert(
            kind="macd_divergence",
            severity=Severity.MEDIUM,
            message=(
                f"{flavour} divergence: price {'fell' if divergence > 0 else 'rose'} over "
                f"{config.divergence_lookback} bars while MACD histogram is {macd_value.histogram:+.4f}"
            ),
            suggested_action="review_position",
            confidence=config.divergence_confidence,
        ))

    if alerts:
        logger.debug(f"{series.symbol}: {', '.join(a.kind for a in alerts)}")
    return alerts
