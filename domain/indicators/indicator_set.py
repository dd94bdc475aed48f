"""Full indicator set computed for one price series."""

import logging
from dataclasses import dataclass, field
from typing import Callable, NamedTuple

from config.schema import IndicatorPeriodsConfig
from domain.enums import IndicatorCategory
from domain.indicators.adx import adx
from domain.indicators.atr import atr
from domain.indicators.base import IndicatorValue
from domain.indicators.bollinger import bollinger_bands
from domain.indicators.ichimoku import SENKOU_B_PERIOD, ichimoku
from domain.indicators.keltner import keltner_channels
from domain.indicators.macd import macd
from domain.indicators.momentum import cci, williams_r
from domain.indicators.moving_averages import ema, sma
from domain.indicators.obv import obv
from domain.indicators.rsi import rsi
from domain.indicators.stochastic import stochastic
from domain.indicators.volume import cmf, mfi
from domain.indicators.vwap import vwap
from domain.primitives import PriceSeries

logger = logging.getLogger(__name__)


@dataclass
class IndicatorSet:
    """Indicator values grouped by category.

    Example:
        >>> s = IndicatorSet(trend={"sma_20": 10.0})
        >>> "sma_20" in s, s.get("sma_20")
        (True, 10.0)
    """
    trend: dict[str, IndicatorValue] = field(default_factory=dict)
    momentum: dict[str, IndicatorValue] = field(default_factory=dict)
    volatility: dict[str, IndicatorValue] = field(default_factory=dict)
    volume: dict[str, IndicatorValue] = field(default_factory=dict)
    strength: dict[str, IndicatorValue] = field(default_factory=dict)
    advanced: dict[str, IndicatorValue] = field(default_factory=dict)
    degraded: list[str] = field(default_factory=list)

    def category(self, category: IndicatorCategory) -> dict[str, IndicatorValue]:
        return getattr(self, category.value)

    def get(self, name: str, default: IndicatorValue | None = None) -> IndicatorValue | None:
        """Look up an indicator by name across all categories."""
        for category in IndicatorCategory:
            values = self.category(category)
            if name in values:
                return values[name]
        return default

    def flatten(self) -> dict[str, IndicatorValue]:
        """Single name -> value mapping, in category order."""
        merged: dict[str, IndicatorValue] = {}
        for category in IndicatorCategory:
            merged.update(self.category(category))
        return merged

    def __contains__(self, name: object) -> bool:
        return any(name in self.category(c) for c in IndicatorCategory)

    def __len__(self) -> int:
        return sum(len(self.category(c)) for c in IndicatorCategory)


class _IndicatorEntry(NamedTuple):
    category: IndicatorCategory
    name: str
    min_bars: int
    compute: Callable[[PriceSeries], IndicatorValue]


def _build_registry(p: IndicatorPeriodsConfig) -> list[_IndicatorEntry]:
    """Indicator table: category, name, bars required, calculator."""
    trend, momentum = IndicatorCategory.TREND, IndicatorCategory.MOMENTUM
    volatility, volume = IndicatorCategory.VOLATILITY, IndicatorCategory.VOLUME
    strength, advanced = IndicatorCategory.STRENGTH, IndicatorCategory.ADVANCED

    return [
        _IndicatorEntry(trend, f"sma_{p.sma_short}", p.sma_short,
                       lambda s: sma(s.closes, p.sma_short)),
        _IndicatorEntry(trend, f"sma_{p.sma_long}", p.sma_long,
                       lambda s: sma(s.closes, p.sma_long)),
        _IndicatorEntry(trend, f"ema_{p.ema_fast}", p.ema_fast,
                       lambda s: ema(s.closes, p.ema_fast)),
        _IndicatorEntry(trend, f"ema_{p.ema_slow}", p.ema_slow,
                       lambda s: ema(s.closes, p.ema_slow)),
        _IndicatorEntry(trend, "macd", p.ema_slow,
                       lambda s: macd(s.closes, p.ema_fast, p.ema_slow, p.macd_signal)),
        _IndicatorEntry(momentum, "rsi", p.rsi + 1,
                       lambda s: rsi(s.closes, p.rsi)),
        _IndicatorEntry(momentum, "stochastic", p.stochastic_k,
                       lambda s: stochastic(s.highs, s.lows, s.closes, p.stochastic_k, p.stochastic_d)),
        _IndicatorEntry(momentum, "williams_r", p.williams_r,
                       lambda s: williams_r(s.highs, s.lows, s.closes, p.williams_r)),
        _IndicatorEntry(momentum, "cci", p.cci,
                       lambda s: cci(s.highs, s.lows, s.closes, p.cci)),
        _IndicatorEntry(volatility, "bollinger", p.bollinger,
                       lambda s: bollinger_bands(s.closes, p.bollinger, p.bollinger_k)),
        _IndicatorEntry(volatility, "atr", p.atr + 1,
                       lambda s: atr(s.highs, s.lows, s.closes, p.atr)),
        _IndicatorEntry(volatility, "keltner", p.keltner + 1,
                       lambda s: keltner_channels(s.highs, s.lows, s.closes, p.keltner, p.keltner_multiplier)),
        _IndicatorEntry(volume, "obv", 2,
                       lambda s: obv(s.closes, s.volumes)),
        _IndicatorEntry(volume, "vwap", 1,
                       lambda s: vwap(s.highs, s.lows, s.closes, s.volumes)),
        _IndicatorEntry(volume, "mfi", p.mfi + 1,
                       lambda s: mfi(s.highs, s.lows, s.closes, s.volumes, p.mfi)),
        _IndicatorEntry(volume, "cmf", p.cmf,
                       lambda s: cmf(s.highs, s.lows, s.closes, s.volumes, p.cmf)),
        _IndicatorEntry(strength, "adx", p.adx + 1,
                       lambda s: adx(s.highs, s.lows, s.closes, p.adx)),
        _IndicatorEntry(advanced, "ichimoku", SENKOU_B_PERIOD,
                       lambda s: ichimoku(s.highs, s.lows, s.closes)),
    ]


def compute_indicator_set(
    series: PriceSeries,
    periods: IndicatorPeriodsConfig | None = None
) -> IndicatorSet:
    """Compute every indicator for `series`.

    Args:
        series: Validated price series (length >= 1)
        periods: Indicator periods; library defaults when omitted

    Returns:
        IndicatorSet with one entry per indicator plus `dmi`, and the
        names of indicators computed from too little data in `degraded`

    Notes:
        - Never raises for short series; degenerate defaults are used
        - `vwap` is degraded when the series carries no volume
    """
    if periods is None:
        periods = IndicatorPeriodsConfig()

    result = IndicatorSet()
    bar_count = len(series)

    for entry in _build_registry(periods):
        value = entry.compute(series)
        result.category(entry.category)[entry.name] = value
        if bar_count < entry.min_bars:
            result.degraded.append(entry.name)

    if sum(series.volumes) == 0:
        result.degraded.append("vwap")

    adx_value = result.strength["adx"]
    result.strength["dmi"] = adx_value.directional
    if "adx" in result.degraded:
        result.degraded.append("dmi")

    if result.degraded:
        logger.debug(
            f"{series.symbol}/{series.timeframe}: {len(result.degraded)} degraded indicator(s) "
            f"from {bar_count} bar(s): {', '.join(result.degraded)}"
        )

    return result
