"""
Domain models - result data structures with validation.

Scored results (levels, votes, signals, alerts) are frozen pydantic models
so every strength and confidence is checked against [0, 1] at creation.
Aggregates that carry indicator tuples are plain dataclasses; JSON output
for them lives in presentation.json_api.
"""

from dataclasses import dataclass, field
from typing import Annotated

from pydantic import BaseModel, Field, field_validator
from pydantic.functional_validators import AfterValidator

from .enums import (
    LevelKind,
    LevelOrigin,
    Recommendation,
    Severity,
    SignalDirection,
    TrendDirection,
    VolumeTrend,
)
from .indicators.indicator_set import IndicatorSet
from .indicators.pivots import FibonacciLevels, PivotLevels
from .primitives import PriceBar, PriceSeries


# ============================================================================
# Custom validators
# ============================================================================

def _validate_score(v: float) -> float:
    """Validate score is between 0 and 1."""
    if not 0.0 <= v <= 1.0:
        raise ValueError("score must be between 0 and 1")
    return round(v, 4)


# Type aliases with validation
Score = Annotated[float, AfterValidator(_validate_score)]


# ============================================================================
# Levels
# ============================================================================

class SupportResistanceLevel(BaseModel):
    """A price level expected to act as support or resistance."""
    model_config = {"frozen": True, "extra": "forbid"}

    price: float = Field(description="Level price")
    strength: Score = Field(description="Reliability of the level (0-1)")
    kind: LevelKind
    origin: LevelOrigin
    label: str = Field(default="", max_length=40, description="e.g. 'R1', 'fib_618', 'cluster'")

    def distance(self, price: float) -> float:
        """Relative distance from `price` to this level."""
        if self.price == 0:
            return abs(price)
        return abs(self.price - price) / abs(self.price)


@dataclass(frozen=True)
class LevelAnalysis:
    """Support/resistance output of the level detector."""
    support: list[SupportResistanceLevel]
    resistance: list[SupportResistanceLevel]
    pivot: PivotLevels
    fibonacci: FibonacciLevels

    def nearest_resistance(self, price: float) -> SupportResistanceLevel | None:
        """Resistance level with the smallest absolute distance to `price`."""
        if not self.resistance:
            return None
        return min(self.resistance, key=lambda lvl: (abs(lvl.price - price), -lvl.strength))

    def nearest_support(self, price: float) -> SupportResistanceLevel | None:
        if not self.support:
            return None
        return min(self.support, key=lambda lvl: (abs(lvl.price - price), -lvl.strength))


# ============================================================================
# Trend
# ============================================================================

class TimeframeVote(BaseModel):
    """One timeframe's trend classification."""
    model_config = {"frozen": True, "extra": "forbid"}

    timeframe: str = Field(min_length=1, max_length=10)
    trend: TrendDirection
    strength: Score = Field(description="|agreement score| / 3")


class TimeframeAnalysis(BaseModel):
    """Reduced indicator subset and resulting vote for one timeframe."""
    model_config = {"frozen": True, "extra": "forbid"}

    timeframe: str = Field(min_length=1, max_length=10)
    trend: TrendDirection
    strength: Score
    close: float
    sma_short: float
    sma_long: float
    rsi: float = Field(ge=0.0, le=100.0)
    bar_count: int = Field(ge=1)

    @property
    def vote(self) -> TimeframeVote:
        return TimeframeVote(timeframe=self.timeframe, trend=self.trend, strength=self.strength)


class TrendConsensus(BaseModel):
    """Majority vote across timeframes."""
    model_config = {"frozen": True, "extra": "forbid"}

    trend: TrendDirection = TrendDirection.NEUTRAL
    confidence: Score = 0.0
    per_timeframe: dict[str, TimeframeVote] = Field(default_factory=dict)
    details: dict[str, TimeframeAnalysis] = Field(
        default_factory=dict, description="Indicator subset behind each timeframe's vote"
    )
    has_divergence: bool = False


# ============================================================================
# Volume
# ============================================================================

class VolumeAnalysis(BaseModel):
    """Latest volume compared with its moving average."""
    model_config = {"frozen": True, "extra": "forbid"}

    trend: VolumeTrend = VolumeTrend.NEUTRAL
    strength: Score = 0.0
    average_volume: float = Field(default=0.0, ge=0.0)
    ratio: float = Field(default=1.0, ge=0.0, description="Latest volume / average volume")


# ============================================================================
# Signals and alerts
# ============================================================================

class TradingSignal(BaseModel):
    """A buy or sell flag raised by one indicator condition."""
    model_config = {"frozen": True, "extra": "forbid"}

    kind: str = Field(min_length=1, max_length=50)
    direction: SignalDirection
    strength: Score
    reason: str = Field(default="", max_length=200)


class SignalSummary(BaseModel):
    """Composite technical score with the signals behind it."""
    model_config = {"frozen": True, "extra": "forbid"}

    score: Score = 0.5
    recommendation: Recommendation = Recommendation.HOLD
    signals: list[TradingSignal] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)

    @property
    def buy_signals(self) -> list[TradingSignal]:
        return [s for s in self.signals if s.direction == SignalDirection.BUY]

    @property
    def sell_signals(self) -> list[TradingSignal]:
        return [s for s in self.signals if s.direction == SignalDirection.SELL]


class Alert(BaseModel):
    """A threshold crossing worth a caller's attention."""
    model_config = {"frozen": True, "extra": "forbid"}

    kind: str = Field(min_length=1, max_length=50)
    severity: Severity
    message: str = Field(min_length=1, max_length=300)
    suggested_action: str = Field(min_length=1, max_length=50)
    confidence: Score


class PatternDetection(BaseModel):
    """Chart pattern reported by an external detector."""
    model_config = {"frozen": True, "extra": "forbid"}

    pattern: str = Field(min_length=1, max_length=50)
    confidence: Score
    direction: TrendDirection
    price_target: float | None = Field(default=None, gt=0)

    @field_validator("pattern")
    @classmethod
    def _normalize_pattern(cls, v: str) -> str:
        return v.strip().lower().replace(" ", "_")


# ============================================================================
# Report
# ============================================================================

@dataclass(frozen=True)
class PriceSummary:
    """Latest bar and range statistics of the analyzed series."""
    last: PriceBar
    period_high: float
    period_low: float
    change_percent: float
    bar_count: int

    @classmethod
    def from_series(cls, series: PriceSeries) -> "PriceSummary":
        first_close = series.bars[0].close
        last = series.last
        if first_close == 0:
            change_percent = 0.0
        else:
            change_percent = round((last.close - first_close) / abs(first_close) * 100, 4)
        return cls(
            last=last,
            period_high=max(series.highs),
            period_low=min(series.lows),
            change_percent=change_percent,
            bar_count=len(series),
        )


@dataclass(frozen=True)
class ReportMetadata:
    """Run statistics; duration is excluded from equality."""
    data_quality: float
    bar_count: int
    gap_count: int
    degraded_indicators: tuple[str, ...] = ()
    timeframes: tuple[str, ...] = ()
    duration_ms: float = field(default=0.0, compare=False)


@dataclass(frozen=True)
class AnalysisReport:
    """Everything produced by one analyze call for one symbol."""
    symbol: str
    timeframe: str
    summary: PriceSummary
    indicators: IndicatorSet
    levels: LevelAnalysis
    trend: TrendConsensus
    signals: SignalSummary
    volume: VolumeAnalysis
    alerts: list[Alert]
    metadata: ReportMetadata

    @property
    def has_alerts(self) -> bool:
        return bool(self.alerts)
