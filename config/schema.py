"""
Configuration schema with validation.

All configuration is validated at load time using Pydantic.
"""

from pydantic import BaseModel, Field, field_validator

SUPPORTED_TIMEFRAMES = ("1m", "5m", "15m", "1h", "1d", "1wk")


class IndicatorPeriodsConfig(BaseModel):
    """Lookback periods for the indicator library."""

    sma_short: int = Field(default=20, ge=2, le=500)
    sma_long: int = Field(default=50, ge=2, le=500)
    ema_fast: int = Field(default=12, ge=2, le=200)
    ema_slow: int = Field(default=26, ge=2, le=200)
    macd_signal: int = Field(default=9, ge=2, le=100)
    rsi: int = Field(default=14, ge=2, le=100)
    stochastic_k: int = Field(default=14, ge=2, le=100)
    stochastic_d: int = Field(default=3, ge=1, le=50)
    williams_r: int = Field(default=14, ge=2, le=100)
    cci: int = Field(default=20, ge=2, le=100)
    bollinger: int = Field(default=20, ge=2, le=200)
    bollinger_k: float = Field(default=2.0, gt=0.0, le=5.0)
    atr: int = Field(default=14, ge=1, le=100)
    keltner: int = Field(default=20, ge=2, le=200)
    keltner_multiplier: float = Field(default=2.0, gt=0.0, le=5.0)
    mfi: int = Field(default=14, ge=2, le=100)
    cmf: int = Field(default=21, ge=2, le=100)
    adx: int = Field(default=14, ge=2, le=100)

    @field_validator("sma_long")
    @classmethod
    def sma_long_gt_short(cls, v: int, info) -> int:
        sma_short = info.data.get("sma_short", 20)
        if v <= sma_short:
            raise ValueError("sma_long must be greater than sma_short")
        return v

    @field_validator("ema_slow")
    @classmethod
    def ema_slow_gt_fast(cls, v: int, info) -> int:
        ema_fast = info.data.get("ema_fast", 12)
        if v <= ema_fast:
            raise ValueError("ema_slow must be greater than ema_fast")
        return v


class LevelsConfig(BaseModel):
    """Support/resistance detection settings."""

    fibonacci_lookback: int = Field(default=50, ge=2, le=1000)
    extrema_order: int = Field(default=3, ge=1, le=20, description="Neighbours on each side of a swing point")
    cluster_tolerance: float = Field(default=0.015, gt=0.0, le=0.2, description="Relative distance merging two extrema")
    max_levels: int = Field(default=5, ge=1, le=50, description="Cap per kind (support/resistance)")


class TrendConfig(BaseModel):
    """Multi-timeframe trend settings."""

    timeframes: list[str] = Field(default_factory=lambda: ["1d"])
    short_period: int = Field(default=20, ge=2, le=500)
    long_period: int = Field(default=50, ge=2, le=500)
    rsi_period: int = Field(default=14, ge=2, le=100)
    parallel: bool = Field(default=True, description="Analyze timeframes on a thread pool")
    max_workers: int = Field(default=4, ge=1, le=32)

    @field_validator("timeframes")
    @classmethod
    def validate_timeframes(cls, v: list[str]) -> list[str]:
        """Normalize labels and reject unknown or duplicate timeframes."""
        validated = []
        for label in v:
            label = label.strip().lower()
            if label not in SUPPORTED_TIMEFRAMES:
                raise ValueError(f"Unsupported timeframe: {label}")
            if label not in validated:
                validated.append(label)
        if not validated:
            raise ValueError("At least one timeframe is required")
        return validated

    @field_validator("long_period")
    @classmethod
    def long_gt_short(cls, v: int, info) -> int:
        short_period = info.data.get("short_period", 20)
        if v <= short_period:
            raise ValueError("long_period must be greater than short_period")
        return v


class SignalConfig(BaseModel):
    """Composite score weights and signal thresholds."""

    rsi_oversold: float = Field(default=30.0, ge=0.0, le=50.0)
    rsi_overbought: float = Field(default=70.0, ge=50.0, le=100.0)
    rsi_weight: float = Field(default=0.3, ge=0.0, le=1.0)
    macd_weight: float = Field(default=0.2, ge=0.0, le=1.0)
    trend_weight: float = Field(default=0.2, ge=0.0, le=1.0)
    rsi_signal_strength: float = Field(default=0.7, ge=0.0, le=1.0)
    macd_signal_strength: float = Field(default=0.8, ge=0.0, le=1.0)
    adx_threshold: float = Field(default=25.0, ge=0.0, le=100.0, description="ADX above this confirms the trend")
    adx_weight: float = Field(default=0.1, ge=0.0, le=1.0, description="Push away from neutral on ADX confirmation")
    buy_threshold: float = Field(default=0.65, ge=0.5, le=1.0, description="Score at or above = buy")
    sell_threshold: float = Field(default=0.35, ge=0.0, le=0.5, description="Score at or below = sell")


class VolumeConfig(BaseModel):
    """Volume trend thresholds (latest volume vs its SMA)."""

    period: int = Field(default=20, ge=2, le=500)
    increasing_ratio: float = Field(default=1.5, gt=1.0, le=10.0)
    decreasing_ratio: float = Field(default=0.5, gt=0.0, lt=1.0)


class AlertThresholdsConfig(BaseModel):
    """Alert rule thresholds."""

    rsi_overbought: float = Field(default=80.0, ge=50.0, le=100.0)
    rsi_oversold: float = Field(default=20.0, ge=0.0, le=50.0)
    rsi_confidence: float = Field(default=0.75, ge=0.0, le=1.0)
    resistance_proximity: float = Field(default=0.02, gt=0.0, le=0.2, description="Relative distance to resistance")
    pattern_confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    divergence_lookback: int = Field(default=10, ge=2, le=200)
    divergence_confidence: float = Field(default=0.65, ge=0.0, le=1.0)


class OrchestratorConfig(BaseModel):
    """Analysis pipeline execution settings."""

    timeout_seconds: float | None = Field(default=None, gt=0.0, le=600.0, description="None = no deadline")
    full_history_bars: int = Field(default=52, ge=1, le=5000, description="Bars needed for a full-quality report")
    cache_reports: bool = Field(default=True)
    max_cached_reports: int = Field(default=1000, ge=1, le=100_000, description="Symbols kept in the last-report cache")
    cache_ttl_seconds: float | None = Field(default=3600.0, gt=0.0, description="None = cached reports never expire")


class ProviderConfig(BaseModel):
    """Price data provider settings."""

    requests_per_minute: int = Field(default=60, ge=1, le=2000)
    auto_adjust: bool = Field(default=True, description="Split/dividend adjusted prices")


class EngineConfig(BaseModel):
    """
    Root configuration model.

    All settings are validated on load.
    """

    indicators: IndicatorPeriodsConfig = Field(default_factory=IndicatorPeriodsConfig)
    levels: LevelsConfig = Field(default_factory=LevelsConfig)
    trend: TrendConfig = Field(default_factory=TrendConfig)
    signals: SignalConfig = Field(default_factory=SignalConfig)
    volume: VolumeConfig = Field(default_factory=VolumeConfig)
    alerts: AlertThresholdsConfig = Field(default_factory=AlertThresholdsConfig)
    orchestrator: OrchestratorConfig = Field(default_factory=OrchestratorConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
