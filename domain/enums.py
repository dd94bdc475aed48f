from enum import Enum


class TrendDirection(str, Enum):
    """Trend classification for a timeframe or consensus."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class SignalDirection(str, Enum):
    """Direction of a trading signal."""
    BUY = "buy"
    SELL = "sell"


class Recommendation(str, Enum):
    """Overall recommendation derived from the composite score."""
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class Severity(str, Enum):
    """Alert severity, lowest to highest."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class LevelKind(str, Enum):
    """Whether a price level acts as support or resistance."""
    SUPPORT = "support"
    RESISTANCE = "resistance"


class LevelOrigin(str, Enum):
    """Method that produced a support/resistance level."""
    PIVOT = "pivot"
    FIBONACCI = "fibonacci"
    VOLUME = "volume"


class IndicatorCategory(str, Enum):
    """Grouping of indicators inside an IndicatorSet."""
    TREND = "trend"
    MOMENTUM = "momentum"
    VOLATILITY = "volatility"
    VOLUME = "volume"
    STRENGTH = "strength"
    ADVANCED = "advanced"


class VolumeTrend(str, Enum):
    """Latest volume relative to its moving average."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    NEUTRAL = "neutral"
