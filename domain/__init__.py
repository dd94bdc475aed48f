from .primitives import PriceBar, PriceSeries
from .enums import (
    IndicatorCategory,
    LevelKind,
    LevelOrigin,
    Recommendation,
    Severity,
    SignalDirection,
    TrendDirection,
    VolumeTrend,
)
from .indicators import IndicatorSet, compute_indicator_set
from .models import (
    Alert,
    AnalysisReport,
    LevelAnalysis,
    PatternDetection,
    PriceSummary,
    ReportMetadata,
    SignalSummary,
    SupportResistanceLevel,
    TimeframeAnalysis,
    TimeframeVote,
    TradingSignal,
    TrendConsensus,
    VolumeAnalysis,
)
from .levels import detect_levels, find_extrema_levels
from .trend import aggregate_trend, analyze_timeframe
from .signals import composite_score, synthesize_signals
from .volume_analysis import analyze_volume
from .alerts import detect_macd_divergence, generate_alerts

__all__ = [
    # Primitives
    "PriceBar",
    "PriceSeries",
    # Enums
    "IndicatorCategory",
    "LevelKind",
    "LevelOrigin",
    "Recommendation",
    "Severity",
    "SignalDirection",
    "TrendDirection",
    "VolumeTrend",
    # Indicators
    "IndicatorSet",
    "compute_indicator_set",
    # Result models
    "Alert",
    "AnalysisReport",
    "LevelAnalysis",
    "PatternDetection",
    "PriceSummary",
    "ReportMetadata",
    "SignalSummary",
    "SupportResistanceLevel",
    "TimeframeAnalysis",
    "TimeframeVote",
    "TradingSignal",
    "TrendConsensus",
    "VolumeAnalysis",
    # Analysis stages
    "detect_levels",
    "find_extrema_levels",
    "analyze_timeframe",
    "aggregate_trend",
    "composite_score",
    "synthesize_signals",
    "analyze_volume",
    "detect_macd_divergence",
    "generate_alerts",
]
