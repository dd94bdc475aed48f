"""
JSON API response types.

Structured responses for web API consumption.
Can be used with FastAPI, Flask, or any web framework.

Output is deterministic: keys are sorted and run timing is left out
unless explicitly requested, so identical inputs give identical JSON.
"""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from domain import (
    Alert,
    AnalysisReport,
    IndicatorCategory,
    PriceBar,
    SignalSummary,
    SupportResistanceLevel,
    TrendConsensus,
    VolumeAnalysis,
)
from domain.indicators import IndicatorValue


# ============================================================================
# Response Models
# ============================================================================

class BarResponse(BaseModel):
    """API response for one price bar."""
    high: float
    low: float
    close: float
    volume: float
    open: float | None = None
    timestamp: datetime | None = None


class PriceSummaryResponse(BaseModel):
    """API response for the price summary."""
    last: BarResponse
    period_high: float
    period_low: float
    change_percent: float
    bar_count: int


class IndicatorSetResponse(BaseModel):
    """Indicator values by category; compound values become objects."""
    trend: dict[str, float | dict[str, float]] = Field(default_factory=dict)
    momentum: dict[str, float | dict[str, float]] = Field(default_factory=dict)
    volatility: dict[str, float | dict[str, float]] = Field(default_factory=dict)
    volume: dict[str, float | dict[str, float]] = Field(default_factory=dict)
    strength: dict[str, float | dict[str, float]] = Field(default_factory=dict)
    advanced: dict[str, float | dict[str, float]] = Field(default_factory=dict)
    degraded: list[str] = Field(default_factory=list)


class LevelsResponse(BaseModel):
    """API response for support/resistance detection."""
    support: list[SupportResistanceLevel]
    resistance: list[SupportResistanceLevel]
    pivot: dict[str, float]
    fibonacci: dict[str, float]


class MetadataResponse(BaseModel):
    """Run statistics."""
    data_quality: float
    bar_count: int
    gap_count: int
    degraded_indicators: list[str]
    timeframes: list[str]
    duration_ms: float | None = None


class ReportResponse(BaseModel):
    """Full analysis report API response."""
    symbol: str
    timeframe: str
    summary: PriceSummaryResponse
    indicators: IndicatorSetResponse
    levels: LevelsResponse
    trend: TrendConsensus
    signals: SignalSummary
    volume: VolumeAnalysis
    alerts: list[Alert]
    metadata: MetadataResponse


# ============================================================================
# Conversion Functions
# ============================================================================

def _bar_to_response(bar: PriceBar) -> BarResponse:
    return BarResponse(
        high=bar.high,
        low=bar.low,
        close=bar.close,
        volume=bar.volume,
        open=bar.open,
        timestamp=bar.timestamp,
    )


def _indicator_value(value: IndicatorValue) -> float | dict[str, float]:
    """Named tuples become {field: value}; scalars stay floats."""
    if isinstance(value, tuple):
        return {k: float(v) for k, v in value._asdict().items()}
    return float(value)


def to_api_response(report: AnalysisReport, include_timing: bool = True) -> ReportResponse:
    """
    Convert an AnalysisReport to an API response.

    Args:
        report: Report from TechnicalAnalysisPipeline.analyze
        include_timing: Keep duration_ms in the metadata

    Returns:
        Structured API response
    """
    indicators = {
        category.value: {
            name: _indicator_value(value)
            for name, value in report.indicators.category(category).items()
        }
        for category in IndicatorCategory
    }
    summary = report.summary
    meta = report.metadata

    return ReportResponse(
        symbol=report.symbol,
        timeframe=report.timeframe,
        summary=PriceSummaryResponse(
            last=_bar_to_response(summary.last),
            period_high=summary.period_high,
            period_low=summary.period_low,
            change_percent=summary.change_percent,
            bar_count=summary.bar_count,
        ),
        indicators=IndicatorSetResponse(**indicators, degraded=list(report.indicators.degraded)),
        levels=LevelsResponse(
            support=report.levels.support,
            resistance=report.levels.resistance,
            pivot=report.levels.pivot._asdict(),
            fibonacci=report.levels.fibonacci._asdict(),
        ),
        trend=report.trend,
        signals=report.signals,
        volume=report.volume,
        alerts=report.alerts,
        metadata=MetadataResponse(
            data_quality=meta.data_quality,
            bar_count=meta.bar_count,
            gap_count=meta.gap_count,
            degraded_indicators=list(meta.degraded_indicators),
            timeframes=list(meta.timeframes),
            duration_ms=meta.duration_ms if include_timing else None,
        ),
    )


def to_dict(report: AnalysisReport, include_timing: bool = False) -> dict[str, Any]:
    """
    Convert an AnalysisReport to a JSON-serializable dict.

    Timing is excluded by default so the result only depends on inputs.
    """
    response = to_api_response(report, include_timing=include_timing)
    data = response.model_dump(mode="json")
    if not include_timing:
        data["metadata"].pop("duration_ms", None)
    return data


def to_json(report: AnalysisReport, include_timing: bool = False, indent: int | None = 2) -> str:
    """
    Serialize an AnalysisReport to a JSON string with sorted keys.

    Example:
        >>> text = to_json(report)  # doctest: +SKIP
        >>> json.loads(text)["signals"]["recommendation"]  # doctest: +SKIP
        'hold'
    """
    return json.dumps(to_dict(report, include_timing=include_timing), indent=indent, sort_keys=True)
