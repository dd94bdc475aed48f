"""
Integration tests for the analysis pipeline.

Uses in-memory providers and mocks so no external API is called.
"""

import itertools
import logging
import threading
from unittest.mock import Mock, patch

import pytest

from adapters import StaticPriceProvider
from config import EngineConfig, ProviderConfig
from domain import PatternDetection, PriceBar, PriceSeries, Recommendation, TrendDirection, VolumeTrend
from domain.indicators import obv_series
from orchestration import TechnicalAnalysisPipeline, data_quality_score
from ports import (
    AnalysisCancelledError,
    AnalysisTimeoutError,
    ErrorCode,
    InvalidInputError,
    UpstreamUnavailableError,
)
from presentation import to_json


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def pipeline(engine_config):
    """Pipeline with default config and no collaborators."""
    return TechnicalAnalysisPipeline(config=engine_config)


@pytest.fixture
def provider(rising_series, falling_series):
    """Static provider serving UP on 1d and 1wk."""
    weekly = PriceSeries("UP", "1wk", falling_series.bars)
    return StaticPriceProvider([rising_series, weekly], config=ProviderConfig())


# ============================================================================
# Data quality
# ============================================================================

class TestDataQuality:
    """Tests for the data quality score."""

    def test_full_history_no_gaps(self):
        assert data_quality_score(60, 0, 0, 19) == 1.0

    def test_short_history_scales_down(self):
        assert data_quality_score(26, 0, 0, 19) == 0.5

    def test_gaps_reduce_quality(self):
        assert data_quality_score(53, 13, 0, 19) == 0.75

    def test_degraded_indicators_reduce_quality(self):
        assert data_quality_score(52, 0, 19, 19) == 0.5

    def test_single_bar(self):
        assert data_quality_score(1, 0, 0, 19) == round(1 / 52, 4)


# ============================================================================
# analyze()
# ============================================================================

class TestAnalyze:
    """Tests for TechnicalAnalysisPipeline.analyze."""

    def test_report_shape(self, pipeline, rising_series):
        report = pipeline.analyze("UP", rising_series)

        assert report.symbol == "UP"
        assert report.timeframe == "1d"
        assert report.metadata.bar_count == 80
        assert report.metadata.timeframes == ("1d",)
        assert len(report.indicators) == 19
        assert report.indicators.degraded == []
        assert report.metadata.data_quality == 1.0
        assert report.trend.trend == TrendDirection.BULLISH
        assert report.metadata.duration_ms >= 0.0

    def test_identical_input_identical_report(self, pipeline, wavy_series):
        first = pipeline.analyze("WAVE", wavy_series)
        second = pipeline.analyze("WAVE", wavy_series)

        assert first == second
        assert to_json(first) == to_json(second)

    def test_single_bar_degrades_without_raising(self, pipeline, single_bar_series):
        report = pipeline.analyze("TINY", single_bar_series)
        ind = report.indicators

        assert ind.get("rsi") == 50.0
        assert tuple(ind.get("stochastic")) == (50.0, 50.0)
        assert ind.get("williams_r") == -50.0
        assert ind.get("adx").adx == 0.0
        assert "rsi" in ind.degraded
        assert report.metadata.data_quality < 0.1
        assert report.signals.recommendation == Recommendation.HOLD

    def test_linear_thirty_bars(self, pipeline, linear_series):
        report = pipeline.analyze("LIN", linear_series)

        assert report.indicators.get("rsi") == 100.0
        obv_values = obv_series(linear_series.closes, linear_series.volumes)
        assert all(b > a for a, b in zip(obv_values, obv_values[1:]))
        # SMA50 cannot be filled from 30 bars
        assert report.trend.trend == TrendDirection.NEUTRAL
        assert "sma_50" in report.indicators.degraded

    def test_raw_bars_accepted(self, pipeline):
        bars = [{"high": 10.0 + i, "low": 9.0 + i, "close": 9.5 + i, "volume": 100.0} for i in range(5)]
        report = pipeline.analyze("RAW", bars)

        assert report.metadata.bar_count == 5
        assert report.timeframe == "1d"

    def test_invalid_bar_raises(self, pipeline):
        bars = [PriceBar(10.0, 9.0, 9.5, 100.0), {"high": float("nan"), "low": 9.0, "close": 9.5}]
        with pytest.raises(InvalidInputError) as exc_info:
            pipeline.analyze("BAD", bars)
        assert exc_info.value.code == ErrorCode.DATA_INVALID

    @pytest.mark.parametrize("bar,field", [
        ({"high": -1.0, "low": -2.0, "close": -1.5, "volume": 10.0}, "high"),
        ({"high": 10.0, "low": 9.0, "close": -9.5}, "close"),
        ({"high": 10.0, "low": 9.0, "close": 9.5, "open": -9.0}, "open"),
        ({"high": 10.0, "low": 9.0, "close": 9.5, "volume": -1.0}, "volume"),
    ])
    def test_negative_values_raise(self, pipeline, bar, field):
        with pytest.raises(InvalidInputError) as exc_info:
            pipeline.analyze("NEG", [bar])
        assert exc_info.value.field == field
        assert exc_info.value.index == 0

    def test_non_numeric_open_raises(self, pipeline):
        with pytest.raises(InvalidInputError) as exc_info:
            pipeline.analyze("BAD", [{"high": 10.0, "low": 9.0, "close": 9.5, "open": "9.2"}])
        assert exc_info.value.field == "open"

    def test_invalid_bar_position_recorded(self, pipeline):
        bars = [{"high": 10.0, "low": 9.0, "close": 9.5}] * 3 + [{"high": 10.0, "low": 9.0, "close": float("inf")}]
        with pytest.raises(InvalidInputError) as exc_info:
            pipeline.analyze("BAD", bars)
        assert exc_info.value.index == 3
        assert exc_info.value.context["index"] == 3

    def test_missing_bar_field_raises(self, pipeline):
        with pytest.raises(InvalidInputError) as exc_info:
            pipeline.analyze("RAW", [{"high": 10.0, "low": 9.0}])
        assert exc_info.value.field == "close"
        assert "missing" in exc_info.value.reason

    def test_unknown_bar_field_raises(self, pipeline):
        with pytest.raises(InvalidInputError) as exc_info:
            pipeline.analyze("RAW", [{"high": 10.0, "low": 9.0, "close": 9.5, "vwap": 9.6}])
        assert exc_info.value.field == "vwap"

    @pytest.mark.parametrize("bad_bar", [42, ["high", "low", "close"]])
    def test_non_mapping_bar_raises(self, pipeline, bad_bar):
        good = {"high": 10.0, "low": 9.0, "close": 9.5}
        with pytest.raises(InvalidInputError) as exc_info:
            pipeline.analyze("RAW", [good, bad_bar])
        assert exc_info.value.index == 1

    def test_high_below_low_raises(self, pipeline):
        with pytest.raises(InvalidInputError):
            pipeline.analyze("BAD", [{"high": 9.0, "low": 10.0, "close": 9.5}])

    def test_empty_series_raises(self, pipeline):
        with pytest.raises(InvalidInputError):
            pipeline.analyze("EMPTY", [])

    def test_extra_timeframes_vote(self, pipeline, rising_series, falling_series):
        report = pipeline.analyze("UP", rising_series, timeframe_series={"1wk": falling_series})

        assert set(report.trend.per_timeframe) == {"1d", "1wk"}
        assert report.trend.has_divergence is True
        assert report.metadata.timeframes == ("1d", "1wk")

    def test_trend_details_kept(self, pipeline, rising_series, falling_series):
        report = pipeline.analyze("UP", rising_series, timeframe_series={"1wk": falling_series})

        assert set(report.trend.details) == {"1d", "1wk"}
        assert report.trend.details["1wk"].timeframe == "1wk"
        assert report.trend.details["1d"].rsi > report.trend.details["1wk"].rsi

    def test_volume_stage(self, pipeline, make_series):
        series = make_series([100.0] * 30)
        spike = PriceSeries(
            "SPIKE", "1d", series.bars[:-1] + (PriceBar(101.0, 99.0, 100.0, 4000.0),)
        )

        report = pipeline.analyze("SPIKE", spike)

        assert report.volume.trend == VolumeTrend.INCREASING
        assert report.volume.ratio > 1.5

    def test_short_series_volume_neutral(self, pipeline, single_bar_series):
        report = pipeline.analyze("TINY", single_bar_series)
        assert report.volume.trend == VolumeTrend.NEUTRAL
        assert report.volume.strength == 0.0

    def test_per_call_config_overrides(self, pipeline, single_bar_series):
        report = pipeline.analyze(
            "TINY",
            single_bar_series,
            config={"orchestrator": {"full_history_bars": 1}},
        )
        baseline = pipeline.analyze("TINY", single_bar_series)
        assert report.metadata.data_quality > baseline.metadata.data_quality

    def test_explicit_patterns_raise_alert(self, pipeline, rising_series):
        patterns = [PatternDetection(pattern="bull flag", confidence=0.95, direction=TrendDirection.BULLISH)]
        report = pipeline.analyze("UP", rising_series, patterns=patterns)
        assert "pattern_completed" in [a.kind for a in report.alerts]

    def test_pattern_detector_consulted(self, engine_config, rising_series):
        detector = Mock()
        detector.detect.return_value = [
            PatternDetection(pattern="cup", confidence=0.99, direction=TrendDirection.BULLISH)
        ]
        pipeline = TechnicalAnalysisPipeline(config=engine_config, pattern_detector=detector)

        report = pipeline.analyze("UP", rising_series)

        detector.detect.assert_called_once_with(rising_series)
        assert "pattern_completed" in [a.kind for a in report.alerts]

    def test_pattern_detector_failure_skips_rule(self, engine_config, rising_series, caplog):
        detector = Mock()
        detector.detect.side_effect = RuntimeError("model offline")
        pipeline = TechnicalAnalysisPipeline(config=engine_config, pattern_detector=detector)

        with caplog.at_level(logging.WARNING, logger="orchestration.pipeline"):
            report = pipeline.analyze("UP", rising_series)

        assert "pattern_completed" not in [a.kind for a in report.alerts]
        assert "model offline" in caplog.text


# ============================================================================
# Timeout and cancellation
# ============================================================================

class TestCancellation:
    """Tests for cooperative deadline and cancel checks."""

    def test_timeout_raises(self, pipeline, rising_series):
        clock = itertools.count(0.0, 5.0)
        with patch("orchestration.pipeline.time.perf_counter", side_effect=lambda: next(clock)):
            with pytest.raises(AnalysisTimeoutError) as exc_info:
                pipeline.analyze("UP", rising_series, timeout=1.0)

        assert exc_info.value.stage == "levels"
        assert exc_info.value.code == ErrorCode.UPSTREAM_TIMEOUT
        assert pipeline.last_report("UP") is None

    def test_config_timeout_used_by_default(self, rising_series):
        config = EngineConfig(orchestrator={"timeout_seconds": 1.0}, trend={"parallel": False})
        pipeline = TechnicalAnalysisPipeline(config=config)
        clock = itertools.count(0.0, 5.0)

        with patch("orchestration.pipeline.time.perf_counter", side_effect=lambda: next(clock)):
            with pytest.raises(AnalysisTimeoutError):
                pipeline.analyze("UP", rising_series)

    def test_generous_timeout_completes(self, pipeline, rising_series):
        report = pipeline.analyze("UP", rising_series, timeout=60.0)
        assert report.symbol == "UP"

    def test_cancel_event(self, pipeline, rising_series):
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(AnalysisCancelledError) as exc_info:
            pipeline.analyze("UP", rising_series, cancel_event=cancel)
        assert exc_info.value.code == ErrorCode.CANCELLED


# ============================================================================
# Cache and sink
# ============================================================================

class TestReportCache:
    """Tests for the last-report cache."""

    def test_last_report_returns_latest(self, pipeline, rising_series, falling_series):
        pipeline.analyze("SYM", rising_series)
        latest = pipeline.analyze("SYM", falling_series)

        assert pipeline.last_report("SYM") is latest

    def test_unknown_symbol(self, pipeline):
        assert pipeline.last_report("NOPE") is None

    def test_clear_cache(self, pipeline, rising_series):
        pipeline.analyze("UP", rising_series)
        pipeline.clear_cache()
        assert pipeline.last_report("UP") is None

    def test_cache_disabled(self, rising_series):
        config = EngineConfig(orchestrator={"cache_reports": False})
        pipeline = TechnicalAnalysisPipeline(config=config)
        pipeline.analyze("UP", rising_series)
        assert pipeline.last_report("UP") is None

    def test_cache_bounded(self, single_bar_series):
        config = EngineConfig(orchestrator={"max_cached_reports": 3}, trend={"parallel": False})
        pipeline = TechnicalAnalysisPipeline(config=config)

        for i in range(10):
            pipeline.analyze(f"S{i}", single_bar_series)

        assert pipeline.cached_symbols() == ["S7", "S8", "S9"]
        assert pipeline.last_report("S0") is None

    def test_reanalysis_refreshes_position(self, single_bar_series):
        config = EngineConfig(orchestrator={"max_cached_reports": 2}, trend={"parallel": False})
        pipeline = TechnicalAnalysisPipeline(config=config)

        pipeline.analyze("A", single_bar_series)
        pipeline.analyze("B", single_bar_series)
        pipeline.analyze("A", single_bar_series)
        pipeline.analyze("C", single_bar_series)

        assert pipeline.cached_symbols() == ["A", "C"]

    def test_expired_reports_dropped(self, single_bar_series):
        config = EngineConfig(orchestrator={"cache_ttl_seconds": 60.0}, trend={"parallel": False})
        pipeline = TechnicalAnalysisPipeline(config=config)
        clock = [1000.0]

        with patch("orchestration.pipeline.time.monotonic", side_effect=lambda: clock[0]):
            pipeline.analyze("OLD", single_bar_series)
            clock[0] += 30.0
            pipeline.analyze("NEW", single_bar_series)
            assert pipeline.last_report("OLD") is not None

            clock[0] += 45.0
            assert pipeline.last_report("OLD") is None
            assert pipeline.last_report("NEW") is not None
            assert pipeline.cached_symbols() == ["NEW"]

    def test_no_ttl_keeps_reports(self, single_bar_series):
        config = EngineConfig(orchestrator={"cache_ttl_seconds": None}, trend={"parallel": False})
        pipeline = TechnicalAnalysisPipeline(config=config)
        clock = [0.0]

        with patch("orchestration.pipeline.time.monotonic", side_effect=lambda: clock[0]):
            pipeline.analyze("KEEP", single_bar_series)
            clock[0] += 10 ** 6
            assert pipeline.last_report("KEEP") is not None


class TestReportSink:
    """Tests for report publishing."""

    def test_report_published(self, engine_config, rising_series):
        sink = Mock()
        pipeline = TechnicalAnalysisPipeline(config=engine_config, sink=sink)

        report = pipeline.analyze("UP", rising_series)

        sink.publish.assert_called_once_with(report)

    def test_sink_failure_is_logged_not_raised(self, engine_config, rising_series, caplog):
        sink = Mock()
        sink.publish.side_effect = ConnectionError("bus down")
        pipeline = TechnicalAnalysisPipeline(config=engine_config, sink=sink)

        with caplog.at_level(logging.WARNING, logger="orchestration.pipeline"):
            report = pipeline.analyze("UP", rising_series)

        assert report.symbol == "UP"
        assert pipeline.last_report("UP") is report
        assert "bus down" in caplog.text


# ============================================================================
# fetch_and_analyze()
# ============================================================================

class TestFetchAndAnalyze:
    """Tests for provider-backed analysis."""

    def test_primary_and_extra_timeframes(self, engine_config, provider):
        pipeline = TechnicalAnalysisPipeline(config=engine_config, provider=provider)

        report = pipeline.fetch_and_analyze("UP", ["1d", "1wk"])

        assert report.timeframe == "1d"
        assert report.metadata.timeframes == ("1d", "1wk")
        assert report.trend.per_timeframe["1d"].trend == TrendDirection.BULLISH
        assert report.trend.per_timeframe["1wk"].trend == TrendDirection.BEARISH

    def test_defaults_to_configured_timeframes(self, engine_config, provider):
        pipeline = TechnicalAnalysisPipeline(config=engine_config, provider=provider)
        report = pipeline.fetch_and_analyze("UP")
        assert report.metadata.timeframes == ("1d",)

    def test_provider_failure_propagates(self, engine_config):
        pipeline = TechnicalAnalysisPipeline(
            config=engine_config,
            provider=StaticPriceProvider(config=ProviderConfig()),
        )

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            pipeline.fetch_and_analyze("MISSING")
        assert exc_info.value.code == ErrorCode.UPSTREAM_EMPTY

    def test_requires_provider(self, pipeline):
        with pytest.raises(ValueError):
            pipeline.fetch_and_analyze("UP")
