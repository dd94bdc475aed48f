"""
Main analysis pipeline.

Coordinates the analysis stages for one symbol:
1. Support/resistance levels
2. Full indicator set
3. Multi-timeframe trend consensus
4. Composite signals
5. Volume trend
6. Alerts (including externally detected patterns)
7. Report assembly, caching and publishing

Insufficient data never fails a report: it lowers the data-quality score.
Invalid bars, provider failures, timeouts and cancellation do.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import fields
from typing import Any, Iterable, Mapping, NamedTuple, Sequence

from config import EngineConfig, get_config, merge_config
from domain import (
    AnalysisReport,
    PatternDetection,
    PriceBar,
    PriceSeries,
    PriceSummary,
    ReportMetadata,
    aggregate_trend,
    analyze_volume,
    compute_indicator_set,
    detect_levels,
    generate_alerts,
    synthesize_signals,
)
from ports import (
    AnalysisCancelledError,
    AnalysisTimeoutError,
    InvalidInputError,
    PatternDetector,
    PriceDataProvider,
    ReportSink,
)

logger = logging.getLogger(__name__)

_BAR_FIELDS = frozenset(f.name for f in fields(PriceBar))
_REQUIRED_BAR_FIELDS = frozenset({"high", "low", "close"})


# ============================================================================
# Data quality
# ============================================================================

def data_quality_score(
    bar_count: int,
    gap_count: int,
    degraded_count: int,
    indicator_count: int,
    full_history_bars: int = 52,
) -> float:
    """
    Score how trustworthy a report's inputs are, in [0, 1].

    quality = history factor * continuity factor * indicator factor

    - history: bars / full_history_bars, capped at 1
    - continuity: 1 - gaps / (bars - 1)
    - indicators: 1 - 0.5 * degraded / total

    Example:
        >>> data_quality_score(26, 0, 0, 19)
        0.5
    """
    history = min(1.0, bar_count / full_history_bars) if full_history_bars > 0 else 1.0
    continuity = 1.0 - gap_count / (bar_count - 1) if bar_count > 1 else 1.0
    indicators = 1.0 - 0.5 * degraded_count / indicator_count if indicator_count else 1.0
    return round(max(0.0, history * continuity * indicators), 4)


# ============================================================================
# Pipeline
# ============================================================================

class _CachedReport(NamedTuple):
    report: AnalysisReport
    stored_at: float


class _Deadline:
    """Cooperative timeout and cancellation checks between stages."""

    def __init__(self, symbol: str, timeout: float | None, cancel_event: threading.Event | None):
        self.symbol = symbol
        self.timeout = timeout
        self.cancel_event = cancel_event
        self.started = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000

    def check(self, stage: str) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise AnalysisCancelledError(self.symbol, stage)
        if self.timeout is not None and time.perf_counter() - self.started > self.timeout:
            raise AnalysisTimeoutError(self.symbol, self.timeout, stage)
        logger.debug(f"{self.symbol}: stage '{stage}' at {self.elapsed_ms:.1f}ms")


def _as_series(
    symbol: str,
    timeframe: str,
    data: PriceSeries | Iterable[PriceBar | Mapping[str, Any]],
) -> PriceSeries:
    """Accept a PriceSeries or raw bars (PriceBar objects or dicts)."""
    if isinstance(data, PriceSeries):
        return data

    bars = []
    for i, bar in enumerate(data):
        if isinstance(bar, PriceBar):
            bars.append(bar)
            continue
        if not isinstance(bar, Mapping):
            raise InvalidInputError("bar must be a PriceBar or a mapping", value=bar, index=i)
        unknown = set(bar) - _BAR_FIELDS
        missing = _REQUIRED_BAR_FIELDS - set(bar)
        if unknown or missing:
            field_name = sorted(unknown or missing)[0]
            reason = f"unknown bar field '{field_name}'" if unknown else f"missing bar field '{field_name}'"
            raise InvalidInputError(reason, field=field_name, index=i)
        try:
            bars.append(PriceBar(**bar))
        except InvalidInputError as e:
            raise e.with_index(i)
    return PriceSeries(symbol=symbol, timeframe=timeframe, bars=tuple(bars))


class TechnicalAnalysisPipeline:
    """
    Public entry point of the engine.

    Stateless apart from the last-report cache, which holds the most
    recent report per symbol (last write wins) and is safe to read from
    other threads. The cache keeps at most `max_cached_reports` symbols,
    evicting the least recently stored, and forgets reports older than
    `cache_ttl_seconds`.

    Example:
        >>> pipeline = TechnicalAnalysisPipeline(EngineConfig())
        >>> series = PriceSeries.from_ohlcv("ACME", "1d", [10.0], [9.0], [9.5], [100.0])
        >>> report = pipeline.analyze("ACME", series)
        >>> report.signals.recommendation.value
        'hold'
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        provider: PriceDataProvider | None = None,
        pattern_detector: PatternDetector | None = None,
        sink: ReportSink | None = None,
    ):
        self.config = config or get_config()
        self.provider = provider
        self.pattern_detector = pattern_detector
        self.sink = sink
        self._reports: OrderedDict[str, _CachedReport] = OrderedDict()
        self._lock = threading.Lock()

    def _resolve_config(self, config: EngineConfig | Mapping[str, Any] | None) -> EngineConfig:
        if config is None:
            return self.config
        if isinstance(config, EngineConfig):
            return config
        return merge_config(self.config, dict(config))

    def _detect_patterns(self, series: PriceSeries) -> list[PatternDetection]:
        if self.pattern_detector is None:
            return []
        try:
            return list(self.pattern_detector.detect(series))
        except Exception as e:
            # WHY: Pattern input is optional; losing it only skips one alert rule
            logger.warning(f"{series.symbol}: pattern detector failed, skipping pattern alerts: {e}")
            return []

    def analyze(
        self,
        symbol: str,
        series: PriceSeries | Iterable[PriceBar | Mapping[str, Any]],
        *,
        timeframe_series: Mapping[str, PriceSeries] | None = None,
        patterns: Sequence[PatternDetection] | None = None,
        config: EngineConfig | Mapping[str, Any] | None = None,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> AnalysisReport:
        """
        Produce a full technical analysis report for one symbol.

        Args:
            symbol: Ticker the report is for
            series: Primary price series, or raw bars for it
            timeframe_series: Extra timeframe label -> series for the trend vote
            patterns: Pre-detected patterns; when omitted the configured
                pattern detector (if any) is asked
            config: Per-call config, or nested overrides merged onto the
                pipeline's config
            timeout: Seconds allowed for the whole call (config default if None)
            cancel_event: Set from another thread to abort at the next stage

        Returns:
            AnalysisReport

        Raises:
            InvalidInputError: Non-finite or negative values, high < low,
                or an empty series
            AnalysisTimeoutError: Deadline passed between stages
            AnalysisCancelledError: cancel_event was set
        """
        cfg = self._resolve_config(config)
        timeout = timeout if timeout is not None else cfg.orchestrator.timeout_seconds
        deadline = _Deadline(symbol, timeout, cancel_event)

        primary_timeframe = cfg.trend.timeframes[0]
        series = _as_series(symbol, primary_timeframe, series)

        deadline.check("levels")
        levels = detect_levels(series, cfg.levels)

        deadline.check("indicators")
        indicators = compute_indicator_set(series, cfg.indicators)

        deadline.check("trend")
        series_by_timeframe = {series.timeframe: series}
        for label, extra in (timeframe_series or {}).items():
            series_by_timeframe.setdefault(label, extra)
        trend = aggregate_trend(series_by_timeframe, cfg.trend)

        deadline.check("signals")
        signals = synthesize_signals(indicators, trend, cfg.signals)

        deadline.check("volume")
        volume = analyze_volume(series.volumes, cfg.volume)

        deadline.check("alerts")
        if patterns is None:
            patterns = self._detect_patterns(series)
        alerts = generate_alerts(series, indicators, levels, patterns, cfg.alerts, cfg.indicators)

        deadline.check("report")
        gap_count = series.count_gaps()
        quality = data_quality_score(
            len(series),
            gap_count,
            len(indicators.degraded),
            len(indicators),
            cfg.orchestrator.full_history_bars,
        )
        if indicators.degraded:
            logger.warning(
                f"{symbol}: {len(indicators.degraded)} indicator(s) degraded by short history "
                f"({len(series)} bars)"
            )

        report = AnalysisReport(
            symbol=symbol,
            timeframe=series.timeframe,
            summary=PriceSummary.from_series(series),
            indicators=indicators,
            levels=levels,
            trend=trend,
            signals=signals,
            volume=volume,
            alerts=alerts,
            metadata=ReportMetadata(
                data_quality=quality,
                bar_count=len(series),
                gap_count=gap_count,
                degraded_indicators=tuple(indicators.degraded),
                timeframes=tuple(series_by_timeframe),
                duration_ms=round(deadline.elapsed_ms, 3),
            ),
        )

        logger.info(
            f"Analyzed {symbol}: {signals.recommendation.value} "
            f"(score {signals.score:.2f}, {len(alerts)} alert(s), "
            f"quality {quality:.2f}, {report.metadata.duration_ms:.1f}ms)"
        )

        if cfg.orchestrator.cache_reports:
            self._store(symbol, report)
        self._publish(report)
        return report

    def fetch_and_analyze(
        self,
        symbol: str,
        timeframes: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> AnalysisReport:
        """
        Fetch one series per timeframe from the provider, then analyze.

        The first timeframe is the primary series; the rest only feed the
        trend vote.

        Raises:
            UpstreamUnavailableError: Provider failed (not retried)
            InvalidInputError: Provider returned bars that fail validation
            ValueError: No provider configured
        """
        if self.provider is None:
            raise ValueError("fetch_and_analyze requires a price data provider")

        timeframes = list(timeframes or self.config.trend.timeframes)
        fetched = {tf: self.provider.fetch(symbol, tf) for tf in timeframes}

        primary = fetched[timeframes[0]]
        extra = {tf: s for tf, s in fetched.items() if tf != timeframes[0]}
        return self.analyze(symbol, primary, timeframe_series=extra, **kwargs)

    def _publish(self, report: AnalysisReport) -> None:
        if self.sink is None:
            return
        try:
            self.sink.publish(report)
        except Exception as e:
            logger.warning(f"{report.symbol}: report sink failed: {e}")

    def _store(self, symbol: str, report: AnalysisReport) -> None:
        now = time.monotonic()
        with self._lock:
            self._reports.pop(symbol, None)
            self._reports[symbol] = _CachedReport(report, now)
            self._evict_expired(now)
            evicted = 0
            while len(self._reports) > self.config.orchestrator.max_cached_reports:
                self._reports.popitem(last=False)
                evicted += 1
        if evicted:
            logger.debug(f"Evicted {evicted} cached report(s) over the cache limit")

    def _evict_expired(self, now: float) -> None:
        """Drop entries older than the TTL. Caller holds the lock."""
        ttl = self.config.orchestrator.cache_ttl_seconds
        if ttl is None:
            return
        # Insertion order is storage order, so expired entries sit at the front
        while self._reports:
            oldest = next(iter(self._reports.values()))
            if now - oldest.stored_at <= ttl:
                break
            self._reports.popitem(last=False)

    def last_report(self, symbol: str) -> AnalysisReport | None:
        """Most recent report for symbol, if any and not expired."""
        with self._lock:
            self._evict_expired(time.monotonic())
            entry = self._reports.get(symbol)
        return entry.report if entry is not None else None

    def cached_symbols(self) -> list[str]:
        """Symbols with a live cached report, oldest first."""
        with self._lock:
            self._evict_expired(time.monotonic())
            return list(self._reports)

    def clear_cache(self) -> None:
        with self._lock:
            self._reports.clear()
