"""
Markdown report generator.

Transforms an AnalysisReport into a readable markdown document;
write_report also emits the JSON form for the CLI.
Pure formatting logic - no I/O except final file writing.
"""

import sys
from pathlib import Path
from typing import TextIO

from domain import AnalysisReport, IndicatorCategory, Severity, SupportResistanceLevel, TrendDirection

from .json_api import to_json


# ============================================================================
# Formatting Helpers
# ============================================================================

def _score_bar(score: float, width: int = 10) -> str:
    """Create ASCII bar for a 0-1 score."""
    filled = int(score * width)
    empty = width - filled
    return f"[{'#' * filled}{'.' * empty}] {score:.0%}"


def _trend_arrow(trend: TrendDirection) -> str:
    """Get arrow for trend direction."""
    return {
        TrendDirection.BULLISH: "^",
        TrendDirection.BEARISH: "v",
        TrendDirection.NEUTRAL: "-",
    }.get(trend, "?")


def _severity_badge(severity: Severity) -> str:
    return {
        Severity.CRITICAL: "[!!!]",
        Severity.HIGH: "[!!]",
        Severity.MEDIUM: "[!]",
        Severity.LOW: "[.]",
    }.get(severity, "")


def _format_value(value: object) -> str:
    """Render a scalar or a named tuple of floats."""
    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return ", ".join(f"{k}={v:.4g}" for k, v in value._asdict().items())
    if isinstance(value, float):
        return f"{value:.4g}"
    return str(value)


def _format_level(level: SupportResistanceLevel) -> str:
    label = f" {level.label}" if level.label else ""
    return f"| {level.price:.2f} | {level.origin.value}{label} | {_score_bar(level.strength, 5)} |"


# ============================================================================
# Section Generators
# ============================================================================

def generate_header(report: AnalysisReport) -> str:
    """Generate report header."""
    summary = report.summary
    lines = [
        f"# {report.symbol} ({report.timeframe})",
        "",
        f"**Last close:** {summary.last.close:.2f} ({summary.change_percent:+.2f}% over {summary.bar_count} bars)",
        f"**Range:** {summary.period_low:.2f} - {summary.period_high:.2f}",
        "",
        "---",
        "",
    ]
    return "\n".join(lines)


def generate_signals_section(report: AnalysisReport) -> str:
    """Generate recommendation and signal list."""
    signals = report.signals
    lines = [
        "## Signals",
        "",
        f"**Recommendation:** {signals.recommendation.value.upper()}",
        f"**Technical score:** {_score_bar(signals.score)}",
        "",
    ]

    if signals.signals:
        for sig in signals.signals:
            lines.append(f"- {sig.direction.value.upper()} `{sig.kind}` ({sig.strength:.0%}) {sig.reason}")
    else:
        lines.append("*No active signals.*")
    lines.append("")

    if signals.reasons:
        lines.append("**Score drivers:** " + "; ".join(signals.reasons))
        lines.append("")

    return "\n".join(lines)


def generate_trend_section(report: AnalysisReport) -> str:
    """Generate multi-timeframe trend table."""
    trend = report.trend
    lines = [
        "## Trend",
        "",
        f"**Consensus:** {_trend_arrow(trend.trend)} {trend.trend.value} "
        f"(confidence {trend.confidence:.0%})",
        "",
    ]

    if trend.per_timeframe:
        lines.append("| Timeframe | Trend | Strength | RSI |")
        lines.append("|-----------|-------|----------|-----|")
        for label, vote in trend.per_timeframe.items():
            detail = trend.details.get(label)
            rsi_text = f"{detail.rsi:.1f}" if detail is not None else "-"
            lines.append(
                f"| {label} | {_trend_arrow(vote.trend)} {vote.trend.value} | {vote.strength:.2f} | {rsi_text} |"
            )
        lines.append("")

    if trend.has_divergence:
        lines.append("*Timeframes disagree on direction.*")
        lines.append("")

    return "\n".join(lines)


def generate_levels_section(report: AnalysisReport) -> str:
    """Generate support/resistance tables."""
    lines = ["## Support & Resistance", ""]

    close = report.summary.last.close
    nearest = [
        (title, level)
        for title, level in (
            ("support", report.levels.nearest_support(close)),
            ("resistance", report.levels.nearest_resistance(close)),
        )
        if level is not None
    ]
    if nearest:
        lines.append(" | ".join(
            f"**Nearest {title}:** {level.price:.2f} ({level.distance(close):.1%} away)"
            for title, level in nearest
        ))
        lines.append("")

    for title, levels in (("Resistance", report.levels.resistance), ("Support", report.levels.support)):
        lines.append(f"### {title}")
        lines.append("")
        if not levels:
            lines.append(f"*No {title.lower()} levels detected.*")
            lines.append("")
            continue
        lines.append("| Price | Origin | Strength |")
        lines.append("|-------|--------|----------|")
        lines.extend(_format_level(level) for level in levels)
        lines.append("")

    return "\n".join(lines)


def generate_volume_section(report: AnalysisReport) -> str:
    """Generate volume trend summary."""
    volume = report.volume
    lines = [
        "## Volume",
        "",
        f"**Trend:** {volume.trend.value} (strength {volume.strength:.0%})",
        f"**Latest vs average:** {volume.ratio:.2f}x of {volume.average_volume:,.0f}",
        "",
    ]
    return "\n".join(lines)


def generate_indicators_section(report: AnalysisReport) -> str:
    """Generate indicator listing grouped by category."""
    lines = ["## Indicators", ""]
    degraded = set(report.indicators.degraded)

    for category in IndicatorCategory:
        values = report.indicators.category(category)
        if not values:
            continue
        lines.append(f"### {category.value.title()}")
        lines.append("")
        for name, value in values.items():
            marker = " *(short history)*" if name in degraded else ""
            lines.append(f"- **{name}**: {_format_value(value)}{marker}")
        lines.append("")

    return "\n".join(lines)


def generate_alerts_section(report: AnalysisReport) -> str:
    """Generate alert list."""
    lines = ["## Alerts", ""]

    if not report.has_alerts:
        lines.append("*No alerts.*")
    for alert in report.alerts:
        lines.append(
            f"- {_severity_badge(alert.severity)} {alert.message} "
            f"-> `{alert.suggested_action}` ({alert.confidence:.0%})"
        )
    lines.append("")

    return "\n".join(lines)


def generate_footer(report: AnalysisReport) -> str:
    """Generate report footer."""
    meta = report.metadata
    return "\n".join([
        "---",
        "",
        f"*Data quality: {meta.data_quality:.0%} | bars: {meta.bar_count} | gaps: {meta.gap_count} | "
        f"timeframes: {', '.join(meta.timeframes)}*",
        "",
    ])


SECTIONS = {
    "header": generate_header,
    "signals": generate_signals_section,
    "trend": generate_trend_section,
    "levels": generate_levels_section,
    "volume": generate_volume_section,
    "indicators": generate_indicators_section,
    "alerts": generate_alerts_section,
    "footer": generate_footer,
}


def generate_section(section_name: str, report: AnalysisReport) -> str:
    """
    Generate a specific report section.

    Args:
        section_name: One of SECTIONS
        report: Analysis report

    Returns:
        Markdown string for the section
    """
    generator = SECTIONS.get(section_name)
    if generator is None:
        raise ValueError(f"Unknown section: {section_name}")
    return generator(report)


def generate_markdown_report(report: AnalysisReport) -> str:
    """Generate the complete markdown report."""
    return "\n".join(generator(report) for generator in SECTIONS.values())


def write_report(
    report: AnalysisReport,
    output: Path | str | TextIO | None = None,
    fmt: str = "text",
    include_timing: bool = False,
) -> None:
    """
    Write a report to file or stdout.

    Args:
        report: Analysis report
        output: File path, file object, or None for stdout
        fmt: "text" for markdown, "json" for the sorted JSON document
        include_timing: Keep duration_ms in JSON output
    """
    if fmt == "json":
        content = to_json(report, include_timing=include_timing) + "\n"
    elif fmt == "text":
        content = generate_markdown_report(report)
    else:
        raise ValueError(f"Unknown report format: {fmt}")

    if output is None:
        sys.stdout.write(content)
    elif isinstance(output, (str, Path)):
        Path(output).write_text(content)
    else:
        output.write(content)
