"""
External collaborator ports.

The engine never fetches data or detects chart patterns itself. Callers
plug in implementations of these protocols; adapters/ holds the built-in
ones.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from domain.models import AnalysisReport, PatternDetection
    from domain.primitives import PriceSeries


@runtime_checkable
class PriceDataProvider(Protocol):
    """
    Source of price/volume history.

    Implementations return bars oldest-first with finite prices and
    non-negative volume. Failures must be raised as
    UpstreamUnavailableError; the engine does not retry.
    """

    @property
    def source_name(self) -> str:
        """Unique identifier for this provider."""
        ...

    def fetch(self, symbol: str, timeframe: str) -> "PriceSeries":
        """Return the price series for symbol on the given timeframe."""
        ...


@runtime_checkable
class PatternDetector(Protocol):
    """Chart pattern classifier consumed by the pattern_completed alert rule."""

    def detect(self, series: "PriceSeries") -> list["PatternDetection"]:
        ...


@runtime_checkable
class ReportSink(Protocol):
    """Destination for finished reports (alert stream, message bus, ...)."""

    def publish(self, report: "AnalysisReport") -> None:
        ...
