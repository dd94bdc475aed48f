"""
Support and resistance level detection.

Three candidate sources are combined:
- classic pivot points from the most recent bar
- Fibonacci retracements over a recent swing
- clusters of local highs/lows, weighted by how often and on how much
  volume price turned there

Every candidate at or below the last close is support, everything above
is resistance. Both lists are ordered by strength.
"""

import logging
from typing import NamedTuple

from config.schema import LevelsConfig

from .enums import LevelKind, LevelOrigin
from .indicators.pivots import FibonacciLevels, PivotLevels, fibonacci_retracement, standard_pivots
from .indicators.utils import clamp
from .models import LevelAnalysis, SupportResistanceLevel
from .primitives import PriceSeries

logger = logging.getLogger(__name__)

PIVOT_STRENGTHS = {
    "r1": 0.7, "s1": 0.7,
    "r2": 0.6, "s2": 0.6,
    "r3": 0.5, "s3": 0.5,
}

FIBONACCI_STRENGTHS = {
    0.236: 0.55,
    0.382: 0.65,
    0.5: 0.75,
    0.618: 0.75,
    0.786: 0.55,
}


class _Candidate(NamedTuple):
    price: float
    strength: float
    origin: LevelOrigin
    label: str


class _Extremum(NamedTuple):
    price: float
    volume: float


def local_extrema(values: list[float], mode: str = "peak", order: int = 3) -> list[int]:
    """Return indices of local peaks or troughs.

    `order` is the number of bars on each side that must be strictly
    lower (peak) or higher (trough).

    Example:
        >>> local_extrema([1, 2, 5, 2, 1], mode="peak", order=2)
        [2]
    """
    indices = []
    for i in range(order, len(values) - order):
        neighbours = values[i - order:i] + values[i + 1:i + order + 1]
        if mode == "peak":
            is_ext = all(values[i] > v for v in neighbours)
        else:  # trough
            is_ext = all(values[i] < v for v in neighbours)
        if is_ext:
            indices.append(i)
    return indices


def _cluster(extrema: list[_Extremum], tolerance: float) -> list[list[_Extremum]]:
    """Merge price-sorted extrema whose relative spacing is within tolerance."""
    if not extrema:
        return []
    ordered = sorted(extrema)
    clusters = [[ordered[0]]]
    for point in ordered[1:]:
        anchor = clusters[-1][-1].price
        if abs(point.price - anchor) / max(abs(anchor), 1e-9) <= tolerance:
            clusters[-1].append(point)
        else:
            clusters.append([point])
    return clusters


def find_extrema_levels(
    series: PriceSeries,
    order: int = 3,
    tolerance: float = 0.015
) -> list[tuple[float, float]]:
    """Cluster swing highs and lows into (price, strength) candidates.

    Args:
        series: Price series
        order: Bars on each side a swing point must exceed
        tolerance: Relative distance within which swing points merge

    Returns:
        List of (price, strength) sorted by price. Price is the volume
        weighted mean of the cluster (plain mean without volume).

    Notes:
        - strength = 0.5 * share of all swing points in the cluster
          + 0.5 * share of all swing-point volume in the cluster
        - Needs at least 2 * order + 1 bars, otherwise returns []
    """
    highs, lows, volumes = series.highs, series.lows, series.volumes

    extrema = [_Extremum(highs[i], volumes[i]) for i in local_extrema(highs, "peak", order)]
    extrema += [_Extremum(lows[i], volumes[i]) for i in local_extrema(lows, "trough", order)]
    if not extrema:
        return []

    total_touches = len(extrema)
    total_volume = sum(e.volume for e in extrema)

    levels = []
    for cluster in _cluster(extrema, tolerance):
        cluster_volume = sum(e.volume for e in cluster)
        touch_share = len(cluster) / total_touches
        if total_volume > 0:
            volume_share = cluster_volume / total_volume
        else:
            # WHY: Without volume, touches are the only evidence
            volume_share = touch_share
        if cluster_volume > 0:
            price = sum(e.price * e.volume for e in cluster) / cluster_volume
        else:
            price = sum(e.price for e in cluster) / len(cluster)
        strength = clamp(0.5 * touch_share + 0.5 * volume_share, 0.0, 1.0)
        levels.append((price, strength))

    return levels


def _pivot_candidates(pivot: PivotLevels) -> list[_Candidate]:
    return [
        _Candidate(getattr(pivot, name), strength, LevelOrigin.PIVOT, name.upper())
        for name, strength in PIVOT_STRENGTHS.items()
    ]


def _fibonacci_candidates(fib: FibonacciLevels) -> list[_Candidate]:
    # WHY: A flat window collapses every level onto one price
    if fib.high <= fib.low:
        return []
    return [
        _Candidate(price, FIBONACCI_STRENGTHS[ratio], LevelOrigin.FIBONACCI, f"fib_{round(ratio * 1000):03d}")
        for ratio, price in fib.by_ratio().items()
    ]


def _rank(candidates: list[_Candidate], close: float, kind: LevelKind, limit: int) -> list[SupportResistanceLevel]:
    """Sort by strength descending, ties by distance to close; keep `limit`."""
    ordered = sorted(
        candidates,
        key=lambda c: (-c.strength, abs(c.price - close), c.price),
    )
    return [
        SupportResistanceLevel(
            price=round(c.price, 6),
            strength=c.strength,
            kind=kind,
            origin=c.origin,
            label=c.label,
        )
        for c in ordered[:limit]
    ]


def detect_levels(series: PriceSeries, config: LevelsConfig | None = None) -> LevelAnalysis:
    """
    Compute pivot, Fibonacci and swing-cluster levels for a series.

    Args:
        series: Price series (length >= 1)
        config: Level settings; defaults when omitted

    Returns:
        LevelAnalysis with support and resistance lists ordered by
        strength, plus the raw pivot and Fibonacci levels

    Example:
        >>> from domain.primitives import PriceSeries
        >>> s = PriceSeries.from_ohlcv("X", "1d", [105.0], [95.0], [100.0])
        >>> detect_levels(s).pivot.pivot
        100.0
    """
    config = config or LevelsConfig()
    last = series.last
    close = last.close

    pivot = standard_pivots(last.high, last.low, last.close)
    fib = fibonacci_retracement(series.highs, series.lows, config.fibonacci_lookback)

    candidates = _pivot_candidates(pivot) + _fibonacci_candidates(fib)
    candidates += [
        _Candidate(price, strength, LevelOrigin.VOLUME, "cluster")
        for price, strength in find_extrema_levels(series, config.extrema_order, config.cluster_tolerance)
    ]

    support = [c for c in candidates if c.price <= close]
    resistance = [c for c in candidates if c.price > close]

    logger.debug(
        f"{series.symbol}: {len(support)} support / {len(resistance)} resistance candidates"
    )

    return LevelAnalysis(
        support=_rank(support, close, LevelKind.SUPPORT, config.max_levels),
        resistance=_rank(resistance, close, LevelKind.RESISTANCE, config.max_levels),
        pivot=pivot,
        fibonacci=fib,
    )
