"""
Tests for support/resistance level detection.
"""

import dataclasses

import pytest

from config import LevelsConfig
from domain import LevelKind, LevelOrigin, PriceSeries, detect_levels, find_extrema_levels
from domain.levels import local_extrema


@pytest.fixture
def one_bar():
    return PriceSeries.from_ohlcv("X", "1d", [105.0], [95.0], [100.0], [500.0])


class TestLocalExtrema:
    """Tests for swing point detection."""

    def test_single_peak(self):
        assert local_extrema([1, 2, 5, 2, 1], mode="peak", order=2) == [2]

    def test_single_trough(self):
        assert local_extrema([5, 3, 1, 3, 5], mode="trough", order=2) == [2]

    def test_plateau_is_not_an_extremum(self):
        """Equal neighbours fail the strict comparison."""
        assert local_extrema([1, 5, 5, 1], mode="peak", order=1) == []

    def test_too_short_for_order(self):
        assert local_extrema([1, 3, 1], mode="peak", order=2) == []


class TestExtremaLevels:
    """Tests for clustered swing levels."""

    def test_no_levels_for_monotonic_series(self, make_series):
        series = make_series([10.0 + p for p in range(50)])
        assert find_extrema_levels(series) == []

    def test_repeated_swings_cluster(self, wavy_series):
        levels = find_extrema_levels(wavy_series, order=3, tolerance=0.015)

        assert levels
        for price, strength in levels:
            assert 0.0 <= strength <= 1.0
            assert 90.0 < price < 110.0

    def test_strengths_sum_to_one(self, wavy_series):
        """Touch and volume shares each sum to 1 over all clusters."""
        levels = find_extrema_levels(wavy_series)
        assert sum(s for _, s in levels) == pytest.approx(1.0)

    def test_zero_volume_uses_touch_share(self, wavy_series):
        zero_volume = PriceSeries.from_ohlcv(
            "WAVE", "1d", wavy_series.highs, wavy_series.lows, wavy_series.closes
        )
        levels = find_extrema_levels(zero_volume)
        assert levels
        assert sum(s for _, s in levels) == pytest.approx(1.0)


class TestDetectLevels:
    """Tests for the combined level detector."""

    def test_single_bar_uses_pivots_and_fibonacci(self, one_bar):
        analysis = detect_levels(one_bar)

        assert analysis.pivot.pivot == 100.0
        assert analysis.fibonacci.high == 105.0
        assert analysis.fibonacci.low == 95.0
        origins = {lvl.origin for lvl in analysis.support + analysis.resistance}
        assert origins == {LevelOrigin.PIVOT, LevelOrigin.FIBONACCI}

    def test_partition_around_close(self, one_bar):
        analysis = detect_levels(one_bar)
        close = one_bar.last.close

        assert all(lvl.price <= close for lvl in analysis.support)
        assert all(lvl.price > close for lvl in analysis.resistance)
        assert all(lvl.kind == LevelKind.SUPPORT for lvl in analysis.support)
        assert all(lvl.kind == LevelKind.RESISTANCE for lvl in analysis.resistance)

    def test_ordered_by_strength(self, wavy_series):
        analysis = detect_levels(wavy_series)

        for levels in (analysis.support, analysis.resistance):
            strengths = [lvl.strength for lvl in levels]
            assert strengths == sorted(strengths, reverse=True)

    def test_strongest_resistance_first(self, one_bar):
        """R1 (0.7) outranks fib_382 (0.65) and R2 (0.6)."""
        analysis = detect_levels(one_bar)
        labels = [lvl.label for lvl in analysis.resistance]
        assert labels[:3] == ["R1", "fib_382", "R2"]

    def test_max_levels_caps_each_side(self, one_bar):
        analysis = detect_levels(one_bar, LevelsConfig(max_levels=2))
        assert len(analysis.support) == 2
        assert len(analysis.resistance) == 2

    def test_flat_window_skips_fibonacci(self):
        flat = PriceSeries.from_ohlcv("F", "1d", [10.0] * 5, [10.0] * 5, [10.0] * 5)
        analysis = detect_levels(flat)
        origins = {lvl.origin for lvl in analysis.support + analysis.resistance}
        assert LevelOrigin.FIBONACCI not in origins

    def test_volume_levels_present_with_swings(self, wavy_series):
        analysis = detect_levels(wavy_series, LevelsConfig(max_levels=50))
        origins = {lvl.origin for lvl in analysis.support + analysis.resistance}
        assert LevelOrigin.VOLUME in origins

    def test_nearest_resistance(self, one_bar):
        analysis = detect_levels(one_bar)
        nearest = analysis.nearest_resistance(100.0)
        assert nearest is not None
        assert nearest.price == min(lvl.price for lvl in analysis.resistance)

    def test_nearest_support(self, one_bar):
        analysis = detect_levels(one_bar, LevelsConfig(max_levels=50))
        nearest = analysis.nearest_support(100.0)
        assert nearest is not None
        assert nearest.price == max(lvl.price for lvl in analysis.support)

    def test_nearest_support_empty(self, one_bar):
        analysis = detect_levels(one_bar)
        empty = dataclasses.replace(analysis, support=[])
        assert empty.nearest_support(100.0) is None

    def test_fibonacci_labels(self, one_bar):
        analysis = detect_levels(one_bar, LevelsConfig(max_levels=50))
        fib = {
            lvl.label: lvl.price
            for lvl in analysis.support + analysis.resistance
            if lvl.origin == LevelOrigin.FIBONACCI
        }
        assert set(fib) == {"fib_236", "fib_382", "fib_500", "fib_618", "fib_786"}
        for ratio, price in analysis.fibonacci.by_ratio().items():
            assert fib[f"fib_{round(ratio * 1000):03d}"] == pytest.approx(price)

    def test_distance_is_relative(self, one_bar):
        level = detect_levels(one_bar).resistance[0]
        assert level.distance(level.price) == 0.0
        assert level.distance(level.price * 0.99) == pytest.approx(0.01)
