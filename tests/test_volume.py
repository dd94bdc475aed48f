"""
Tests for the volume trend stage.
"""

import pytest
from pydantic import ValidationError

from config import VolumeConfig
from domain import VolumeTrend, analyze_volume

BASE = [1000.0] * 19


class TestAnalyzeVolume:
    """Tests for analyze_volume."""

    def test_spike_is_increasing(self):
        result = analyze_volume(BASE + [4000.0])

        assert result.trend == VolumeTrend.INCREASING
        assert result.average_volume == pytest.approx(1150.0)
        assert result.ratio == pytest.approx(4000.0 / 1150.0, rel=1e-5)
        assert result.strength == 1.0

    def test_moderate_spike_strength(self):
        # avg = (19 * 1000 + 1900) / 20 = 1045, ratio ~1.818
        result = analyze_volume(BASE + [1900.0])
        assert result.trend == VolumeTrend.INCREASING
        assert result.strength == pytest.approx(1900.0 / 1045.0 / 2, abs=1e-4)

    def test_dry_up_is_decreasing(self):
        result = analyze_volume(BASE + [100.0])

        assert result.trend == VolumeTrend.DECREASING
        assert result.ratio < 0.5
        assert result.strength == pytest.approx(1.0 - result.ratio, abs=1e-4)

    def test_normal_volume_neutral(self):
        result = analyze_volume([1000.0] * 20)
        assert result.trend == VolumeTrend.NEUTRAL
        assert result.strength == 0.0
        assert result.ratio == 1.0

    def test_ratio_thresholds_are_strict(self):
        config = VolumeConfig(period=2, increasing_ratio=1.5, decreasing_ratio=0.5)
        # avg(100, 300) = 200 -> ratio 1.5
        assert analyze_volume([100.0, 300.0], config).trend == VolumeTrend.NEUTRAL

    def test_short_history_neutral(self):
        result = analyze_volume([1000.0] * 5 + [9000.0])
        assert result.trend == VolumeTrend.NEUTRAL
        assert result.average_volume == 0.0

    def test_zero_volume_neutral(self):
        result = analyze_volume([0.0] * 25)
        assert result.trend == VolumeTrend.NEUTRAL
        assert result.strength == 0.0

    def test_custom_period(self):
        config = VolumeConfig(period=5)
        result = analyze_volume([1000.0] * 4 + [5000.0], config)
        assert result.trend == VolumeTrend.INCREASING
        assert result.average_volume == pytest.approx(1800.0)


class TestVolumeConfig:
    """Tests for volume threshold validation."""

    def test_defaults(self):
        config = VolumeConfig()
        assert (config.period, config.increasing_ratio, config.decreasing_ratio) == (20, 1.5, 0.5)

    def test_decreasing_ratio_below_one(self):
        with pytest.raises(ValidationError):
            VolumeConfig(decreasing_ratio=1.2)
