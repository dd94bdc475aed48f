"""
Volume trend: is the latest bar trading on unusually high or low volume?
"""

from config.schema import VolumeConfig

from .enums import VolumeTrend
from .indicators.moving_averages import sma
from .indicators.utils import clamp
from .models import VolumeAnalysis


def analyze_volume(volumes: list[float], config: VolumeConfig | None = None) -> VolumeAnalysis:
    """
    Compare the latest volume with its simple moving average.

    Args:
        volumes: Volume per bar, oldest first
        config: Period and ratio thresholds; defaults when omitted

    Returns:
        VolumeAnalysis with trend, strength, average volume and ratio

    Example:
        >>> analyze_volume([100.0] * 19 + [400.0]).trend.value
        'increasing'

    Notes:
        - Fewer than `period` bars, or a zero average: neutral, strength 0
        - increasing when ratio > increasing_ratio, strength = min(1, ratio / 2)
        - decreasing when ratio < decreasing_ratio, strength = 1 - ratio
    """
    config = config or VolumeConfig()
    if len(volumes) < config.period:
        return VolumeAnalysis()

    average = sma(volumes, config.period)
    if average <= 0:
        return VolumeAnalysis()

    ratio = volumes[-1] / average
    if ratio > config.increasing_ratio:
        trend = VolumeTrend.INCREASING
        strength = clamp(ratio / 2.0, 0.0, 1.0)
    elif ratio < config.decreasing_ratio:
        trend = VolumeTrend.DECREASING
        strength = clamp(1.0 - ratio, 0.0, 1.0)
    else:
        trend = VolumeTrend.NEUTRAL
        strength = 0.0

    return VolumeAnalysis(
        trend=trend,
        strength=strength,
        average_volume=round(average, 6),
        ratio=round(ratio, 6),
    )
