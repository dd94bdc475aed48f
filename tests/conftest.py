"""
Shared fixtures: price series builders.
"""

import math
from datetime import datetime, timedelta

import pytest

from config import EngineConfig
from domain import PriceSeries


def build_series(
    closes: list[float],
    symbol: str = "TEST",
    timeframe: str = "1d",
    spread: float = 1.0,
    volume: float = 1000.0,
    start: datetime | None = None,
) -> PriceSeries:
    """Bars with high/low `spread` around each close and daily timestamps."""
    start = start or datetime(2024, 1, 1)
    return PriceSeries.from_ohlcv(
        symbol,
        timeframe,
        highs=[c + spread for c in closes],
        lows=[c - spread for c in closes],
        closes=closes,
        volumes=[volume] * len(closes),
        timestamps=[start + timedelta(days=i) for i in range(len(closes))],
    )


@pytest.fixture
def make_series():
    """Factory fixture wrapping build_series."""
    return build_series


@pytest.fixture
def engine_config():
    """Default engine configuration, sequential trend analysis."""
    return EngineConfig(trend={"parallel": False})


@pytest.fixture
def single_bar_series():
    """One bar {H:10, L:9, C:9.5, V:100}."""
    return PriceSeries.from_ohlcv("TINY", "1d", [10.0], [9.0], [9.5], [100.0])


@pytest.fixture
def linear_series():
    """30 bars, closes rising linearly from 90 to 120, flat volume 1000."""
    closes = [90.0 + 30.0 * i / 29 for i in range(30)]
    return build_series(closes, symbol="LIN", spread=0.5)


@pytest.fixture
def rising_series():
    """80 bars of steady gains."""
    return build_series([100.0 * 1.01 ** i for i in range(80)], symbol="UP")


@pytest.fixture
def falling_series():
    """80 bars of steady losses."""
    return build_series([200.0 * 0.99 ** i for i in range(80)], symbol="DOWN")


@pytest.fixture
def wavy_series():
    """120 bars oscillating around 100 so swing highs and lows repeat."""
    closes = [100.0 + 5.0 * math.sin(i / 4.0) for i in range(120)]
    return build_series(closes, symbol="WAVE")
