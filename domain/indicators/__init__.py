"""Technical indicators library.

Pure Python implementations of common technical indicators. Every function
takes plain lists (closes, or highs/lows/closes[/volumes]) and returns the
latest value; short inputs yield a documented neutral value instead of an
error.

Indicators:
    - Moving Averages: SMA, EMA
    - RSI: Relative Strength Index using Wilder's smoothing
    - MACD: Moving Average Convergence Divergence
    - Bollinger Bands and Keltner Channels
    - ATR: Average True Range (simple mean of true ranges)
    - ADX: Average Directional Index with +DI/-DI
    - Stochastic: Stochastic Oscillator (%K and %D)
    - Momentum: CCI, Williams %R
    - Volume: OBV, VWAP, MFI, CMF
    - Ichimoku cloud
    - Pivot Points and Fibonacci retracements

Example:
    >>> from domain.indicators import rsi, macd, bollinger_bands
    >>>
    >>> closes = [44, 44.34, 44.09, 43.61, 44.33, 44.83, 45.10, 45.42,
    ...           45.84, 46.08, 45.89, 46.03, 45.61, 46.28, 46.28, 46.00]
    >>>
    >>> value = rsi(closes, period=14)
    >>> macd_line, signal_line, histogram = macd(closes)
    >>> upper, middle, lower = bollinger_bands(closes, period=20)
"""

from domain.indicators.adx import adx
from domain.indicators.atr import atr, true_ranges
from domain.indicators.base import (
    AdxValue,
    Band,
    Directional,
    IchimokuValue,
    IndicatorValue,
    MacdValue,
    OscillatorPair,
)
from domain.indicators.bollinger import bollinger_bands
from domain.indicators.ichimoku import ichimoku
from domain.indicators.indicator_set import IndicatorSet, compute_indicator_set
from domain.indicators.keltner import keltner_channels
from domain.indicators.macd import macd, macd_histogram_series, macd_history
from domain.indicators.momentum import cci, williams_r
from domain.indicators.moving_averages import ema, ema_series, sma
from domain.indicators.obv import obv, obv_series
from domain.indicators.pivots import (
    FibonacciLevels,
    PivotLevels,
    fibonacci_retracement,
    standard_pivots,
)
from domain.indicators.rsi import rsi
from domain.indicators.stochastic import stochastic
from domain.indicators.volume import cmf, mfi
from domain.indicators.vwap import vwap

__all__ = [
    # Value types
    "IndicatorValue",
    "Band",
    "OscillatorPair",
    "Directional",
    "AdxValue",
    "MacdValue",
    "IchimokuValue",
    "PivotLevels",
    "FibonacciLevels",
    "IndicatorSet",
    # Trend
    "sma",
    "ema",
    "ema_series",
    "macd",
    "macd_history",
    "macd_histogram_series",
    # Momentum
    "rsi",
    "stochastic",
    "williams_r",
    "cci",
    # Volatility
    "bollinger_bands",
    "atr",
    "true_ranges",
    "keltner_channels",
    # Volume
    "obv",
    "obv_series",
    "vwap",
    "mfi",
    "cmf",
    # Strength / advanced
    "adx",
    "ichimoku",
    # Levels
    "standard_pivots",
    "fibonacci_retracement",
    # Full set
    "compute_indicator_set",
]
