import math
import statistics
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from ports.errors import InvalidInputError

# Interval multiple (of the median spacing) above which two bars are a gap
GAP_TOLERANCE = 1.5


@dataclass(frozen=True)
class PriceBar:
    """
    One immutable price/volume bar.

    Validation happens at construction, so every bar inside a PriceSeries
    holds finite, non-negative prices and volume with high >= low.
    """
    high: float
    low: float
    close: float
    volume: float = 0.0
    timestamp: datetime | None = None
    open: float | None = None

    def __post_init__(self) -> None:
        for name in ("high", "low", "close", "volume", "open"):
            value = getattr(self, name)
            if name == "open" and value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInputError(f"{name} must be numeric", field=name, value=value)
            if not math.isfinite(value):
                raise InvalidInputError(f"{name} must be finite", field=name, value=value)
            if value < 0:
                raise InvalidInputError(f"{name} must be >= 0", field=name, value=value)
        if self.high < self.low:
            raise InvalidInputError(
                f"high {self.high} is below low {self.low}", field="high", value=self.high
            )

    @property
    def typical_price(self) -> float:
        return (self.high + self.low + self.close) / 3.0


@dataclass(frozen=True)
class PriceSeries:
    """
    Ordered bars (oldest first) for one symbol on one timeframe.

    Treated as immutable input for the duration of an analysis; indicator
    functions read the column accessors below.
    """
    symbol: str
    timeframe: str
    bars: tuple[PriceBar, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.bars, tuple):
            object.__setattr__(self, "bars", tuple(self.bars))
        if not self.bars:
            raise InvalidInputError(f"price series for {self.symbol} is empty", field="bars")

    @classmethod
    def from_ohlcv(
        cls,
        symbol: str,
        timeframe: str,
        highs: Sequence[float],
        lows: Sequence[float],
        closes: Sequence[float],
        volumes: Sequence[float] | None = None,
        timestamps: Sequence[datetime] | None = None,
    ) -> "PriceSeries":
        """Build a series from parallel columns."""
        n = len(closes)
        volumes = volumes if volumes is not None else [0.0] * n
        if not (len(highs) == len(lows) == len(volumes) == n):
            raise InvalidInputError("highs, lows, closes and volumes must have same length")
        if timestamps is not None and len(timestamps) != n:
            raise InvalidInputError("timestamps must match the number of bars")

        bars = []
        for i in range(n):
            try:
                bars.append(PriceBar(
                    high=highs[i],
                    low=lows[i],
                    close=closes[i],
                    volume=volumes[i],
                    timestamp=timestamps[i] if timestamps is not None else None,
                ))
            except InvalidInputError as e:
                raise e.with_index(i)
        return cls(symbol=symbol, timeframe=timeframe, bars=tuple(bars))

    def __len__(self) -> int:
        return len(self.bars)

    @property
    def highs(self) -> list[float]:
        return [b.high for b in self.bars]

    @property
    def lows(self) -> list[float]:
        return [b.low for b in self.bars]

    @property
    def closes(self) -> list[float]:
        return [b.close for b in self.bars]

    @property
    def volumes(self) -> list[float]:
        return [b.volume for b in self.bars]

    @property
    def last(self) -> PriceBar:
        return self.bars[-1]

    def count_gaps(self) -> int:
        """
        Count missing-bar gaps using bar timestamps.

        A gap is a spacing larger than GAP_TOLERANCE times the median
        spacing. Series without timestamps report no gaps.
        """
        stamps = [b.timestamp for b in self.bars]
        if len(stamps) < 3 or any(ts is None for ts in stamps):
            return 0

        deltas = [
            (stamps[i] - stamps[i - 1]).total_seconds()
            for i in range(1, len(stamps))
        ]
        typical = statistics.median(deltas)
        if typical <= 0:
            return 0
        return sum(1 for d in deltas if d > typical * GAP_TOLERANCE)
