"""
Base price provider with rate limiting and structured logging.

All providers should inherit from BasePriceProvider to get:
- Rate limiting per provider
- Structured logging at the fetch boundary
- Translation of provider failures into UpstreamUnavailableError;
  invalid bars surface as InvalidInputError with provider context

There is deliberately no retry: a failed fetch fails the analyze call.
"""

from abc import ABC, abstractmethod
import logging
import time

from config import ProviderConfig, get_config
from domain import PriceSeries
from ports import InvalidInputError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Sliding-window rate limiter."""

    __slots__ = ("max_requests", "window_seconds", "requests")

    def __init__(self, max_requests: int, window_seconds: float = 60.0):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.requests: list[float] = []

    def acquire(self) -> float | None:
        """
        Acquire a request slot.

        Returns:
            None when a slot was taken, otherwise seconds until one frees up
        """
        now = time.monotonic()

        # Prune old requests outside window
        cutoff = now - self.window_seconds
        self.requests = [t for t in self.requests if t > cutoff]

        if len(self.requests) >= self.max_requests:
            oldest = min(self.requests)
            return oldest + self.window_seconds - now

        self.requests.append(now)
        return None


class BasePriceProvider(ABC):
    """
    Base class for price data providers.

    Subclasses implement _fetch_impl; fetch() wraps it with rate limiting,
    logging and error translation.
    """

    def __init__(self, config: ProviderConfig | None = None):
        self._config = config or get_config().provider
        self._rate_limiter = RateLimiter(max_requests=self._config.requests_per_minute)

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Unique identifier for this data source."""
        ...

    def fetch(self, symbol: str, timeframe: str) -> PriceSeries:
        """
        Fetch a price series.

        Raises:
            UpstreamUnavailableError: On rate limiting, provider errors
                or empty responses
            InvalidInputError: Provider returned bars that fail validation;
                context names the provider, symbol and timeframe
        """
        retry_after = self._rate_limiter.acquire()
        if retry_after is not None:
            raise UpstreamUnavailableError(
                self.source_name,
                f"rate limit exceeded, retry after {retry_after:.1f}s",
                symbol=symbol,
                timeframe=timeframe,
            )

        logger.debug(
            f"Fetching {symbol} {timeframe}",
            extra={"source": self.source_name, "symbol": symbol, "timeframe": timeframe},
        )
        start_time = time.monotonic()

        try:
            series = self._fetch_impl(symbol, timeframe)
        except UpstreamUnavailableError:
            raise
        except InvalidInputError as e:
            logger.warning(
                f"{self.source_name} returned invalid bars for {symbol} {timeframe}: {e.reason}",
                extra={"source": self.source_name, "symbol": symbol},
            )
            raise e.with_context(provider=self.source_name, symbol=symbol, timeframe=timeframe)
        except Exception as e:
            logger.warning(
                f"Fetch failed for {symbol} {timeframe}: {e}",
                extra={"source": self.source_name, "symbol": symbol},
            )
            raise UpstreamUnavailableError(
                self.source_name, str(e), symbol=symbol, timeframe=timeframe, cause=e
            ) from e

        elapsed = time.monotonic() - start_time
        logger.debug(
            f"Fetched {len(series)} bars for {symbol} {timeframe} ({elapsed:.2f}s)",
            extra={
                "source": self.source_name,
                "symbol": symbol,
                "bars": len(series),
                "elapsed_ms": int(elapsed * 1000),
            },
        )
        return series

    @abstractmethod
    def _fetch_impl(self, symbol: str, timeframe: str) -> PriceSeries:
        """
        Implementation-specific fetch logic.

        Subclasses implement this instead of fetch() to get
        automatic rate limiting and error translation.
        """
        ...
