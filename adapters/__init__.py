from .base import BasePriceProvider, RateLimiter
from .memory import StaticPriceProvider
from .yahoo import YahooPriceProvider

__all__ = [
    "BasePriceProvider",
    "RateLimiter",
    "StaticPriceProvider",
    "YahooPriceProvider",
]
