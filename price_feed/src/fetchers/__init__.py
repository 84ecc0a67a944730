"""
Market data fetchers for external price APIs.

Each fetcher issues a single GET for a decoded feed descriptor and returns
the response body as text; parsing happens in PriceNormalizer.

Usage:
    from price_feed.src.fetchers import get_fetcher, get_available_fetchers

    # Get list of available fetchers
    available = get_available_fetchers()
    # ['binance', 'revolut']

    # Create a fetcher instance
    fetcher = get_fetcher("binance", interval="1h", limit=1)
    body = await fetcher.fetch(SymbolResource("BTCUSDT"))
"""

# Import base classes and utilities
from .base import (
    FETCHER_REGISTRY,
    BaseFetcher,
    get_available_fetchers,
    get_fetcher,
    register_fetcher,
)

# Import all fetcher implementations to trigger registration
from .binance import BinanceKlinesFetcher
from .revolut import RevolutQuoteFetcher

__all__ = [
    # Base classes
    "BaseFetcher",
    # Registry functions
    "register_fetcher",
    "get_fetcher",
    "get_available_fetchers",
    "FETCHER_REGISTRY",
    # Fetcher implementations
    "BinanceKlinesFetcher",
    "RevolutQuoteFetcher",
]
