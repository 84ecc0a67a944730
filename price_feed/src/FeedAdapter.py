"""FeedAdapter: Per-feed pipeline from configuration to observation.

An adapter owns one feed family. For a single feed it resolves the raw
configuration, fetches the market data and normalizes it, and converts any
FeedError raised on the way into an ObservationFailed so that one feed's
failure never reaches its neighbours.

Adapters:
    - KlinesFeedAdapter: symbol feeds priced by the latest kline close
    - QuoteFeedAdapter: quote path feeds priced by the quoted rate, plus
      designated text feeds that report a fixed string
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from .errors import FeedError
from .FeedConfig import (
    FeedConfig,
    QuotePathResource,
    ResourceDescriptor,
    SymbolResource,
    resolve_quote_path_resource,
    resolve_symbol_resource,
)
from .fetchers import BaseFetcher, get_fetcher
from .PriceNormalizer import parse_klines, parse_quote, select_close
from .ResultAssembler import (
    NoDataAvailable,
    Observation,
    ObservationFailed,
    PriceObserved,
    TextObserved,
)

logger = logging.getLogger(__name__)


class FeedAdapter(ABC):
    """Abstract base class for feed adapters.

    :cvar name: Unique identifier for this adapter.
    :ivar fetcher: Market data client used for every feed.
    """

    name: ClassVar[str] = ""

    def __init__(self, fetcher: BaseFetcher) -> None:
        self.fetcher = fetcher

    @abstractmethod
    def resolve(self, feed: FeedConfig) -> ResourceDescriptor | None:
        """Decode the feed's configuration.

        :param feed: Configured feed.
        :returns: Descriptor, or None if the feed needs no market data.
        :raises ConfigDecodeError: If raw_data has the wrong shape.
        """
        pass

    @abstractmethod
    async def observe(
        self, feed: FeedConfig, resource: ResourceDescriptor | None
    ) -> Observation:
        """Fetch and normalize data for one resolved feed. Never raises FeedError.

        :param feed: Configured feed.
        :param resource: Descriptor returned by resolve().
        :returns: Observation for the assembler.
        """
        pass


class KlinesFeedAdapter(FeedAdapter):
    """Reports the close of the most recent kline for each symbol feed."""

    name = "binance"

    def resolve(self, feed: FeedConfig) -> SymbolResource:
        return resolve_symbol_resource(feed)

    async def observe(
        self, feed: FeedConfig, resource: ResourceDescriptor | None
    ) -> Observation:
        if not isinstance(resource, SymbolResource):
            raise TypeError(
                f"{type(self).__name__} expects a SymbolResource, "
                f"got {type(resource).__name__}"
            )
        try:
            body = await self.fetcher.fetch(resource)
            records = parse_klines(body)
        except FeedError as e:
            logger.debug(f"[{self.fetcher.name}] Feed {feed.id} failed: {e!r}")
            return ObservationFailed(resource.symbol, e)

        close = select_close(records)
        if close is None:
            return NoDataAvailable(resource.symbol)
        return PriceObserved(close)


class QuoteFeedAdapter(FeedAdapter):
    """Reports quoted rates, and fixed strings for designated text feeds.

    :ivar text_values: Mapping of feed id to the text that feed reports.
    """

    name = "revolut"

    def __init__(
        self,
        fetcher: BaseFetcher,
        text_values: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(fetcher)
        self.text_values = dict(text_values or {})

    def resolve(self, feed: FeedConfig) -> QuotePathResource | None:
        if feed.id in self.text_values:
            return None
        return resolve_quote_path_resource(feed)

    async def observe(
        self, feed: FeedConfig, resource: ResourceDescriptor | None
    ) -> Observation:
        if resource is None:
            return TextObserved(self.text_values[feed.id])

        if not isinstance(resource, QuotePathResource):
            raise TypeError(
                f"{type(self).__name__} expects a QuotePathResource, "
                f"got {type(resource).__name__}"
            )
        try:
            body = await self.fetcher.fetch(resource)
            quote = parse_quote(body)
        except FeedError as e:
            logger.debug(f"[{self.fetcher.name}] Feed {feed.id} failed: {e!r}")
            return ObservationFailed(resource.quote_path, e)

        logger.debug(
            f"[{self.fetcher.name}] {quote.from_symbol}/{quote.to_symbol} = {quote.rate}"
        )
        return PriceObserved(quote.rate)


ADAPTER_REGISTRY: dict[str, type[FeedAdapter]] = {
    KlinesFeedAdapter.name: KlinesFeedAdapter,
    QuoteFeedAdapter.name: QuoteFeedAdapter,
}


def get_adapter(
    name: str,
    *,
    fetcher_options: dict[str, Any] | None = None,
    **kwargs: Any,
) -> FeedAdapter:
    """Build an adapter together with its registered fetcher.

    :param name: Adapter name (e.g., "binance", "revolut").
    :param fetcher_options: Constructor arguments for the fetcher.
    :param kwargs: Extra adapter arguments (e.g., text_values).
    :returns: Adapter instance.
    :raises ValueError: If adapter name is unknown.
    """
    if name not in ADAPTER_REGISTRY:
        available = ", ".join(sorted(ADAPTER_REGISTRY.keys()))
        raise ValueError(f"Unknown adapter '{name}'. Available: {available}")
    fetcher = get_fetcher(name, **(fetcher_options or {}))
    return ADAPTER_REGISTRY[name](fetcher, **kwargs)
