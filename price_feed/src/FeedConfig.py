"""Feed configuration and resource descriptors.

The hosting runtime hands over one FeedConfig per data feed. Its ``raw_data``
is opaque until resolved into a descriptor for the feed family that serves it:

.. code-block:: python

    >>> feed = FeedConfig("F1", '{"symbol": "BTCUSDT"}')
    >>> resolve_symbol_resource(feed)
    SymbolResource(symbol='BTCUSDT')
    >>> resolve_quote_path_resource(FeedConfig("7", "USD-EUR"))
    QuotePathResource(quote_path='USD-EUR')
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigDecodeError


@dataclass(frozen=True)
class FeedConfig:
    """One configured data feed.

    :ivar id: Stable identifier used downstream.
    :ivar raw_data: Feed-type specific configuration payload.
    """

    id: str
    raw_data: str


@dataclass(frozen=True)
class SymbolResource:
    """Descriptor for feeds that name a trading pair symbol."""

    symbol: str

    @property
    def label(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class QuotePathResource:
    """Descriptor for feeds configured with a raw quote API sub-path."""

    quote_path: str

    @property
    def label(self) -> str:
        return self.quote_path


ResourceDescriptor = SymbolResource | QuotePathResource


@dataclass
class OracleSettings:
    """Invocation input supplied by the hosting runtime.

    :ivar data_feeds: Feeds to report on, in the order they were configured.
    """

    data_feeds: list[FeedConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OracleSettings:
        """Build settings from the host JSON shape.

        :param data: Mapping like ``{"data_feeds": [{"id": "1", "data": "..."}]}``.
        :returns: New OracleSettings instance.
        :raises ConfigDecodeError: If an entry lacks a string id or data.
        """
        entries = data.get("data_feeds", [])
        if not isinstance(entries, list):
            raise ConfigDecodeError("<settings>", "'data_feeds' must be a list")

        feeds = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ConfigDecodeError(f"#{index}", "feed entry must be an object")
            feed_id = entry.get("id")
            raw = entry.get("data")
            if not isinstance(feed_id, str) or not feed_id:
                raise ConfigDecodeError(f"#{index}", "missing string 'id'")
            # The data field may already be decoded JSON; keep it opaque.
            if not isinstance(raw, str):
                if raw is None:
                    raise ConfigDecodeError(feed_id, "missing 'data'")
                raw = json.dumps(raw)
            feeds.append(FeedConfig(feed_id, raw))
        return cls(feeds)


def resolve_symbol_resource(feed: FeedConfig) -> SymbolResource:
    """Decode a symbol feed configuration.

    :param feed: Feed whose raw_data is a JSON object with a ``symbol`` field.
    :returns: Decoded SymbolResource.
    :raises ConfigDecodeError: If raw_data is not such an object.
    """
    try:
        data = json.loads(feed.raw_data)
    except json.JSONDecodeError as e:
        raise ConfigDecodeError(feed.id, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigDecodeError(feed.id, "expected a JSON object")

    symbol = data.get("symbol")
    if not isinstance(symbol, str) or not symbol.strip():
        raise ConfigDecodeError(feed.id, "missing string field 'symbol'")

    return SymbolResource(symbol.strip())


def resolve_quote_path_resource(feed: FeedConfig) -> QuotePathResource:
    """Decode a quote path feed configuration.

    :param feed: Feed whose raw_data is the literal quote path (e.g. "USD-EUR").
    :returns: Decoded QuotePathResource.
    :raises ConfigDecodeError: If the path is blank.
    """
    path = feed.raw_data.strip()
    if not path:
        raise ConfigDecodeError(feed.id, "empty quote path")
    return QuotePathResource(path)
