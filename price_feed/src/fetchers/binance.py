"""Binance klines (candlestick) fetcher.

Endpoint: https://api.binance.com/api/v3/klines
Rate Limit: High (no key required for public endpoints)

The response is an array of klines, most recent interval first when
``limit=1`` is requested:

.. code-block:: text

    [
      [
        1499040000000,      // Open time
        "0.01634790",       // Open
        "0.80000000",       // High
        "0.01575800",       // Low
        "0.01577100",       // Close
        "148976.11427815",  // Volume
        ...
      ]
    ]
"""

import logging

import httpx

from ..FeedConfig import SymbolResource
from .base import BaseFetcher, register_fetcher

logger = logging.getLogger(__name__)


@register_fetcher
class BinanceKlinesFetcher(BaseFetcher):
    """Fetcher for the Binance klines endpoint.

    :ivar interval: Kline interval (e.g., "1h", "1d").
    :ivar limit: Number of klines to request.
    """

    name = "binance"
    BASE_URL = "https://api.binance.com/api/v3"

    DEFAULT_INTERVAL = "1h"
    DEFAULT_LIMIT = 1

    def __init__(
        self,
        interval: str = DEFAULT_INTERVAL,
        limit: int = DEFAULT_LIMIT,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the fetcher.

        :param interval: Kline interval (default: "1h").
        :param limit: Number of klines per request (default: 1, the latest).
        :param client: Optional HTTP client to use instead of the shared one.
        :raises ValueError: If limit is not positive.
        """
        super().__init__(client=client)
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.interval = interval
        self.limit = limit

    async def fetch(self, resource: SymbolResource) -> str:
        """Fetch klines for a trading pair symbol.

        :param resource: Symbol descriptor (e.g., symbol="BTCUSDT").
        :returns: Raw JSON body.
        """
        url = f"{self.BASE_URL}/klines"
        params = {
            "symbol": resource.symbol,
            "interval": self.interval,
            "limit": str(self.limit),
        }
        logger.debug(f"[binance] GET {url} params={params}")
        return await self._get_text(url, params=params, target=resource.symbol)
