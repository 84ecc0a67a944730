"""Revolut public quote fetcher.

Endpoint: https://www.revolut.com/api/quote/public/{quote_path}
Rate Limit: Unpublished (no key required)

Returns a single rate record:

.. code-block:: json

    {"from": "USD", "to": "EUR", "rate": 0.9213, "timestamp": 1712000000000}
"""

import logging
from urllib.parse import quote

from ..FeedConfig import QuotePathResource
from .base import BaseFetcher, register_fetcher

logger = logging.getLogger(__name__)

# Characters of a configured sub-path that are left unescaped.
SUB_PATH_SAFE = "/?=&"


@register_fetcher
class RevolutQuoteFetcher(BaseFetcher):
    """Fetcher for Revolut's public currency quote API."""

    name = "revolut"
    BASE_URL = "https://www.revolut.com/api/quote/public"

    async def fetch(self, resource: QuotePathResource) -> str:
        """Fetch the quote for a configured path.

        :param resource: Quote path descriptor (e.g., quote_path="USD-EUR").
        :returns: Raw JSON body.
        """
        # The configured value is a sub-path: keep its segments and query.
        url = f"{self.BASE_URL}/{quote(resource.quote_path, safe=SUB_PATH_SAFE)}"
        logger.debug(f"[revolut] GET {url}")
        return await self._get_text(
            url,
            headers={"User-Agent": "*/*"},
            target=resource.quote_path,
        )
