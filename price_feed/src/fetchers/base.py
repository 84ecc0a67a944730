"""Base fetcher interface and shared HTTP client management.

All market data fetchers inherit from BaseFetcher and implement fetch(),
which issues exactly one GET for a resource descriptor and returns the
response body as text. A shared httpx.AsyncClient is used across all
fetchers to avoid connection overhead; tests and hosts can inject their own.

.. code-block:: python

    @register_fetcher
    class MyFetcher(BaseFetcher):
        name = "myfetcher"

        async def fetch(self, resource: SymbolResource) -> str:
            return await self._get_text(
                "https://api.example.com/price",
                params={"symbol": resource.symbol},
                target=resource.symbol,
            )
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

from ..errors import DecodeError, ErrorKind, FetchError, FetchHTTPError
from ..FeedConfig import ResourceDescriptor

logger = logging.getLogger(__name__)


class BaseFetcher(ABC):
    """Abstract base class for market data fetchers.

    Subclasses must implement:
        - name: Class variable identifying the source (e.g., "binance")
        - fetch(): Async method returning the raw body for a descriptor

    :cvar name: Unique identifier for this fetcher.
    :ivar client: Injected HTTP client, or None to use the shared one.
    """

    # Class-level shared HTTP client
    _shared_client: ClassVar[httpx.AsyncClient | None] = None

    # Fetcher identification
    name: ClassVar[str] = ""

    # Headers sent with every request
    DEFAULT_HEADERS: ClassVar[dict[str, str]] = {"Accept": "application/json"}

    def __init__(self, client: httpx.AsyncClient | None = None):
        """Initialize the fetcher.

        :param client: Optional HTTP client to use instead of the shared one.
        """
        self.client = client

    @classmethod
    def get_shared_client(cls) -> httpx.AsyncClient:
        """Get or create the shared HTTP client.

        The client is shared across all fetcher instances to reuse connections.

        :returns: Shared httpx.AsyncClient instance.
        """
        if cls._shared_client is None or cls._shared_client.is_closed:
            BaseFetcher._shared_client = httpx.AsyncClient(
                timeout=httpx.Timeout(30.0, connect=10.0),
                limits=httpx.Limits(max_connections=50, max_keepalive_connections=20),
                follow_redirects=True,
            )
        return BaseFetcher._shared_client

    @classmethod
    async def close_shared_client(cls) -> None:
        """Close the shared HTTP client."""
        client = BaseFetcher._shared_client
        if client is not None and not client.is_closed:
            await client.aclose()
        BaseFetcher._shared_client = None

    @abstractmethod
    async def fetch(self, resource: ResourceDescriptor) -> str:
        """Fetch the raw market data for a resource.

        :param resource: Decoded feed descriptor.
        :returns: Response body as UTF-8 text.
        :raises FetchError: On transport failure or non-2xx response.
        :raises DecodeError: If the body is not valid UTF-8.
        """
        pass

    async def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        target: str | None = None,
    ) -> httpx.Response:
        """Make an HTTP GET request.

        :param url: Request URL.
        :param params: Optional query parameters (URL-encoded by httpx).
        :param headers: Optional request headers, merged over DEFAULT_HEADERS.
        :param target: Symbol or path the request is for, kept on errors.
        :returns: httpx.Response object.
        :raises FetchHTTPError: On non-2xx response.
        :raises FetchError: On network errors.
        """
        client = self.client or self.get_shared_client()
        try:
            response = await client.get(
                url,
                params=params,
                headers={**self.DEFAULT_HEADERS, **(headers or {})},
            )
        except httpx.TimeoutException as e:
            raise FetchError(f"Request timeout: {e}", target=target) from e
        except httpx.RequestError as e:
            raise FetchError(f"Request failed: {e}", target=target) from e

        if not response.is_success:
            logger.debug(
                "HTTP GET %s failed with status %s: %s",
                response.url,
                response.status_code,
                response.text[:200],
            )
            raise FetchHTTPError(
                response.status_code, response.text[:200], target=target
            )
        return response

    async def _get_text(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        target: str | None = None,
    ) -> str:
        """Make an HTTP GET request and decode the body as UTF-8.

        :returns: Response body text.
        :raises DecodeError: If the body is not valid UTF-8.
        """
        response = await self._get(url, params=params, headers=headers, target=target)
        try:
            body = response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"Response for {target} is not valid UTF-8: {e}",
                kind=ErrorKind.INVALID_ENCODING,
            ) from e

        logger.debug(f"[{self.name}] Response for {target} = `{body}`")
        return body


# Registry of available fetchers (populated by subclass imports)
FETCHER_REGISTRY: dict[str, type[BaseFetcher]] = {}


def register_fetcher(cls: type[BaseFetcher]) -> type[BaseFetcher]:
    """Decorator to register a fetcher class in the global registry.

    :param cls: Fetcher class to register.
    :returns: The registered class (unchanged).
    :raises ValueError: If fetcher has no name defined.
    """
    if not cls.name:
        raise ValueError(f"Fetcher {cls.__name__} must define a 'name' class variable")
    FETCHER_REGISTRY[cls.name] = cls
    return cls


def get_fetcher(name: str, **kwargs: Any) -> BaseFetcher:
    """Get a fetcher instance by name.

    :param name: Fetcher name (e.g., "binance", "revolut").
    :param kwargs: Constructor arguments for the fetcher.
    :returns: Fetcher instance.
    :raises ValueError: If fetcher name is unknown.
    """
    if name not in FETCHER_REGISTRY:
        available = ", ".join(sorted(FETCHER_REGISTRY.keys()))
        raise ValueError(f"Unknown fetcher '{name}'. Available: {available}")
    return FETCHER_REGISTRY[name](**kwargs)


def get_available_fetchers() -> list[str]:
    """Get list of available fetcher names.

    :returns: Sorted list of registered fetcher names.
    """
    return sorted(FETCHER_REGISTRY.keys())
