"""Exceptions raised while resolving, fetching and parsing feed data.

Every stage raises a subclass of FeedError. Fetch, decode and parse
failures are caught per feed by the adapters and reported as an ``Error``
outcome for that feed only; ConfigDecodeError is raised to the caller
unless the oracle runs with lenient configuration handling.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable classification of decode and parse failures."""

    INVALID_ENCODING = "InvalidEncoding"
    MALFORMED_RECORD = "MalformedRecord"


class FeedError(Exception):
    """Base exception for feed errors."""

    pass


class ConfigDecodeError(FeedError):
    """Raised when a feed's raw configuration has the wrong shape.

    :ivar feed_id: Identifier of the misconfigured feed.
    :ivar reason: Why decoding failed.
    """

    def __init__(self, feed_id: str, reason: str):
        self.feed_id = feed_id
        self.reason = reason
        super().__init__(f"Invalid configuration for feed {feed_id}: {reason}")


class FetchError(FeedError):
    """Raised when the market data request fails at the transport level.

    :ivar target: Symbol or quote path the request was made for.
    """

    def __init__(self, message: str, target: str | None = None):
        self.target = target
        super().__init__(message)


class FetchHTTPError(FetchError):
    """Raised when the market data API answers with a non-2xx status.

    :ivar status_code: HTTP status code from the failed request.
    """

    def __init__(self, status_code: int, message: str, target: str | None = None):
        """Initialize the HTTP error.

        :param status_code: HTTP status code.
        :param message: Error message from response.
        :param target: Symbol or quote path the request was made for.
        """
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {message}", target=target)


class DecodeError(FeedError):
    """Raised when a response body is not valid UTF-8 text.

    :ivar kind: Always ErrorKind.INVALID_ENCODING.
    """

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.INVALID_ENCODING):
        self.kind = kind
        super().__init__(message)


class ParseError(FeedError):
    """Raised when a response body cannot be parsed into price data.

    :ivar kind: Classification of the failure.
    """

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.MALFORMED_RECORD):
        self.kind = kind
        super().__init__(message)
