"""
Price Feed Adapter - Fetch, Normalize and Report Module

This module turns configured data feeds into a uniform result payload:
- FeedConfig: Feed configuration and descriptor resolution
- fetchers: Market data clients (Binance klines, Revolut quotes)
- PriceNormalizer: Response parsing and value selection
- ResultAssembler: Per-feed results and payload assembly
- FeedAdapter: Per-feed pipelines for each feed family
- PriceFeedOracle: Main orchestrator for one oracle request
"""

from .errors import (
    ConfigDecodeError,
    DecodeError,
    ErrorKind,
    FeedError,
    FetchError,
    FetchHTTPError,
    ParseError,
)
from .FeedConfig import FeedConfig, OracleSettings, QuotePathResource, SymbolResource
from .FeedAdapter import FeedAdapter, KlinesFeedAdapter, QuoteFeedAdapter, get_adapter
from .PriceFeedOracle import PriceFeedOracle
from .PriceNormalizer import PriceRecord, QuoteRate, parse_klines, parse_quote, select_close
from .ResultAssembler import MAX_TEXT_BYTES, FeedResult, Payload, ResultAssembler, ResultKind

__all__ = [
    "ConfigDecodeError",
    "DecodeError",
    "ErrorKind",
    "FeedAdapter",
    "FeedConfig",
    "FeedError",
    "FeedResult",
    "FetchError",
    "FetchHTTPError",
    "KlinesFeedAdapter",
    "MAX_TEXT_BYTES",
    "OracleSettings",
    "ParseError",
    "Payload",
    "PriceFeedOracle",
    "PriceRecord",
    "QuoteFeedAdapter",
    "QuotePathResource",
    "QuoteRate",
    "ResultAssembler",
    "ResultKind",
    "SymbolResource",
    "get_adapter",
    "parse_klines",
    "parse_quote",
    "select_close",
]
