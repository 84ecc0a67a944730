"""PriceNormalizer: Parse raw market data bodies and select the reported value.

Two response shapes are understood:
    1. Klines: an array of fixed-shape arrays ``[open_time_ms, open, high,
       low, close, volume, ...]`` with prices encoded as strings
    2. Quotes: a single object carrying a numeric ``rate``

Every field is checked for presence and type before conversion; anything
unexpected raises ParseError instead of being coerced.

.. code-block:: python

    >>> records = parse_klines(
    ...     '[[1499040000000, "0.0163", "0.80", "0.0157", "0.0158", "148976.11"]]'
    ... )
    >>> records[0].timestamp.timestamp()
    1499040000.0
    >>> select_close(records)
    0.0158
    >>> select_close([]) is None
    True
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .errors import ErrorKind, ParseError

# Positional layout of a kline: open time followed by OHLCV strings.
KLINE_FIELDS = ("open_time", "open", "high", "low", "close", "volume")

# Plain decimal or exponent notation; no padding, digit separators or words.
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class PriceRecord:
    """One sampled OHLCV interval.

    :ivar timestamp: Opening time of the interval (UTC).
    :ivar open: Opening price.
    :ivar high: Highest price during the interval.
    :ivar low: Lowest price during the interval.
    :ivar close: Closing price.
    :ivar volume: Traded volume during the interval.
    :raises ValueError: If any numeric field is not finite.
    """

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float

    def __post_init__(self) -> None:
        for name in ("open", "high", "low", "close", "volume"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite, got {getattr(self, name)}")


@dataclass(frozen=True)
class QuoteRate:
    """A single quoted exchange rate.

    Only ``rate`` is reported; the rest is descriptive.
    """

    rate: float
    from_symbol: str | None = None
    to_symbol: str | None = None
    timestamp: int | None = None


def _load_json(body: str) -> Any:
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}", kind=ErrorKind.MALFORMED_RECORD) from e


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_kline(index: int, kline: Any) -> PriceRecord:
    """Convert one positional kline into a PriceRecord.

    :param index: Position of the kline in the response, for error messages.
    :param kline: Decoded JSON value.
    :raises ParseError: If a field is absent, mistyped or not a finite number.
    """
    if not isinstance(kline, list):
        raise ParseError(f"Kline {index} is not an array: {kline!r}")
    if len(kline) < len(KLINE_FIELDS):
        raise ParseError(
            f"Kline {index} has {len(kline)} fields, expected at least {len(KLINE_FIELDS)}"
        )

    open_time = kline[0]
    if not isinstance(open_time, int) or isinstance(open_time, bool):
        raise ParseError(f"Kline {index} open_time is not an integer: {open_time!r}")

    values: dict[str, float] = {}
    for position, name in enumerate(KLINE_FIELDS[1:], start=1):
        raw = kline[position]
        if not isinstance(raw, str):
            raise ParseError(f"Kline {index} {name} is not a string: {raw!r}")
        if not DECIMAL_PATTERN.fullmatch(raw):
            raise ParseError(f"Kline {index} {name} is not a number: {raw!r}")
        values[name] = float(raw)

    try:
        timestamp = datetime.fromtimestamp(open_time // 1000, tz=timezone.utc)
        return PriceRecord(timestamp=timestamp, **values)
    except (ValueError, OverflowError, OSError) as e:
        raise ParseError(f"Kline {index} is invalid: {e}") from e


def parse_klines(body: str) -> list[PriceRecord]:
    """Parse a klines response body.

    :param body: Raw JSON text.
    :returns: PriceRecords in response order (may be empty).
    :raises ParseError: If the body or any kline is malformed.
    """
    data = _load_json(body)
    if not isinstance(data, list):
        raise ParseError(f"Expected an array of klines, got {type(data).__name__}")
    return [_parse_kline(index, kline) for index, kline in enumerate(data)]


def select_close(records: list[PriceRecord]) -> float | None:
    """Select the reported price from parsed klines.

    The API returns the most recent interval first when limit=1 is requested,
    so the close of the first record is reported.

    :param records: Parsed klines.
    :returns: Close price, or None if no data is available.
    """
    if not records:
        return None
    return records[0].close


def parse_quote(body: str) -> QuoteRate:
    """Parse a single-quote response body.

    :param body: Raw JSON text.
    :returns: Parsed QuoteRate.
    :raises ParseError: If the body is not an object or rate is missing/non-numeric.
    """
    data = _load_json(body)
    if not isinstance(data, dict):
        raise ParseError(f"Expected a quote object, got {type(data).__name__}")

    if "rate" not in data:
        raise ParseError("Quote has no 'rate' field")
    rate = data["rate"]
    if not _is_number(rate) or not math.isfinite(rate):
        raise ParseError(f"Quote rate is not a finite number: {rate!r}")

    from_symbol = data.get("from")
    to_symbol = data.get("to")
    timestamp = data.get("timestamp")
    return QuoteRate(
        rate=float(rate),
        from_symbol=from_symbol if isinstance(from_symbol, str) else None,
        to_symbol=to_symbol if isinstance(to_symbol, str) else None,
        timestamp=(
            int(timestamp)
            if _is_number(timestamp) and math.isfinite(timestamp)
            else None
        ),
    )
