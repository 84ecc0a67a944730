"""Unit tests for ResultAssembler."""

import logging

import pytest

from price_feed.src.errors import FetchHTTPError
from price_feed.src.ResultAssembler import (
    MAX_TEXT_BYTES,
    FeedResult,
    NoDataAvailable,
    ObservationFailed,
    Payload,
    PriceObserved,
    ResultAssembler,
    ResultKind,
    TextObserved,
)


class TestToResult:
    """Test observation mapping."""

    def test_price(self) -> None:
        """Prices should become numerical results."""
        result = ResultAssembler().to_result("F1", PriceObserved(65000.5))
        assert result == FeedResult("F1", ResultKind.NUMERICAL, 65000.5)

    def test_no_data(self) -> None:
        """Empty data should become an error naming the symbol."""
        result = ResultAssembler().to_result("F1", NoDataAvailable("BTCUSDT"))
        assert result.kind is ResultKind.ERROR
        assert result.value == "No price data available for BTCUSDT"

    def test_failure(self) -> None:
        """Failures should name the symbol and embed the cause."""
        cause = FetchHTTPError(503, "Service Unavailable", target="BTCUSDT")
        result = ResultAssembler().to_result("F1", ObservationFailed("BTCUSDT", cause))
        assert result.kind is ResultKind.ERROR
        assert result.value == (
            "Failed to fetch price data for BTCUSDT: HTTP 503: Service Unavailable"
        )

    def test_text_at_limit(self) -> None:
        """Text of exactly 24 bytes should be reported."""
        value = "Hello awesome Blockchain"
        assert len(value.encode("utf-8")) == MAX_TEXT_BYTES

        result = ResultAssembler().to_result("222", TextObserved(value))
        assert result == FeedResult("222", ResultKind.TEXT, value)

    def test_text_too_long_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Text over 24 bytes should be dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            result = ResultAssembler().to_result(
                "222", TextObserved("Hello awesome Blockchain!")
            )
        assert result is None
        assert "Dropping from payload" in caplog.text

    def test_text_limit_counts_bytes(self) -> None:
        """Multi-byte characters count by their encoded size."""
        value = "é" * 13  # 13 characters, 26 bytes
        assert ResultAssembler().to_result("222", TextObserved(value)) is None

    def test_custom_limit(self) -> None:
        """The byte limit should be configurable."""
        assembler = ResultAssembler(max_text_bytes=3)
        assert assembler.to_result("1", TextObserved("abc")) is not None
        assert assembler.to_result("1", TextObserved("abcd")) is None


class TestAssemble:
    """Test payload assembly."""

    def test_order_preserved(self) -> None:
        """Payload order should follow observation order."""
        payload = ResultAssembler().assemble(
            [
                ("C", PriceObserved(3.0)),
                ("A", NoDataAvailable("X")),
                ("B", TextObserved("hi")),
            ]
        )
        assert [r.id for r in payload] == ["C", "A", "B"]

    def test_dropped_text_omitted(self) -> None:
        """A too-long text feed should leave no entry."""
        payload = ResultAssembler().assemble(
            [("1", PriceObserved(1.0)), ("222", TextObserved("x" * 25))]
        )
        assert len(payload) == 1
        assert payload.get("222") is None

    def test_empty(self) -> None:
        """No observations give an empty payload."""
        assert len(ResultAssembler().assemble([])) == 0


class TestSerialization:
    """Test host wire serialization."""

    def test_result_to_dict(self) -> None:
        """Results should serialize as externally tagged values."""
        assert FeedResult.numerical("F1", 1.5).to_dict() == {
            "id": "F1",
            "value": {"Numerical": 1.5},
        }
        assert FeedResult.text("222", "hi").to_dict() == {
            "id": "222",
            "value": {"Text": "hi"},
        }
        assert FeedResult.error("F2", "boom").to_dict() == {
            "id": "F2",
            "value": {"Error": "boom"},
        }

    def test_payload_to_dict(self) -> None:
        """Payload should serialize as a values list."""
        payload = Payload()
        payload.append(FeedResult.numerical("F1", 2.0))
        assert payload.to_dict() == {
            "values": [{"id": "F1", "value": {"Numerical": 2.0}}]
        }
