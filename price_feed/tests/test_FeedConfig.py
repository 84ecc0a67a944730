"""Unit tests for FeedConfig resolution."""

import pytest

from price_feed.src.errors import ConfigDecodeError
from price_feed.src.FeedConfig import (
    FeedConfig,
    OracleSettings,
    QuotePathResource,
    SymbolResource,
    resolve_quote_path_resource,
    resolve_symbol_resource,
)


class TestResolveSymbolResource:
    """Test symbol feed decoding."""

    def test_valid_symbol(self) -> None:
        """A JSON object with a symbol should decode."""
        resource = resolve_symbol_resource(FeedConfig("F1", '{"symbol": "BTCUSDT"}'))
        assert resource == SymbolResource("BTCUSDT")
        assert resource.label == "BTCUSDT"

    def test_extra_fields_ignored(self) -> None:
        """Unknown fields should not matter."""
        resource = resolve_symbol_resource(
            FeedConfig("F1", '{"symbol": "ETHUSDT", "note": "x"}')
        )
        assert resource.symbol == "ETHUSDT"

    def test_deterministic(self) -> None:
        """Same input should yield equal descriptors."""
        feed = FeedConfig("F1", '{"symbol": "BTCUSDT"}')
        assert resolve_symbol_resource(feed) == resolve_symbol_resource(feed)

    def test_shared_symbol_not_deduplicated(self) -> None:
        """Two feeds with one symbol should both resolve."""
        a = resolve_symbol_resource(FeedConfig("A", '{"symbol": "BTCUSDT"}'))
        b = resolve_symbol_resource(FeedConfig("B", '{"symbol": "BTCUSDT"}'))
        assert a == b

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            '"BTCUSDT"',
            "[1, 2]",
            "{}",
            '{"symbol": 5}',
            '{"symbol": "  "}',
        ],
    )
    def test_malformed_raises(self, raw: str) -> None:
        """Malformed raw data should raise ConfigDecodeError naming the feed."""
        with pytest.raises(ConfigDecodeError, match="feed F9") as exc_info:
            resolve_symbol_resource(FeedConfig("F9", raw))
        assert exc_info.value.feed_id == "F9"


class TestResolveQuotePathResource:
    """Test quote path feed decoding."""

    def test_literal_path(self) -> None:
        """The raw data is used as the path."""
        resource = resolve_quote_path_resource(FeedConfig("7", "USD-EUR"))
        assert resource == QuotePathResource("USD-EUR")
        assert resource.label == "USD-EUR"

    def test_whitespace_stripped(self) -> None:
        """Surrounding whitespace should be removed."""
        resource = resolve_quote_path_resource(FeedConfig("7", "  USD-GBP\n"))
        assert resource.quote_path == "USD-GBP"

    def test_blank_raises(self) -> None:
        """Blank paths should raise ConfigDecodeError."""
        with pytest.raises(ConfigDecodeError, match="empty quote path"):
            resolve_quote_path_resource(FeedConfig("7", "   "))


class TestOracleSettings:
    """Test host settings parsing."""

    def test_from_dict(self) -> None:
        """Entries should keep order and raw data."""
        settings = OracleSettings.from_dict(
            {
                "data_feeds": [
                    {"id": "1", "data": '{"symbol": "BTCUSDT"}'},
                    {"id": "2", "data": "USD-EUR"},
                ]
            }
        )
        assert settings.data_feeds == [
            FeedConfig("1", '{"symbol": "BTCUSDT"}'),
            FeedConfig("2", "USD-EUR"),
        ]

    def test_decoded_data_kept_as_json(self) -> None:
        """Already-decoded data should be re-encoded, not rejected."""
        settings = OracleSettings.from_dict(
            {"data_feeds": [{"id": "1", "data": {"symbol": "BTCUSDT"}}]}
        )
        feed = settings.data_feeds[0]
        assert resolve_symbol_resource(feed).symbol == "BTCUSDT"

    def test_empty(self) -> None:
        """Missing data_feeds should give no feeds."""
        assert OracleSettings.from_dict({}).data_feeds == []

    def test_missing_id(self) -> None:
        """Entries without an id should raise."""
        with pytest.raises(ConfigDecodeError, match="missing string 'id'"):
            OracleSettings.from_dict({"data_feeds": [{"data": "x"}]})

    def test_missing_data(self) -> None:
        """Entries without data should raise."""
        with pytest.raises(ConfigDecodeError, match="missing 'data'"):
            OracleSettings.from_dict({"data_feeds": [{"id": "1"}]})

    def test_data_feeds_not_list(self) -> None:
        """A non-list data_feeds should raise."""
        with pytest.raises(ConfigDecodeError, match="must be a list"):
            OracleSettings.from_dict({"data_feeds": "1"})
