#!/usr/bin/env python3
"""Price Feed Adapter.

Runs one oracle request over the feeds listed in a settings file and prints
the resulting payload as JSON. Stands in for the hosting runtime during local
development.

Settings file format:
    {"data_feeds": [{"id": "F1", "data": "{\\"symbol\\": \\"BTCUSDT\\"}"}]}
"""

import argparse
import asyncio
import json
import logging
import os
import sys

from .src.FeedAdapter import ADAPTER_REGISTRY, get_adapter
from .src.FeedConfig import OracleSettings
from .src.fetchers import BaseFetcher
from .src.PriceFeedOracle import PriceFeedOracle
from .src.ResultAssembler import Payload

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def parse_text_feeds(text_feeds_str: str | None) -> dict[str, str]:
    """Parse comma-separated text feed assignments into a dictionary.

    Format: id1=text1,id2=text2
    Example: 222=Hello awesome Blockchain

    :param text_feeds_str: Comma-separated assignment string.
    :returns: Dict mapping feed ids to the text they report.
    """
    if not text_feeds_str:
        return {}

    text_feeds = {}
    for item in text_feeds_str.split(","):
        item = item.strip()
        if "=" in item:
            feed_id, text = item.split("=", 1)
            text_feeds[feed_id.strip()] = text.strip()
    return text_feeds


def env_flag(name: str) -> bool:
    """Read a boolean flag from the environment ("1", "true", "yes")."""
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes")


def load_settings(path: str) -> OracleSettings:
    """Load host settings from a JSON file.

    :param path: Path to the settings file.
    :returns: Parsed OracleSettings.
    :raises ConfigDecodeError: If the file content has the wrong shape.
    """
    with open(path, encoding="utf-8") as f:
        return OracleSettings.from_dict(json.load(f))


async def run(oracle: PriceFeedOracle, settings: OracleSettings) -> Payload:
    """Run a single oracle request and release the shared HTTP client."""
    try:
        return await oracle.oracle_request(settings)
    finally:
        await BaseFetcher.close_shared_client()


def main() -> None:
    """Main entry point for the Price Feed Adapter CLI."""
    available_adapters = sorted(ADAPTER_REGISTRY.keys())

    parser = argparse.ArgumentParser(
        description="Price Feed Adapter: one result per configured data feed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available adapters:
  {', '.join(available_adapters)}

Examples:
  # Latest hourly close for every symbol feed
  python -m price_feed.main --feeds-file feeds.json

  # Daily candles instead of hourly
  python -m price_feed.main --feeds-file feeds.json --interval 1d

  # Quote feeds with feed 222 reporting a fixed string
  python -m price_feed.main --adapter revolut --feeds-file quotes.json \\
      --text-feeds "222=Hello awesome Blockchain"

Environment variables (CLI args take precedence):
  ADAPTER, FEEDS_FILE, KLINE_INTERVAL, KLINE_LIMIT, TEXT_FEEDS,
  LENIENT_CONFIG, SEQUENTIAL
""",
    )

    parser.add_argument(
        "--adapter",
        type=str,
        help=f"Feed adapter to use. Available: {', '.join(available_adapters)}",
        default=os.environ.get("ADAPTER") or "binance",
    )

    parser.add_argument(
        "--feeds-file",
        dest="feeds_file",
        type=str,
        help="JSON settings file with a 'data_feeds' list",
        default=os.environ.get("FEEDS_FILE"),
    )

    parser.add_argument(
        "--interval",
        type=str,
        help="Kline interval for the binance adapter (default: 1h)",
        default=os.environ.get("KLINE_INTERVAL") or "1h",
    )

    parser.add_argument(
        "--limit",
        type=int,
        help="Klines requested per feed (default: 1, the latest)",
        default=int(os.environ.get("KLINE_LIMIT") or "1"),
    )

    parser.add_argument(
        "--text-feeds",
        dest="text_feeds",
        type=str,
        help="Comma-separated text feeds for the revolut adapter (e.g., 222=hello)",
        default=os.environ.get("TEXT_FEEDS"),
    )

    parser.add_argument(
        "--lenient-config",
        dest="lenient_config",
        action="store_true",
        help="Report misconfigured feeds as errors instead of failing the request",
        default=env_flag("LENIENT_CONFIG"),
    )

    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Fetch feeds one after another instead of concurrently",
        default=env_flag("SEQUENTIAL"),
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Validate arguments
    if args.adapter not in available_adapters:
        parser.error(
            f"Unknown adapter: {args.adapter}. "
            f"Available: {', '.join(available_adapters)}"
        )

    if not args.feeds_file:
        parser.error("--feeds-file (or FEEDS_FILE) is required")

    if args.limit < 1:
        parser.error("--limit must be at least 1")

    text_feeds = parse_text_feeds(args.text_feeds)
    if text_feeds and args.adapter != "revolut":
        parser.error("--text-feeds is only supported by the revolut adapter")

    if args.adapter == "binance":
        adapter = get_adapter(
            "binance",
            fetcher_options={"interval": args.interval, "limit": args.limit},
        )
    else:
        adapter = get_adapter(args.adapter, text_values=text_feeds)

    try:
        settings = load_settings(args.feeds_file)

        logger.info("=" * 60)
        logger.info("Price Feed Adapter")
        logger.info("=" * 60)
        logger.info(f"Adapter:           {args.adapter}")
        logger.info(f"Feeds:             {len(settings.data_feeds)}")
        if args.adapter == "binance":
            logger.info(f"Interval/Limit:    {args.interval}/{args.limit}")
        if text_feeds:
            logger.info(f"Text Feeds:        {', '.join(text_feeds.keys())}")
        logger.info(f"Config Errors:     {'per-feed' if args.lenient_config else 'fatal'}")
        logger.info(f"Mode:              {'sequential' if args.sequential else 'concurrent'}")
        logger.info("=" * 60)

        oracle = PriceFeedOracle(
            adapter,
            concurrent=not args.sequential,
            strict_config=not args.lenient_config,
        )
        payload = asyncio.run(run(oracle, settings))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)

    print(json.dumps(payload.to_dict(), indent=2))


if __name__ == "__main__":
    main()
