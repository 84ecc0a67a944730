"""PriceFeedOracle: Fetch, normalize and report every configured feed.

One oracle request:
    1. Resolve every feed configuration (configuration errors abort the
       request unless strict_config is disabled)
    2. Run one task per feed, concurrently by default, and join them all
    3. Assemble the observations into a payload in configuration order

Feeds share no state, so tasks need no locking; each task writes only its
own slot of the joined result list.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from .errors import ConfigDecodeError
from .FeedAdapter import FeedAdapter
from .FeedConfig import FeedConfig, OracleSettings, ResourceDescriptor
from .ResultAssembler import Observation, ObservationFailed, Payload, ResultAssembler

logger = logging.getLogger(__name__)


class PriceFeedOracle:
    """Orchestrates a single oracle request over all configured feeds.

    :ivar adapter: Feed adapter used for every feed.
    :ivar assembler: Maps observations to results.
    :ivar concurrent: Run feeds as concurrent tasks (True) or one by one.
    :ivar strict_config: Raise on configuration errors instead of reporting
        them as per-feed errors.
    """

    def __init__(
        self,
        adapter: FeedAdapter,
        assembler: ResultAssembler | None = None,
        concurrent: bool = True,
        strict_config: bool = True,
    ) -> None:
        self.adapter = adapter
        self.assembler = assembler or ResultAssembler()
        self.concurrent = concurrent
        self.strict_config = strict_config

    async def oracle_request(
        self, settings: OracleSettings | Sequence[FeedConfig]
    ) -> Payload:
        """Produce the payload for one invocation.

        :param settings: Host settings, or the feed list directly.
        :returns: One result per reported feed, in configuration order.
        :raises ConfigDecodeError: If strict_config and a feed is misconfigured.
        """
        if isinstance(settings, OracleSettings):
            settings = settings.data_feeds
        feeds = self._unique_feeds(settings)

        resolved: list[tuple[FeedConfig, ResourceDescriptor | None]] = []
        observations: dict[str, Observation] = {}
        for feed in feeds:
            try:
                resolved.append((feed, self.adapter.resolve(feed)))
            except ConfigDecodeError as e:
                if self.strict_config:
                    raise
                logger.warning(f"Feed {feed.id}: {e}")
                observations[feed.id] = ObservationFailed(feed.id, e)

        if self.concurrent:
            results = await asyncio.gather(
                *(self._observe(feed, resource) for feed, resource in resolved)
            )
        else:
            results = [await self._observe(feed, resource) for feed, resource in resolved]

        for (feed, _), observation in zip(resolved, results, strict=True):
            observations[feed.id] = observation

        return self.assembler.assemble(
            (feed.id, observations[feed.id]) for feed in feeds
        )

    async def _observe(
        self, feed: FeedConfig, resource: ResourceDescriptor | None
    ) -> Observation:
        """Observe one feed, turning unexpected errors into a failed observation.

        :param feed: Configured feed.
        :param resource: Descriptor from the adapter's resolve().
        :returns: Observation for the feed.
        """
        try:
            return await self.adapter.observe(feed, resource)
        except Exception as e:
            logger.warning(f"Feed {feed.id}: unexpected error: {e!r}")
            label = resource.label if resource is not None else feed.id
            return ObservationFailed(label, e)

    @staticmethod
    def _unique_feeds(feeds: Sequence[FeedConfig]) -> list[FeedConfig]:
        """Keep one feed per id: the last configuration wins.

        The surviving feed takes the position where its id first appeared.

        :param feeds: Feeds in configuration order.
        :returns: Feeds with duplicate ids collapsed.
        """
        unique: dict[str, FeedConfig] = {}
        for feed in feeds:
            if feed.id in unique:
                logger.warning(
                    f"Feed {feed.id}: duplicate id, replacing earlier configuration"
                )
            unique[feed.id] = feed
        return list(unique.values())
