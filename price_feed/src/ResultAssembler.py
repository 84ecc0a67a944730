"""ResultAssembler: Turn per-feed observations into the reported payload.

Each feed ends its pipeline in one Observation:
    - PriceObserved: a price was selected
    - TextObserved: a text value should be reported
    - NoDataAvailable: the API answered with an empty data set
    - ObservationFailed: fetching or parsing failed

The assembler maps every observation to exactly one FeedResult, except text
values longer than MAX_TEXT_BYTES, which are dropped from the payload with a
warning because downstream storage cannot hold them.

.. code-block:: python

    >>> payload = ResultAssembler().assemble([
    ...     ("F1", PriceObserved(65000.5)),
    ...     ("F2", NoDataAvailable("ETHUSDT")),
    ... ])
    >>> [r.to_dict() for r in payload]
    [{'id': 'F1', 'value': {'Numerical': 65000.5}},
     {'id': 'F2', 'value': {'Error': 'No price data available for ETHUSDT'}}]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# Longest text value (in UTF-8 bytes) downstream storage accepts.
MAX_TEXT_BYTES = 24


@dataclass(frozen=True)
class PriceObserved:
    value: float


@dataclass(frozen=True)
class TextObserved:
    value: str


@dataclass(frozen=True)
class NoDataAvailable:
    """The API returned a well-formed but empty result for ``label``."""

    label: str


@dataclass(frozen=True)
class ObservationFailed:
    """Fetching or parsing failed for ``label``.

    :ivar label: Symbol or quote path the feed was configured with.
    :ivar cause: Underlying error.
    """

    label: str
    cause: BaseException


Observation = PriceObserved | TextObserved | NoDataAvailable | ObservationFailed


class ResultKind(str, Enum):
    NUMERICAL = "Numerical"
    TEXT = "Text"
    ERROR = "Error"


@dataclass(frozen=True)
class FeedResult:
    """Reported outcome for one feed.

    :ivar id: Feed identifier.
    :ivar kind: Which outcome variant this is.
    :ivar value: Float for numerical results, string otherwise.
    """

    id: str
    kind: ResultKind
    value: float | str

    @classmethod
    def numerical(cls, feed_id: str, value: float) -> FeedResult:
        return cls(feed_id, ResultKind.NUMERICAL, value)

    @classmethod
    def text(cls, feed_id: str, value: str) -> FeedResult:
        return cls(feed_id, ResultKind.TEXT, value)

    @classmethod
    def error(cls, feed_id: str, message: str) -> FeedResult:
        return cls(feed_id, ResultKind.ERROR, message)

    @property
    def is_error(self) -> bool:
        return self.kind is ResultKind.ERROR

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the host wire shape, e.g. ``{"Numerical": 1.5}``."""
        return {"id": self.id, "value": {self.kind.value: self.value}}


@dataclass
class Payload:
    """Ordered results of one invocation."""

    values: list[FeedResult] = field(default_factory=list)

    def append(self, result: FeedResult) -> None:
        self.values.append(result)

    def get(self, feed_id: str) -> FeedResult | None:
        """Get the result for a feed, or None if it was not reported."""
        for result in self.values:
            if result.id == feed_id:
                return result
        return None

    def __iter__(self) -> Iterator[FeedResult]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def to_dict(self) -> dict[str, Any]:
        return {"values": [result.to_dict() for result in self.values]}


class ResultAssembler:
    """Maps observations to FeedResults and accumulates the payload.

    :ivar max_text_bytes: Longest text value that is reported.
    """

    def __init__(self, max_text_bytes: int = MAX_TEXT_BYTES) -> None:
        self.max_text_bytes = max_text_bytes

    def to_result(self, feed_id: str, observation: Observation) -> FeedResult | None:
        """Map a single observation.

        :param feed_id: Feed identifier.
        :param observation: Outcome of the feed's pipeline.
        :returns: FeedResult, or None if the feed is omitted from the payload.
        """
        if isinstance(observation, PriceObserved):
            return FeedResult.numerical(feed_id, observation.value)

        if isinstance(observation, NoDataAvailable):
            return FeedResult.error(
                feed_id, f"No price data available for {observation.label}"
            )

        if isinstance(observation, ObservationFailed):
            return FeedResult.error(
                feed_id,
                f"Failed to fetch price data for {observation.label}: {observation.cause}",
            )

        if isinstance(observation, TextObserved):
            size = len(observation.value.encode("utf-8"))
            if size > self.max_text_bytes:
                logger.warning(
                    f"Feed {feed_id}: text value `{observation.value}` is {size} bytes, "
                    f"only {self.max_text_bytes} can be stored. Dropping from payload."
                )
                return None
            return FeedResult.text(feed_id, observation.value)

        return FeedResult.error(
            feed_id, f"Unsupported observation {type(observation).__name__}"
        )

    def assemble(self, observations: Iterable[tuple[str, Observation]]) -> Payload:
        """Build the payload, preserving the order of ``observations``.

        :param observations: (feed_id, observation) pairs.
        :returns: New Payload.
        """
        payload = Payload()
        for feed_id, observation in observations:
            result = self.to_result(feed_id, observation)
            if result is None:
                continue
            if result.is_error:
                logger.warning(f"Feed {feed_id}: {result.value}")
            else:
                logger.info(f"Feed {feed_id}: {result.kind.value}({result.value!r})")
            payload.append(result)
        return payload
