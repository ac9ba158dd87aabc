"""Recency-aware reweighting of nodes that carry a date in their metadata."""

from datetime import date, datetime, timedelta, timezone
from enum import StrEnum
from typing import Callable

from loguru import logger

from ragcore.entities.node import NodeWithScore, TextNode
from ragcore.entities.query import QueryBundle
from ragcore.errors import ConfigurationError

from .base import BaseNodePostprocessor

# Tried after ISO 8601 when no date_format is configured
_FALLBACK_DATE_FORMATS = ("%m/%d/%Y", "%b %d, %Y")
_DEFAULT_HALF_LIFE = timedelta(days=1)


class TimeWeightMode(StrEnum):
    LINEAR = "linear"            # 1 at age 0, falling to 0 at max_age
    EXPONENTIAL = "exponential"  # decay_rate per half-life
    STEP = "step"                # recent_weight up to recent_threshold, old_weight after


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NodeRecencyPostprocessor(BaseNodePostprocessor):
    """
    Reweight nodes by the age of the date stored under ``date_key``.

    A node's adjusted score is its score times a weight derived from its age
    according to ``mode``. Nodes older than ``max_age`` are dropped. Nodes
    without a readable date keep their score, are never dropped for age and
    count as the oldest when sorting by date.

    The result is ordered by adjusted score, or by date (newest first) with
    ``sort_by_date``; ties keep input order. ``top_k`` then truncates it.

    Dates may be ``datetime``/``date`` objects, Unix timestamps or strings.
    Strings are read with ``date_format`` when given, otherwise as ISO 8601
    or one of a few common layouts. Naive values are taken as UTC.
    """

    def __init__(
        self,
        date_key: str = "date",
        date_format: str | None = None,
        mode: TimeWeightMode | str = TimeWeightMode.LINEAR,
        max_age: timedelta | None = None,
        decay_rate: float = 0.5,
        recent_threshold: timedelta = timedelta(hours=24),
        recent_weight: float = 1.0,
        old_weight: float = 0.5,
        top_k: int | None = None,
        sort_by_date: bool = False,
        now: Callable[[], datetime] = _utc_now,
    ):
        try:
            self.mode = TimeWeightMode(mode)
        except ValueError:
            raise ConfigurationError(
                f"Unknown time weight mode: '{mode}'",
                details={"available": [m.value for m in TimeWeightMode]},
            )
        if max_age is not None and max_age <= timedelta(0):
            raise ConfigurationError("max_age must be positive", details={"max_age": str(max_age)})
        if not 0 < decay_rate <= 1:
            raise ConfigurationError("decay_rate must be in (0, 1]", details={"decay_rate": decay_rate})
        if top_k is not None and top_k <= 0:
            raise ConfigurationError("top_k must be positive", details={"top_k": top_k})

        self.date_key = date_key
        self.date_format = date_format
        self.max_age = max_age
        self.decay_rate = decay_rate
        self.recent_threshold = recent_threshold
        self.recent_weight = recent_weight
        self.old_weight = old_weight
        self.top_k = top_k
        self.sort_by_date = sort_by_date
        self.now = now

    def node_date(self, node: TextNode) -> datetime | None:
        """The node's date as an aware datetime, or None if absent or unreadable."""
        value = node.metadata.get(self.date_key)
        if value is None:
            return None
        if isinstance(value, datetime):
            moment = value
        elif isinstance(value, date):
            moment = datetime(value.year, value.month, value.day)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        elif isinstance(value, str):
            moment = self._parse_date(value.strip())
            if moment is None:
                return None
        else:
            return None
        return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)

    def _parse_date(self, text: str) -> datetime | None:
        if self.date_format:
            try:
                return datetime.strptime(text, self.date_format)
            except ValueError:
                pass
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
        for fmt in _FALLBACK_DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        return None

    def weight(self, age: timedelta) -> float:
        """Multiplier applied to the score of a node of the given age."""
        age = max(age, timedelta(0))
        if self.mode is TimeWeightMode.LINEAR:
            if self.max_age is None:
                return 1.0
            return max(0.0, 1.0 - age / self.max_age)
        if self.mode is TimeWeightMode.EXPONENTIAL:
            half_life = self.max_age / 2 if self.max_age is not None else _DEFAULT_HALF_LIFE
            return self.decay_rate ** (age / half_life)
        return self.recent_weight if age <= self.recent_threshold else self.old_weight

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        now = self.now()
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        kept: list[tuple[NodeWithScore, datetime]] = []
        for item in nodes:
            moment = self.node_date(item.node)
            if moment is None:
                kept.append((item, oldest))
                continue
            age = now - moment
            if self.max_age is not None and age > self.max_age:
                continue
            kept.append((item.with_score(item.score * self.weight(age)), moment))

        dropped = len(nodes) - len(kept)
        if dropped:
            logger.debug(f"Dropped {dropped} node(s) older than {self.max_age}")

        if self.sort_by_date:
            kept.sort(key=lambda pair: pair[1], reverse=True)
        else:
            kept.sort(key=lambda pair: pair[0].score, reverse=True)

        result = [item for item, _ in kept]
        return result[:self.top_k] if self.top_k else result
