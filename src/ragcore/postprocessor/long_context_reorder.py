"""Reorder nodes so the strongest sit at both ends of the context."""

from collections import deque

from ragcore.entities.node import NodeWithScore
from ragcore.entities.query import QueryBundle

from .base import BaseNodePostprocessor


class LongContextReorder(BaseNodePostprocessor):
    """
    Counter the "lost in the middle" effect of long prompts.

    Nodes are sorted by descending score (ties keep input order), then dealt
    alternately to the head and to the front of the tail, so the best nodes
    end up first and last and the weakest in the middle.
    """

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        ranked = sorted(nodes, key=lambda item: item.score, reverse=True)
        head: list[NodeWithScore] = []
        tail: deque[NodeWithScore] = deque()
        for i, item in enumerate(ranked):
            if i % 2 == 0:
                head.append(item)
            else:
                tail.appendleft(item)
        return head + list(tail)
