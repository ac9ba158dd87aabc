"""Base postprocessor interface and chain composition."""

from abc import ABC, abstractmethod

from ragcore.entities.node import NodeWithScore
from ragcore.entities.query import QueryBundle
from ragcore.errors import ValidationError


def check_unique_ids(nodes: list[NodeWithScore]) -> None:
    """Raise ValidationError if two nodes share an id."""
    seen: set[str] = set()
    for item in nodes:
        if item.node.id in seen:
            raise ValidationError(
                f"Duplicate node id in postprocessor input: {item.node.id}",
                details={"node_id": item.node.id},
            )
        seen.add(item.node.id)


class BaseNodePostprocessor(ABC):
    """Abstract base class for node postprocessors.

    Postprocessors take retrieved nodes and return a fresh list that is no
    longer than the input. Node ids are preserved; scores may be rewritten.
    Input nodes are never mutated: a changed node is a new object.

    Implementations override ``_postprocess_nodes``; the public entry point
    validates the input first.
    """

    async def postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None = None,
    ) -> list[NodeWithScore]:
        check_unique_ids(nodes)
        if not nodes:
            return []
        return await self._postprocess_nodes(list(nodes), query_bundle)

    @abstractmethod
    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        """Transform a non-empty, id-unique node list."""

    @property
    def name(self) -> str:
        return type(self).__name__


class PostprocessorChain(BaseNodePostprocessor):
    """Applies postprocessors left to right; an empty chain is the identity."""

    def __init__(self, postprocessors: list[BaseNodePostprocessor] | None = None):
        self.postprocessors: list[BaseNodePostprocessor] = list(postprocessors or [])

    def add(self, postprocessor: BaseNodePostprocessor) -> "PostprocessorChain":
        self.postprocessors.append(postprocessor)
        return self

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        for postprocessor in self.postprocessors:
            nodes = await postprocessor.postprocess_nodes(nodes, query_bundle)
        return list(nodes)

    def __len__(self) -> int:
        return len(self.postprocessors)
