"""Swap node text for a metadata value, e.g. a sentence window."""

from ragcore.entities.node import NodeWithScore
from ragcore.entities.query import QueryBundle

from .base import BaseNodePostprocessor


class MetadataReplacementPostprocessor(BaseNodePostprocessor):
    """Replace each node's text with ``metadata[target_metadata_key]``.

    Nodes whose value is missing or not a string pass through unchanged.
    Order and scores are preserved.
    """

    def __init__(self, target_metadata_key: str):
        self.target_metadata_key = target_metadata_key

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        result = []
        for item in nodes:
            value = item.node.metadata.get(self.target_metadata_key)
            if isinstance(value, str):
                item = item.with_node(item.node.with_text(value))
            result.append(item)
        return result
