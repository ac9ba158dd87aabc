"""Score and keyword filters."""

from ragcore.entities.node import NodeWithScore
from ragcore.entities.query import QueryBundle
from ragcore.errors import ConfigurationError

from .base import BaseNodePostprocessor


class SimilarityCutoffPostprocessor(BaseNodePostprocessor):
    """Drop nodes scoring below ``similarity_cutoff``; order is kept."""

    def __init__(self, similarity_cutoff: float = 0.0):
        self.similarity_cutoff = similarity_cutoff

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        return [item for item in nodes if item.score >= self.similarity_cutoff]


class TopKPostprocessor(BaseNodePostprocessor):
    """Keep the ``top_k`` highest-scoring nodes, ties in input order."""

    def __init__(self, top_k: int = 5):
        if top_k <= 0:
            raise ConfigurationError("top_k must be positive", details={"top_k": top_k})
        self.top_k = top_k

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        return sorted(nodes, key=lambda item: item.score, reverse=True)[:self.top_k]


class KeywordPostprocessor(BaseNodePostprocessor):
    """
    Filter nodes by substring keywords.

    A node is kept when its text contains every required keyword and none of
    the excluded ones.
    """

    def __init__(
        self,
        required_keywords: list[str] | None = None,
        exclude_keywords: list[str] | None = None,
        case_sensitive: bool = False,
    ):
        self.required_keywords = list(required_keywords or [])
        self.exclude_keywords = list(exclude_keywords or [])
        self.case_sensitive = case_sensitive

    def _normalize(self, text: str) -> str:
        return text if self.case_sensitive else text.lower()

    def _keep(self, text: str) -> bool:
        content = self._normalize(text)
        if not all(self._normalize(k) in content for k in self.required_keywords):
            return False
        return not any(self._normalize(k) in content for k in self.exclude_keywords)

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        return [item for item in nodes if self._keep(item.node.get_content())]
