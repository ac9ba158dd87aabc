"""Sentence-level trimming of node text by similarity to the query."""

import re

from loguru import logger

from ragcore.embedder.base import BaseEmbedder
from ragcore.entities.node import NodeWithScore
from ragcore.entities.query import QueryBundle
from ragcore.errors import ConfigurationError, ValidationError
from ragcore.utils.similarity import cosine_similarity

from .base import BaseNodePostprocessor

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text) if s.strip()]


class SentenceEmbeddingOptimizer(BaseNodePostprocessor):
    """
    Shorten each node to the sentences most similar to the query.

    Sentences scoring at least ``threshold`` are ranked by cosine similarity
    to the query embedding, the best ``top_k`` are kept together with
    ``context_window`` neighbours on each side, and they are rejoined in
    their original order. The untouched text is stored under
    ``metadata["original_text"]``. Nodes without a qualifying sentence are
    returned unchanged.

    The query embedding is taken from the query bundle when present,
    otherwise it is computed with ``embed_model``.
    """

    def __init__(
        self,
        embed_model: BaseEmbedder,
        top_k: int = 5,
        threshold: float = 0.0,
        context_window: int = 0,
    ):
        if top_k <= 0:
            raise ConfigurationError("top_k must be positive", details={"top_k": top_k})
        if context_window < 0:
            raise ConfigurationError("context_window must be non-negative")
        self.embed_model = embed_model
        self.top_k = top_k
        self.threshold = threshold
        self.context_window = context_window

    async def _optimize(self, text: str, query_embedding: list[float]) -> str | None:
        sentences = split_sentences(text)
        if len(sentences) <= 1:
            return None

        embeddings = await self.embed_model.get_text_embedding_batch(sentences)
        scored = [
            (i, cosine_similarity(query_embedding, vector))
            for i, vector in enumerate(embeddings)
        ]
        scored = [(i, score) for i, score in scored if score >= self.threshold]
        if not scored:
            return None

        best = sorted(scored, key=lambda pair: pair[1], reverse=True)[:self.top_k]
        selected: set[int] = set()
        for index, _ in best:
            low = max(0, index - self.context_window)
            high = min(len(sentences), index + self.context_window + 1)
            selected.update(range(low, high))
        return " ".join(sentences[i] for i in sorted(selected))

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        if query_bundle is None:
            raise ValidationError("SentenceEmbeddingOptimizer requires a query bundle")
        query_bundle = await query_bundle.with_embedding(self.embed_model)

        result = []
        trimmed = 0
        for item in nodes:
            text = item.node.get_content()
            optimized = await self._optimize(text, query_bundle.embedding)
            if optimized is None or optimized == text:
                result.append(item)
                continue
            node = item.node.with_text(optimized)
            node.metadata["original_text"] = text
            result.append(item.with_node(node))
            trimmed += 1

        logger.debug(f"Sentence optimizer trimmed {trimmed}/{len(nodes)} nodes")
        return result
