"""Base embedder interface."""

from abc import ABC, abstractmethod


class BaseEmbedder(ABC):
    """Abstract base class for embedding generation.

    Every vector produced by one instance has ``dimension`` entries.
    Embedders never cache; identical inputs are embedded again.
    """

    @abstractmethod
    async def get_text_embedding(self, text: str) -> list[float]:
        """Embed a single text."""

    async def get_text_embedding_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts, results in input order.

        Providers with a native batch endpoint override this; the default
        embeds one text at a time.
        """
        return [await self.get_text_embedding(text) for text in texts]

    async def get_query_embedding(self, query: str) -> list[float]:
        """Embed a query. Asymmetric models override this."""
        return await self.get_text_embedding(query)

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Size of embedding vectors produced by this embedder."""
