"""Query entity handed to postprocessors."""

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from ragcore.embedder.base import BaseEmbedder


class QueryBundle(BaseModel):
    """Represents the user's query.

    Attributes:
        query_str: The query text
        embedding: Optional pre-computed query embedding
    """

    query_str: str
    embedding: list[float] | None = None

    model_config = {
        "frozen": True,  # Queries are immutable
    }

    async def with_embedding(self, embedder: "BaseEmbedder") -> "QueryBundle":
        """Return a bundle that carries an embedding, computing it if absent."""
        if self.embedding is not None:
            return self
        vector = await embedder.get_query_embedding(self.query_str)
        return self.model_copy(update={"embedding": vector})

    def __str__(self) -> str:
        return self.query_str
