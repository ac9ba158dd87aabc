"""Mock embedder for testing (no external API)."""

import asyncio
import hashlib
import random

from loguru import logger

from ragcore.errors import ConfigurationError, ValidationError

from ..base import BaseEmbedder


class MockEmbedder(BaseEmbedder):
    """Generates deterministic embeddings for testing.

    WARNING: This embedder is NOT suitable for production use.

    Texts found in ``vectors`` get that exact vector; any other text gets a
    unit vector seeded from a stable hash of the text, so equal texts always
    embed identically.

    Attributes:
        seed: Offset mixed into every text seed
        calls: Batches received, for assertions in tests
    """

    def __init__(
        self,
        dimension: int = 384,
        seed: int = 42,
        vectors: dict[str, list[float]] | None = None,
    ):
        if dimension <= 0:
            raise ConfigurationError(
                "Embedding dimension must be positive",
                details={"dimension": dimension},
            )
        self._dimension = dimension
        self.seed = seed
        self.vectors = dict(vectors or {})
        for text, vector in self.vectors.items():
            if len(vector) != dimension:
                raise ValidationError(
                    f"Vector for {text!r} has {len(vector)} entries, expected {dimension}"
                )
        self.calls: list[list[str]] = []
        logger.warning(
            "Using MockEmbedder - NOT for production use! "
            "Replace with real embedder for actual applications."
        )

    def _embed_one(self, text: str) -> list[float]:
        if text in self.vectors:
            return list(self.vectors[text])

        digest = hashlib.sha256(text.encode("utf-8")).digest()
        rng = random.Random(int.from_bytes(digest[:8], "big") + self.seed)
        vec = [rng.gauss(0, 1) for _ in range(self._dimension)]

        magnitude = sum(x**2 for x in vec) ** 0.5
        if magnitude > 0:
            return [x / magnitude for x in vec]
        return [0.0] * self._dimension

    async def get_text_embedding(self, text: str) -> list[float]:
        self.calls.append([text])
        await asyncio.sleep(0)
        return self._embed_one(text)

    async def get_text_embedding_batch(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        logger.debug(f"Generating {len(texts)} mock embeddings")
        await asyncio.sleep(0)
        return [self._embed_one(text) for text in texts]

    @property
    def dimension(self) -> int:
        return self._dimension
