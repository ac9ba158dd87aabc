"""OpenAI-compatible embeddings provider."""

import openai
from loguru import logger
from openai import AsyncOpenAI

from ragcore.errors import ConfigurationError, ProviderError
from ragcore.llm.config import TimeoutConfig
from ragcore.llm.providers.openai import translate_error

from ..base import BaseEmbedder

KNOWN_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbedder(BaseEmbedder):
    """Embeddings from an OpenAI-compatible ``/embeddings`` endpoint.

    Args:
        client: Pre-built ``AsyncOpenAI`` client; built from settings when omitted
        model: Embedding model name
        dimension: Required for models missing from the known table
        batch_size: Maximum texts per request
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        dimension: int | None = None,
        batch_size: int = 512,
        timeout: TimeoutConfig | None = None,
    ):
        if client is None or model is None:
            from ragcore.config.settings import load_settings

            settings = load_settings()
            model = model or settings.OPENAI_EMBEDDING_MODEL
            if client is None:
                api_key = api_key or settings.OPENAI_API_KEY
                if not api_key:
                    raise ConfigurationError(
                        "OpenAIEmbedder requires an API key",
                        details={"hint": "pass api_key or set OPENAI_API_KEY"},
                    )
                client = AsyncOpenAI(
                    api_key=api_key,
                    base_url=base_url or settings.OPENAI_URL,
                    timeout=(timeout or TimeoutConfig.long_running()).to_httpx(),
                    max_retries=0,
                )

        dimension = dimension or KNOWN_DIMENSIONS.get(model, 0)
        if dimension <= 0:
            raise ConfigurationError(
                f"Unknown embedding dimension for model '{model}'",
                details={"hint": "pass dimension explicitly"},
            )
        if batch_size <= 0:
            raise ConfigurationError("batch_size must be positive")

        self.client = client
        self.model = model
        self.batch_size = batch_size
        self._dimension = dimension
        logger.info(f"OpenAIEmbedder initialized with model: {model} (dim={dimension})")

    async def _request(self, texts: list[str]) -> list[list[float]]:
        try:
            response = await self.client.embeddings.create(model=self.model, input=texts)
        except openai.OpenAIError as e:
            raise translate_error(e) from e

        data = sorted(response.data, key=lambda item: item.index)
        if len(data) != len(texts):
            raise ProviderError(
                f"Expected {len(texts)} embeddings, received {len(data)}"
            )
        vectors = [list(item.embedding) for item in data]
        for vector in vectors:
            if len(vector) != self._dimension:
                raise ProviderError(
                    f"Embedding has {len(vector)} entries, expected {self._dimension}"
                )
        return vectors

    async def get_text_embedding(self, text: str) -> list[float]:
        return (await self._request([text]))[0]

    async def get_text_embedding_batch(self, texts: list[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            vectors.extend(await self._request(texts[start:start + self.batch_size]))
        return vectors

    @property
    def dimension(self) -> int:
        return self._dimension
