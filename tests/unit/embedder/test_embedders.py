"""Tests for embedders: the deterministic mock, the OpenAI provider and the factory."""

from types import SimpleNamespace

import pytest

from ragcore.embedder import BaseEmbedder, EmbedderFactory, MockEmbedder
from ragcore.embedder.providers.openai import OpenAIEmbedder
from ragcore.errors import ConfigurationError, ProviderError, ValidationError
from ragcore.utils.similarity import cosine_similarity


class TestMockEmbedder:

    @pytest.mark.asyncio
    async def test_dimension_and_unit_norm(self):
        embedder = MockEmbedder(dimension=16)
        vector = await embedder.get_text_embedding("hello")
        assert len(vector) == 16
        assert sum(x * x for x in vector) == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_deterministic(self):
        a = await MockEmbedder(dimension=8).get_text_embedding("same text")
        b = await MockEmbedder(dimension=8).get_text_embedding("same text")
        assert a == b

    @pytest.mark.asyncio
    async def test_different_texts_differ(self):
        embedder = MockEmbedder(dimension=8)
        a, b = await embedder.get_text_embedding_batch(["one", "two"])
        assert cosine_similarity(a, b) < 0.99

    @pytest.mark.asyncio
    async def test_explicit_vectors(self):
        embedder = MockEmbedder(dimension=2, vectors={"a": [1.0, 0.0]})
        assert await embedder.get_query_embedding("a") == [1.0, 0.0]

    @pytest.mark.asyncio
    async def test_batch_preserves_order_and_records_calls(self):
        embedder = MockEmbedder(dimension=2, vectors={"x": [1.0, 0.0], "y": [0.0, 1.0]})
        assert await embedder.get_text_embedding_batch(["y", "x"]) == [[0.0, 1.0], [1.0, 0.0]]
        assert embedder.calls == [["y", "x"]]

    def test_zero_dimension_rejected(self):
        with pytest.raises(ConfigurationError):
            MockEmbedder(dimension=0)

    def test_wrong_vector_length_rejected(self):
        with pytest.raises(ValidationError):
            MockEmbedder(dimension=3, vectors={"a": [1.0, 0.0]})


class TestBaseEmbedderDefaults:

    @pytest.mark.asyncio
    async def test_batch_falls_back_to_single_calls(self):
        class CountingEmbedder(BaseEmbedder):
            def __init__(self):
                self.seen = []

            async def get_text_embedding(self, text):
                self.seen.append(text)
                return [float(len(text))]

            @property
            def dimension(self):
                return 1

        embedder = CountingEmbedder()
        assert await embedder.get_text_embedding_batch(["a", "bbb"]) == [[1.0], [3.0]]
        assert embedder.seen == ["a", "bbb"]


class TestOpenAIEmbedder:

    @pytest.fixture
    def client(self, mocker):
        client = mocker.MagicMock()

        async def create(model, input):
            return SimpleNamespace(data=[
                SimpleNamespace(index=i, embedding=[float(i), 1.0, 0.0]) for i in reversed(range(len(input)))
            ])

        client.embeddings.create = mocker.AsyncMock(side_effect=create)
        return client

    @pytest.mark.asyncio
    async def test_batches_and_orders_by_index(self, client):
        embedder = OpenAIEmbedder(client=client, model="custom", dimension=3, batch_size=2)
        vectors = await embedder.get_text_embedding_batch(["a", "b", "c"])
        assert [v[0] for v in vectors] == [0.0, 1.0, 0.0]
        assert client.embeddings.create.await_count == 2

    @pytest.mark.asyncio
    async def test_dimension_mismatch_is_provider_error(self, client):
        embedder = OpenAIEmbedder(client=client, model="custom", dimension=4)
        with pytest.raises(ProviderError):
            await embedder.get_text_embedding("a")

    def test_known_dimension(self, client):
        assert OpenAIEmbedder(client=client, model="text-embedding-3-large").dimension == 3072

    def test_unknown_model_needs_dimension(self, client):
        with pytest.raises(ConfigurationError):
            OpenAIEmbedder(client=client, model="custom")


class TestEmbedderFactory:

    def test_create_mock(self):
        embedder = EmbedderFactory.create("mock", dimension=4)
        assert embedder.dimension == 4

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError):
            EmbedderFactory.create("nonexistent")
