"""Tests for configuration models, settings and the component factory."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from ragcore.config import (
    ComponentConfig,
    ComponentFactory,
    PipelineConfig,
    ProviderSettings,
    load_settings,
)
from ragcore.embedder import MockEmbedder
from ragcore.errors import ConfigurationError
from ragcore.evaluation import CorrectnessEvaluator, SemanticSimilarityEvaluator
from ragcore.llm import MockLLM
from ragcore.memory import SummaryBufferMemory, TokenBufferMemory
from ragcore.postprocessor import LLMRerank, SentenceEmbeddingOptimizer, TopKPostprocessor

SETTINGS_KEYS = [
    "OPENAI_API_KEY", "OPENAI_URL",
    "OPENAI_MODEL", "OPENAI_EMBEDDING_MODEL",
]


class TestConfigModels:

    def test_component_defaults(self):
        config = ComponentConfig(type="top_k")
        assert config.params == {}

    def test_pipeline_from_dict(self):
        config = PipelineConfig.model_validate({
            "llm": {"type": "mock"},
            "postprocessors": [{"type": "top_k", "params": {"top_k": 2}}],
        })
        assert config.llm.type == "mock"
        assert config.postprocessors[0].params == {"top_k": 2}
        assert config.memory is None

    def test_eval_concurrency_positive(self):
        with pytest.raises(PydanticValidationError):
            PipelineConfig(eval_concurrency=0)


class TestComponentFactory:

    @pytest.fixture
    def config(self):
        return PipelineConfig(
            llm=ComponentConfig(type="mock", params={"default_response": "YES"}),
            embedder=ComponentConfig(type="mock", params={"dimension": 8}),
            memory=ComponentConfig(type="summary_buffer", params={"summary_token_limit": 100}),
            postprocessors=[
                ComponentConfig(type="llm_rerank", params={"top_n": 3}),
                ComponentConfig(type="sentence_optimizer"),
                ComponentConfig(type="top_k", params={"top_k": 2}),
            ],
            evaluators=[
                ComponentConfig(type="correctness", params={"threshold": 3.0}),
                ComponentConfig(type="semantic_similarity"),
            ],
            eval_concurrency=2,
        )

    def test_create_pipeline_shares_components(self, config):
        pipeline = ComponentFactory.create_pipeline(config)

        assert isinstance(pipeline.llm, MockLLM)
        assert isinstance(pipeline.embedder, MockEmbedder)

        assert isinstance(pipeline.memory, SummaryBufferMemory)
        assert pipeline.memory.summary_llm is pipeline.llm
        assert pipeline.memory.summary_token_limit == 100

        rerank, optimizer, top_k = pipeline.postprocessors.postprocessors
        assert isinstance(rerank, LLMRerank) and rerank.llm is pipeline.llm
        assert isinstance(optimizer, SentenceEmbeddingOptimizer)
        assert optimizer.embed_model is pipeline.embedder
        assert isinstance(top_k, TopKPostprocessor)

        correctness, similarity = pipeline.evaluators
        assert isinstance(correctness, CorrectnessEvaluator)
        assert correctness.llm is pipeline.llm
        assert correctness.threshold == 3.0
        assert isinstance(similarity, SemanticSimilarityEvaluator)
        assert similarity.embed_model is pipeline.embedder

        assert pipeline.eval_concurrency == 2

    def test_explicit_params_win(self):
        own = MockLLM()
        shared = MockLLM()
        memory = ComponentFactory.create_memory(
            ComponentConfig(type="summary_buffer", params={"summary_llm": own}),
            llm=shared,
        )
        assert memory.summary_llm is own

    def test_components_without_llm_params(self):
        memory = ComponentFactory.create_memory(
            ComponentConfig(type="token_buffer", params={"token_limit": 50}),
            llm=MockLLM(),
        )
        assert isinstance(memory, TokenBufferMemory)
        assert memory.token_limit == 50

    def test_empty_pipeline(self):
        pipeline = ComponentFactory.create_pipeline(PipelineConfig())
        assert pipeline.llm is None
        assert pipeline.memory is None
        assert len(pipeline.postprocessors) == 0
        assert pipeline.evaluators == []

    @pytest.mark.asyncio
    async def test_chain_runs(self, make_nodes):
        pipeline = ComponentFactory.create_pipeline(PipelineConfig(
            postprocessors=[
                ComponentConfig(type="similarity_cutoff", params={"similarity_cutoff": 0.3}),
                ComponentConfig(type="top_k", params={"top_k": 2}),
            ],
        ))
        result = await pipeline.postprocessors.postprocess_nodes(make_nodes([0.2, 0.9, 0.5, 0.4]))
        assert [item.node.id for item in result] == ["n1", "n2"]

    @pytest.mark.parametrize("method", ["create_memory", "create_evaluator"])
    def test_unknown_type(self, method):
        with pytest.raises(ConfigurationError):
            getattr(ComponentFactory, method)(ComponentConfig(type="nope"))

    def test_unknown_postprocessor(self):
        with pytest.raises(ConfigurationError):
            ComponentFactory.create_postprocessors([ComponentConfig(type="nope")])


class TestLoadSettings:

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        # setenv first so values loaded from .env files are removed on teardown
        for key in SETTINGS_KEYS:
            monkeypatch.setenv(key, "")
            monkeypatch.delenv(key)

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
        settings = load_settings(env_file=tmp_path / "missing.env")

        assert settings.OPENAI_API_KEY == "sk-test"
        assert settings.OPENAI_MODEL == "gpt-4o"
        assert settings.OPENAI_URL is None

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OPENAI_API_KEY=sk-file\nOPENAI_URL=http://localhost:8000/v1\n")
        settings = load_settings(env_file=env_file)

        assert settings.OPENAI_API_KEY == "sk-file"
        assert settings.OPENAI_URL == "http://localhost:8000/v1"
        assert settings.OPENAI_EMBEDDING_MODEL == "text-embedding-3-small"

    def test_environment_wins_over_file(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OPENAI_MODEL=from-file\n")
        monkeypatch.setenv("OPENAI_MODEL", "from-env")
        assert load_settings(env_file=env_file).OPENAI_MODEL == "from-env"

    def test_frozen(self):
        settings = ProviderSettings()
        with pytest.raises(PydanticValidationError):
            settings.OPENAI_MODEL = "gpt-4o"
