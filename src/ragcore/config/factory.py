"""Component factory for dynamic loading using type-based configuration."""

import inspect
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from ragcore.embedder import BaseEmbedder, EmbedderFactory
from ragcore.evaluation import BaseEvaluator, EvaluatorFactory
from ragcore.llm import BaseLLM, LLMFactory
from ragcore.memory import BaseMemory, MemoryFactory
from ragcore.postprocessor import PostprocessorChain, PostprocessorFactory

from .models import ComponentConfig, PipelineConfig


def _with_shared(
    component_class: type | None,
    params: dict[str, Any],
    llm: BaseLLM | None = None,
    embedder: BaseEmbedder | None = None,
) -> dict[str, Any]:
    """Add the shared LLM/embedder to params the constructor accepts but lacks."""
    if component_class is None:
        return dict(params)

    accepted = inspect.signature(component_class).parameters
    shared = {"llm": llm, "summary_llm": llm, "embed_model": embedder}
    merged = dict(params)
    for name, value in shared.items():
        if value is not None and name in accepted and name not in merged:
            merged[name] = value
    return merged


@dataclass
class Pipeline:
    """Components built from a PipelineConfig."""

    llm: BaseLLM | None = None
    embedder: BaseEmbedder | None = None
    memory: BaseMemory | None = None
    postprocessors: PostprocessorChain = field(default_factory=PostprocessorChain)
    evaluators: list[BaseEvaluator] = field(default_factory=list)
    eval_concurrency: int = 4


class ComponentFactory:
    """Unified factory for creating all component types.

    Delegates to the specialized factories. Components whose constructors
    take ``llm``, ``summary_llm`` or ``embed_model`` receive the shared
    instances unless their params set them explicitly.
    """

    @staticmethod
    def create_llm(config: ComponentConfig) -> BaseLLM:
        """Create an LLM from configuration."""
        logger.info(f"Creating LLM: {config.type}")
        return LLMFactory.create(config.type, **config.params)

    @staticmethod
    def create_embedder(config: ComponentConfig) -> BaseEmbedder:
        """Create an embedder from configuration."""
        logger.info(f"Creating embedder: {config.type}")
        return EmbedderFactory.create(config.type, **config.params)

    @staticmethod
    def create_memory(config: ComponentConfig, llm: BaseLLM | None = None) -> BaseMemory:
        """Create a memory buffer from configuration."""
        logger.info(f"Creating memory: {config.type}")
        params = _with_shared(MemoryFactory._registry.get(config.type), config.params, llm=llm)
        return MemoryFactory.create(config.type, **params)

    @staticmethod
    def create_postprocessors(
        configs: list[ComponentConfig],
        llm: BaseLLM | None = None,
        embedder: BaseEmbedder | None = None,
    ) -> PostprocessorChain:
        """Create a postprocessor chain, in list order."""
        chain = PostprocessorChain()
        for config in configs:
            logger.info(f"Creating postprocessor: {config.type}")
            params = _with_shared(
                PostprocessorFactory._registry.get(config.type), config.params, llm, embedder
            )
            chain.add(PostprocessorFactory.create(config.type, **params))
        return chain

    @staticmethod
    def create_evaluator(
        config: ComponentConfig,
        llm: BaseLLM | None = None,
        embedder: BaseEmbedder | None = None,
    ) -> BaseEvaluator:
        """Create an evaluator from configuration."""
        logger.info(f"Creating evaluator: {config.type}")
        params = _with_shared(EvaluatorFactory._registry.get(config.type), config.params, llm, embedder)
        return EvaluatorFactory.create(config.type, **params)

    @classmethod
    def create_pipeline(cls, config: PipelineConfig) -> Pipeline:
        """Build every configured component, sharing the LLM and embedder."""
        llm = cls.create_llm(config.llm) if config.llm is not None else None
        embedder = cls.create_embedder(config.embedder) if config.embedder is not None else None
        return Pipeline(
            llm=llm,
            embedder=embedder,
            memory=cls.create_memory(config.memory, llm) if config.memory is not None else None,
            postprocessors=cls.create_postprocessors(config.postprocessors, llm, embedder),
            evaluators=[cls.create_evaluator(c, llm, embedder) for c in config.evaluators],
            eval_concurrency=config.eval_concurrency,
        )
