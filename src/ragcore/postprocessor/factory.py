"""Postprocessor factory for creating node postprocessors."""

from typing import Any

from loguru import logger

from ragcore.errors import ConfigurationError

from .base import BaseNodePostprocessor, PostprocessorChain
from .filters import KeywordPostprocessor, SimilarityCutoffPostprocessor, TopKPostprocessor
from .llm_rerank import LLMRerank
from .long_context_reorder import LongContextReorder
from .metadata_replacement import MetadataReplacementPostprocessor
from .optimizer import SentenceEmbeddingOptimizer
from .pii import PIIPostprocessor
from .rankgpt_rerank import RankGPTRerank, SlidingWindowRankGPTRerank
from .recency import NodeRecencyPostprocessor


class PostprocessorFactory:
    """Factory for creating postprocessor instances based on type.

    Types that need a model (``llm_rerank``, ``rankgpt``, ``sentence_optimizer``)
    expect the ``llm`` or ``embed_model`` instance among the params.
    """

    _registry: dict[str, type[BaseNodePostprocessor]] = {
        "metadata_replacement": MetadataReplacementPostprocessor,
        "llm_rerank": LLMRerank,
        "rankgpt": RankGPTRerank,
        "rankgpt_sliding_window": SlidingWindowRankGPTRerank,
        "long_context_reorder": LongContextReorder,
        "similarity_cutoff": SimilarityCutoffPostprocessor,
        "top_k": TopKPostprocessor,
        "keyword": KeywordPostprocessor,
        "sentence_optimizer": SentenceEmbeddingOptimizer,
        "node_recency": NodeRecencyPostprocessor,
        "pii": PIIPostprocessor,
    }

    @classmethod
    def create(cls, postprocessor_type: str, **params: Any) -> BaseNodePostprocessor:
        """Create a postprocessor instance by type.

        Raises:
            ConfigurationError: If postprocessor type is not registered
        """
        if postprocessor_type not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise ConfigurationError(
                f"Unknown postprocessor type: '{postprocessor_type}'. "
                f"Available types: {available}"
            )

        postprocessor_class = cls._registry[postprocessor_type]
        logger.debug(f"Creating {postprocessor_class.__name__} with params: {sorted(params)}")
        return postprocessor_class(**params)

    @classmethod
    def create_chain(cls, specs: list[tuple[str, dict[str, Any]]]) -> PostprocessorChain:
        """Build a chain from ``(type, params)`` pairs, applied in list order."""
        return PostprocessorChain([cls.create(kind, **params) for kind, params in specs])

    @classmethod
    def register(cls, postprocessor_type: str, postprocessor_class: type[BaseNodePostprocessor]):
        """Register a new postprocessor type.

        Raises:
            TypeError: If postprocessor_class is not a subclass of BaseNodePostprocessor
        """
        if not issubclass(postprocessor_class, BaseNodePostprocessor):
            raise TypeError(
                f"{postprocessor_class.__name__} must be a subclass of BaseNodePostprocessor"
            )

        cls._registry[postprocessor_type] = postprocessor_class
        logger.info(f"Registered postprocessor type '{postprocessor_type}': {postprocessor_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        return list(cls._registry.keys())
