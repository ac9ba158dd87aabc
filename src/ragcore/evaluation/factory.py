"""Evaluator factory for creating evaluator instances."""

from typing import Any

from loguru import logger

from ragcore.errors import ConfigurationError

from .base import BaseEvaluator
from .metrics import (
    AnswerRelevancyEvaluator,
    ContextRelevancyEvaluator,
    CorrectnessEvaluator,
    FaithfulnessEvaluator,
    RelevancyEvaluator,
    SemanticSimilarityEvaluator,
)


class EvaluatorFactory:
    """Factory for creating evaluators by metric name.

    Judge evaluators expect an ``llm`` param, ``semantic_similarity``
    expects an ``embed_model``.
    """

    _registry: dict[str, type[BaseEvaluator]] = {
        "faithfulness": FaithfulnessEvaluator,
        "relevancy": RelevancyEvaluator,
        "answer_relevancy": AnswerRelevancyEvaluator,
        "correctness": CorrectnessEvaluator,
        "context_relevancy": ContextRelevancyEvaluator,
        "semantic_similarity": SemanticSimilarityEvaluator,
    }

    @classmethod
    def create(cls, evaluator_type: str, **params: Any) -> BaseEvaluator:
        """Create an evaluator by metric name.

        Raises:
            ConfigurationError: If the metric is not registered
        """
        if evaluator_type not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise ConfigurationError(
                f"Unknown evaluator type: '{evaluator_type}'. Available types: {available}"
            )

        evaluator_class = cls._registry[evaluator_type]
        logger.debug(f"Creating {evaluator_class.__name__} with params: {sorted(params)}")
        return evaluator_class(**params)

    @classmethod
    def register(cls, evaluator_type: str, evaluator_class: type[BaseEvaluator]):
        """Register a new evaluator type.

        Raises:
            TypeError: If evaluator_class is not a subclass of BaseEvaluator
        """
        if not issubclass(evaluator_class, BaseEvaluator):
            raise TypeError(f"{evaluator_class.__name__} must be a subclass of BaseEvaluator")

        cls._registry[evaluator_type] = evaluator_class
        logger.info(f"Registered evaluator type '{evaluator_type}': {evaluator_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        return list(cls._registry.keys())
