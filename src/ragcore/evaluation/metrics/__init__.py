"""Evaluation metrics."""

from .answer_relevancy import AnswerRelevancyEvaluator
from .context_relevancy import ContextRelevancyEvaluator
from .correctness import CorrectnessEvaluator
from .faithfulness import FaithfulnessEvaluator
from .relevancy import RelevancyEvaluator
from .semantic_similarity import SemanticSimilarityEvaluator

__all__ = [
    "AnswerRelevancyEvaluator",
    "ContextRelevancyEvaluator",
    "CorrectnessEvaluator",
    "FaithfulnessEvaluator",
    "RelevancyEvaluator",
    "SemanticSimilarityEvaluator",
]
