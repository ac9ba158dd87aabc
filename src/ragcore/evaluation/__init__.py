"""
RAG evaluation.

Judge evaluators ask an LLM whether a response is faithful, relevant or
correct; SemanticSimilarityEvaluator compares embeddings instead. Every
evaluator returns an EvalResult, and BatchRunner/evaluate_many run them
over many samples concurrently.

Example:
    >>> from ragcore.evaluation import EvalInput, FaithfulnessEvaluator, evaluate_many
    >>> report = await evaluate_many(samples, [FaithfulnessEvaluator(llm)], concurrency=8)
    >>> report.summaries["faithfulness"].mean_score
"""

from .base import BaseEvaluator, BaseJudgeEvaluator
from .factory import EvaluatorFactory
from .metrics import (
    AnswerRelevancyEvaluator,
    ContextRelevancyEvaluator,
    CorrectnessEvaluator,
    FaithfulnessEvaluator,
    RelevancyEvaluator,
    SemanticSimilarityEvaluator,
)
from .runner import BatchRunner, EvaluationProgressCallback, EvaluationReport, evaluate_many
from .types import BatchEvalSummary, EvalInput, EvalResult

__all__ = [
    "AnswerRelevancyEvaluator",
    "BaseEvaluator",
    "BaseJudgeEvaluator",
    "BatchEvalSummary",
    "BatchRunner",
    "ContextRelevancyEvaluator",
    "CorrectnessEvaluator",
    "EvalInput",
    "EvalResult",
    "EvaluationProgressCallback",
    "EvaluationReport",
    "EvaluatorFactory",
    "FaithfulnessEvaluator",
    "RelevancyEvaluator",
    "SemanticSimilarityEvaluator",
    "evaluate_many",
]
