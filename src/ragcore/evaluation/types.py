"""
Data types for evaluation.

EvalInput carries whatever a caller has for one RAG turn; each evaluator
declares which of its fields it needs. EvalResult is the uniform record
every evaluator produces.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any

from ragcore.errors import ValidationError

EVAL_FIELDS = ("query", "response", "contexts", "reference")


@dataclass(frozen=True)
class EvalInput:
    """
    One sample to evaluate.

    Attributes:
        query: The user's question
        response: The generated answer
        contexts: Retrieved context passages
        reference: Reference answer for reference-based metrics
        metadata: Free-form tags carried into the result
    """

    query: str | None = None
    response: str | None = None
    contexts: list[str] | None = None
    reference: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def with_query(self, query: str) -> "EvalInput":
        return replace(self, query=query)

    def with_response(self, response: str) -> "EvalInput":
        return replace(self, response=response)

    def with_contexts(self, contexts: list[str]) -> "EvalInput":
        return replace(self, contexts=list(contexts))

    def with_reference(self, reference: str) -> "EvalInput":
        return replace(self, reference=reference)

    def missing(self, fields: tuple[str, ...]) -> list[str]:
        """Required fields that are absent or empty."""
        return [name for name in fields if not getattr(self, name)]

    def require(self, fields: tuple[str, ...], evaluator: str = "evaluator") -> None:
        """
        Raises:
            ValidationError: Naming every missing field
        """
        missing = self.missing(fields)
        if missing:
            raise ValidationError(
                f"{evaluator} requires {', '.join(missing)}",
                details={"missing": missing, "evaluator": evaluator},
            )


@dataclass
class EvalResult:
    """
    Result of evaluating one input with one evaluator.

    ``passing`` is decided once, when the result is built from a score and a
    threshold, and is not recomputed afterwards.

    Attributes:
        score: Metric value; NaN when the evaluation itself failed
        passing: Whether the score met the evaluator's threshold
        feedback: Judge rationale, or the error text for failed evaluations
        metric_name: Name of the evaluator that produced this result
        pairwise_source: Which candidate won, for pairwise comparisons
        error: Error type name when the evaluation failed
    """

    score: float
    passing: bool
    feedback: str = ""
    metric_name: str = ""
    query: str | None = None
    response: str | None = None
    contexts: list[str] | None = None
    reference: str | None = None
    pairwise_source: str | None = None
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_score(
        cls,
        score: float,
        threshold: float,
        sample: EvalInput | None = None,
        **kwargs: Any,
    ) -> "EvalResult":
        passing = not math.isnan(score) and score >= threshold
        return cls(score=score, passing=passing, **_echo(sample), **kwargs)

    @classmethod
    def failure(
        cls,
        error: BaseException,
        metric_name: str = "",
        sample: EvalInput | None = None,
    ) -> "EvalResult":
        return cls(
            score=math.nan,
            passing=False,
            feedback=str(error) or type(error).__name__,
            metric_name=metric_name,
            error=type(error).__name__,
            **_echo(sample),
        )

    @property
    def invalid(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "metric_name": self.metric_name,
            "score": None if math.isnan(self.score) else self.score,
            "passing": self.passing,
            "feedback": self.feedback,
            "error": self.error,
        }


def _echo(sample: EvalInput | None) -> dict[str, Any]:
    if sample is None:
        return {}
    return {
        "query": sample.query,
        "response": sample.response,
        "contexts": list(sample.contexts) if sample.contexts is not None else None,
        "reference": sample.reference,
        "metadata": dict(sample.metadata),
    }


@dataclass
class BatchEvalSummary:
    """
    Aggregate statistics for a batch of results from one evaluator.

    Attributes:
        metric_name: Name of the metric
        mean_score: Mean of the non-NaN scores (NaN when there are none)
        passing_rate: Fraction of all results that passed
        sample_count: Number of results
        error_count: Number of failed evaluations
    """

    metric_name: str
    mean_score: float
    passing_rate: float
    sample_count: int
    error_count: int = 0

    @classmethod
    def from_results(cls, results: list[EvalResult], metric_name: str = "") -> "BatchEvalSummary":
        scored = [r.score for r in results if not math.isnan(r.score)]
        return cls(
            metric_name=metric_name or (results[0].metric_name if results else ""),
            mean_score=sum(scored) / len(scored) if scored else math.nan,
            passing_rate=sum(r.passing for r in results) / len(results) if results else 0.0,
            sample_count=len(results),
            error_count=sum(1 for r in results if r.invalid),
        )
