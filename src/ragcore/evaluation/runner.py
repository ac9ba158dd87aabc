"""
Concurrent batch evaluation.

BatchRunner evaluates many samples with one evaluator, keeping a bounded
number of evaluations in flight. evaluate_many runs several evaluators over
the same samples and aggregates the outcome into an EvaluationReport.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Callable

from ragcore.errors import ConfigurationError
from ragcore.evaluation.base import BaseEvaluator
from ragcore.evaluation.types import BatchEvalSummary, EvalInput, EvalResult

logger = logging.getLogger(__name__)

# Called with (metric_name, completed, total)
EvaluationProgressCallback = Callable[[str, int, int], None]


class BatchRunner:
    """
    Runs one evaluator over many samples concurrently.

    At most ``concurrency`` evaluations run at the same time. Results come
    back in input order. An exception from a single evaluation becomes a
    failed EvalResult (NaN score, ``passing=False``) instead of aborting the
    batch; cancelling the run cancels every evaluation still in flight.

    Example:
        >>> runner = BatchRunner(FaithfulnessEvaluator(llm), concurrency=8)
        >>> results = await runner.run(samples)
        >>> BatchEvalSummary.from_results(results).mean_score
    """

    def __init__(self, evaluator: BaseEvaluator, concurrency: int = 4):
        if concurrency <= 0:
            raise ConfigurationError(
                "concurrency must be positive", details={"concurrency": concurrency}
            )
        self.evaluator = evaluator
        self.concurrency = concurrency

    async def run(
        self,
        samples: list[EvalInput],
        on_progress: EvaluationProgressCallback | None = None,
    ) -> list[EvalResult]:
        if not samples:
            return []

        name = self.evaluator.name
        semaphore = asyncio.Semaphore(self.concurrency)
        completed = 0

        async def evaluate_one(index: int, sample: EvalInput) -> EvalResult:
            nonlocal completed
            async with semaphore:
                try:
                    result = await self.evaluator.evaluate(sample)
                except Exception as e:
                    logger.error(f"[{name}] Sample {index + 1} failed: {e}")
                    result = EvalResult.failure(e, metric_name=name, sample=sample)
            completed += 1
            if on_progress:
                on_progress(name, completed, len(samples))
            return result

        return list(await asyncio.gather(
            *(evaluate_one(i, sample) for i, sample in enumerate(samples))
        ))


@dataclass
class EvaluationReport:
    """
    Results from several evaluators over the same samples.

    Attributes:
        results: Metric name -> per-sample results, in input order
        summaries: Metric name -> aggregate statistics
        sample_count: Number of samples evaluated
    """

    results: dict[str, list[EvalResult]]
    sample_count: int
    summaries: dict[str, BatchEvalSummary] = field(default_factory=dict)

    def __post_init__(self):
        for metric_name, results in self.results.items():
            if metric_name not in self.summaries:
                self.summaries[metric_name] = BatchEvalSummary.from_results(results, metric_name)

    def to_dict(self) -> dict:
        return {
            "sample_count": self.sample_count,
            "metrics": {
                name: {
                    "mean_score": None if math.isnan(summary.mean_score) else summary.mean_score,
                    "passing_rate": summary.passing_rate,
                    "error_count": summary.error_count,
                    "scores": [r.to_dict()["score"] for r in self.results[name]],
                }
                for name, summary in self.summaries.items()
            },
        }


async def evaluate_many(
    samples: list[EvalInput],
    evaluators: list[BaseEvaluator] | dict[str, BaseEvaluator],
    concurrency: int = 4,
    on_progress: EvaluationProgressCallback | None = None,
) -> EvaluationReport:
    """
    Run every evaluator on every sample.

    Evaluators run one after another; within an evaluator, samples run
    concurrently through a BatchRunner.

    Args:
        samples: Samples to evaluate
        evaluators: Evaluators, keyed by their ``name`` when given as a list
        concurrency: Maximum evaluations in flight per evaluator
        on_progress: Called with (metric_name, completed, total)
    """
    if isinstance(evaluators, dict):
        named = dict(evaluators)
    else:
        named = {evaluator.name: evaluator for evaluator in evaluators}

    if not samples:
        logger.warning("No samples provided for evaluation")
        return EvaluationReport(results={name: [] for name in named}, sample_count=0)

    logger.info(f"Starting evaluation: {len(samples)} samples, {len(named)} metrics")

    results: dict[str, list[EvalResult]] = {}
    for name, evaluator in named.items():
        results[name] = await BatchRunner(evaluator, concurrency=concurrency).run(
            samples, on_progress=on_progress
        )

    report = EvaluationReport(results=results, sample_count=len(samples))
    summary_str = ", ".join(
        f"{name}={summary.mean_score:.2f}" for name, summary in report.summaries.items()
    )
    logger.info(f"Evaluation complete. Summary: {summary_str}")
    return report
