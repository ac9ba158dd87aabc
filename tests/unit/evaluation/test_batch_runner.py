"""Tests for BatchRunner and evaluate_many."""

import asyncio
import math

import pytest

from ragcore.errors import ConfigurationError, ParseError
from ragcore.evaluation import (
    BaseEvaluator,
    BatchRunner,
    EvalInput,
    EvalResult,
    FaithfulnessEvaluator,
    evaluate_many,
)
from ragcore.llm import MockLLM


class LengthEvaluator(BaseEvaluator):
    """Scores the query length; later samples finish first."""

    required_fields = ("query",)

    def __init__(self, total: int = 0, fail_on: str | None = None):
        super().__init__(threshold=3)
        self.total = total
        self.fail_on = fail_on
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def name(self) -> str:
        return "length"

    async def _evaluate(self, sample: EvalInput) -> EvalResult:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            index = int(sample.metadata.get("index", 0))
            await asyncio.sleep(0.001 * (self.total - index))
            if sample.query == self.fail_on:
                raise ParseError("judge rambled")
            return EvalResult.from_score(
                len(sample.query), self.threshold, sample=sample, metric_name=self.name
            )
        finally:
            self.in_flight -= 1


def make_samples(queries):
    return [EvalInput(query=q, metadata={"index": i}) for i, q in enumerate(queries)]


class TestBatchRunner:

    @pytest.mark.asyncio
    async def test_results_in_input_order(self):
        queries = ["a", "bb", "ccc", "dddd", "eeeee", "ffffff"]
        evaluator = LengthEvaluator(total=len(queries))
        results = await BatchRunner(evaluator, concurrency=3).run(make_samples(queries))

        assert [r.query for r in results] == queries
        assert [r.score for r in results] == [1, 2, 3, 4, 5, 6]
        assert [r.passing for r in results] == [False, False, True, True, True, True]

    @pytest.mark.asyncio
    async def test_concurrency_bound(self):
        evaluator = LengthEvaluator(total=8)
        await BatchRunner(evaluator, concurrency=2).run(make_samples(["q"] * 8))
        assert evaluator.max_in_flight <= 2

    @pytest.mark.asyncio
    async def test_failure_becomes_nan_result(self):
        evaluator = LengthEvaluator(total=3, fail_on="bad")
        results = await BatchRunner(evaluator).run(make_samples(["good", "bad", "fine"]))

        assert results[0].score == 4
        assert math.isnan(results[1].score)
        assert results[1].passing is False
        assert results[1].error == "ParseError"
        assert results[1].query == "bad"
        assert results[2].score == 4

    @pytest.mark.asyncio
    async def test_missing_fields_reported_per_sample(self):
        results = await BatchRunner(LengthEvaluator()).run([EvalInput(response="r")])
        assert results[0].error == "ValidationError"

    @pytest.mark.asyncio
    async def test_progress_callback(self):
        progress = []
        await BatchRunner(LengthEvaluator(total=3)).run(
            make_samples(["a", "b", "c"]),
            on_progress=lambda name, done, total: progress.append((name, done, total)),
        )
        assert progress == [("length", 1, 3), ("length", 2, 3), ("length", 3, 3)]

    @pytest.mark.asyncio
    async def test_empty(self):
        assert await BatchRunner(LengthEvaluator()).run([]) == []

    def test_invalid_concurrency(self):
        with pytest.raises(ConfigurationError):
            BatchRunner(LengthEvaluator(), concurrency=0)

    @pytest.mark.asyncio
    async def test_evaluate_batch_shortcut(self):
        results = await LengthEvaluator(total=2).evaluate_batch(make_samples(["abc", "de"]))
        assert [r.score for r in results] == [3, 2]

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        class SlowEvaluator(LengthEvaluator):
            async def _evaluate(self, sample):
                await asyncio.sleep(10)

        task = asyncio.create_task(BatchRunner(SlowEvaluator()).run(make_samples(["a", "b"])))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task


class TestEvaluateMany:

    @pytest.fixture
    def samples(self):
        return [
            EvalInput(query="Q1", response="R1", contexts=["C1"], metadata={"index": 0}),
            EvalInput(query="Q2", response="R2", contexts=["C2"], metadata={"index": 1}),
        ]

    @pytest.mark.asyncio
    async def test_report(self, samples):
        judge = MockLLM(responses=["YES", "NO"])
        report = await evaluate_many(
            samples,
            [FaithfulnessEvaluator(judge), LengthEvaluator(total=2)],
            concurrency=1,
        )

        assert report.sample_count == 2
        assert set(report.results) == {"faithfulness", "length"}
        assert [r.score for r in report.results["faithfulness"]] == [1.0, 0.0]
        assert report.summaries["faithfulness"].mean_score == 0.5
        assert report.summaries["faithfulness"].passing_rate == 0.5
        assert report.summaries["length"].mean_score == 2.0

        data = report.to_dict()
        assert data["metrics"]["faithfulness"]["scores"] == [1.0, 0.0]

    @pytest.mark.asyncio
    async def test_named_evaluators(self, samples):
        report = await evaluate_many(samples, {"len": LengthEvaluator(total=2)})
        assert list(report.results) == ["len"]

    @pytest.mark.asyncio
    async def test_failed_samples_counted(self, samples):
        judge = MockLLM(responses=["YES", "unclear"])
        report = await evaluate_many(samples, [FaithfulnessEvaluator(judge)], concurrency=1)

        summary = report.summaries["faithfulness"]
        assert summary.error_count == 1
        assert summary.mean_score == 1.0
        assert report.to_dict()["metrics"]["faithfulness"]["scores"] == [1.0, None]

    @pytest.mark.asyncio
    async def test_progress_per_metric(self, samples):
        seen = []
        await evaluate_many(
            samples,
            [LengthEvaluator(total=2)],
            on_progress=lambda name, done, total: seen.append((name, done, total)),
        )
        assert seen[-1] == ("length", 2, 2)

    @pytest.mark.asyncio
    async def test_no_samples(self):
        report = await evaluate_many([], [LengthEvaluator()])
        assert report.sample_count == 0
        assert report.results == {"length": []}
        assert report.summaries["length"].sample_count == 0
