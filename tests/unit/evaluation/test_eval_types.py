"""Tests for evaluation data types."""

import math

import pytest

from ragcore.errors import ParseError, ValidationError
from ragcore.evaluation import BatchEvalSummary, EvalInput, EvalResult


class TestEvalInput:

    def test_builders_return_copies(self):
        base = EvalInput(query="q")
        full = base.with_response("r").with_contexts(["c"]).with_reference("ref")
        assert base.response is None
        assert (full.query, full.response, full.contexts, full.reference) == ("q", "r", ["c"], "ref")

    def test_missing_treats_empty_as_absent(self):
        sample = EvalInput(query="q", response="", contexts=[])
        assert sample.missing(("query", "response", "contexts", "reference")) == [
            "response", "contexts", "reference",
        ]

    def test_require(self):
        with pytest.raises(ValidationError, match="faithfulness requires response"):
            EvalInput(contexts=["c"]).require(("response", "contexts"), evaluator="faithfulness")


class TestEvalResult:

    def test_passing_derived_from_threshold(self):
        assert EvalResult.from_score(0.5, 0.5).passing
        assert not EvalResult.from_score(0.49, 0.5).passing

    def test_passing_not_recomputed(self):
        result = EvalResult.from_score(1.0, 0.5)
        result.score = 0.0
        assert result.passing

    def test_nan_never_passes(self):
        assert not EvalResult.from_score(math.nan, -math.inf).passing

    def test_sample_fields_echoed(self):
        sample = EvalInput(query="q", response="r", metadata={"id": 7})
        result = EvalResult.from_score(1.0, 0.5, sample=sample, metric_name="m")
        assert (result.query, result.response, result.metadata) == ("q", "r", {"id": 7})

    def test_failure(self):
        result = EvalResult.failure(ParseError("no verdict"), metric_name="faithfulness")
        assert math.isnan(result.score)
        assert not result.passing
        assert result.invalid
        assert result.error == "ParseError"
        assert "no verdict" in result.feedback
        assert result.to_dict()["score"] is None


class TestBatchEvalSummary:

    def test_from_results(self):
        results = [
            EvalResult.from_score(1.0, 0.5, metric_name="m"),
            EvalResult.from_score(0.0, 0.5, metric_name="m"),
            EvalResult.failure(ValueError("x"), metric_name="m"),
        ]
        summary = BatchEvalSummary.from_results(results)
        assert summary.metric_name == "m"
        assert summary.mean_score == 0.5
        assert summary.passing_rate == pytest.approx(1 / 3)
        assert summary.sample_count == 3
        assert summary.error_count == 1

    def test_empty(self):
        summary = BatchEvalSummary.from_results([], metric_name="m")
        assert math.isnan(summary.mean_score)
        assert summary.passing_rate == 0.0
