"""
Base evaluator interfaces.

Every evaluator turns an EvalInput into an EvalResult. Judge evaluators do
so by prompting an LLM (LLM-as-a-Judge):
1. Construct a prompt from the sample and the evaluation criteria
2. Send it to the judge, retrying once on transport errors
3. Parse the verdict leniently; an unreadable verdict is a ParseError
"""

import logging
from abc import ABC, abstractmethod

from ragcore.evaluation.types import EvalInput, EvalResult
from ragcore.llm.base import BaseLLM
from ragcore.utils.retry import RETRY_ONCE, RetryConfig, execute_with_retry

logger = logging.getLogger(__name__)


class BaseEvaluator(ABC):
    """
    Abstract base class for evaluators.

    Subclasses declare ``required_fields`` and ``default_threshold`` and
    implement ``name`` and ``_evaluate``. ``evaluate`` checks the required
    fields first, so a missing field is a ValidationError rather than a
    silent pass.
    """

    required_fields: tuple[str, ...] = ()
    default_threshold: float = 0.5

    def __init__(self, threshold: float | None = None):
        self.threshold = self.default_threshold if threshold is None else threshold

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this evaluation metric."""

    async def evaluate(self, sample: EvalInput) -> EvalResult:
        """
        Evaluate a single sample.

        Raises:
            ValidationError: If a required field is missing
            ParseError: If the judge's answer cannot be interpreted
            TransportError: If the provider stayed unreachable after a retry
        """
        sample.require(self.required_fields, evaluator=self.name)
        result = await self._evaluate(sample)
        logger.debug(f"[{self.name}] score={result.score:.2f} passing={result.passing}")
        return result

    @abstractmethod
    async def _evaluate(self, sample: EvalInput) -> EvalResult:
        """Score a sample whose required fields are present."""

    async def evaluate_batch(self, samples: list[EvalInput], concurrency: int = 4) -> list[EvalResult]:
        """Evaluate many samples; failures become failed results."""
        from ragcore.evaluation.runner import BatchRunner

        return await BatchRunner(self, concurrency=concurrency).run(samples)


class BaseJudgeEvaluator(BaseEvaluator):
    """
    Evaluator that asks an LLM for a verdict.

    Attributes:
        llm: The judge model
        prompt_template: Prompt with the metric's placeholders
        retry_config: Retry policy around each judge call
    """

    default_template: str = ""

    def __init__(
        self,
        llm: BaseLLM,
        prompt_template: str | None = None,
        threshold: float | None = None,
        retry_config: RetryConfig = RETRY_ONCE,
    ):
        super().__init__(threshold=threshold)
        self.llm = llm
        self.prompt_template = prompt_template or self.default_template
        self.retry_config = retry_config

    async def _call_llm(self, prompt: str) -> str:
        """Send a single-turn prompt to the judge."""
        return await execute_with_retry(self.llm.respond, prompt, config=self.retry_config)
