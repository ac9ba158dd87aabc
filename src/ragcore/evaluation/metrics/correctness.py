"""
Correctness evaluator.

Rates a generated answer against a reference answer on a 1-5 scale.
"""

from ragcore.entities.message import ChatMessage
from ragcore.evaluation.base import BaseJudgeEvaluator
from ragcore.evaluation.types import EvalInput, EvalResult
from ragcore.llm.base import BaseLLM
from ragcore.utils.parsing import parse_rating
from ragcore.utils.retry import RETRY_ONCE, RetryConfig, execute_with_retry

CORRECTNESS_SYSTEM_PROMPT = """You are an expert evaluation system for a question answering chatbot.

You are given the following information:
- a user query, and
- a generated answer

You may also be given a reference answer to use for reference in your evaluation.

Your job is to judge the relevance and correctness of the generated answer.
Output a single score that represents a holistic evaluation.
You must return your response in a line with only the score.
Do not return answers in any other format.
On a separate line provide your reasoning for the score as well.

Follow these guidelines for scoring:
- Your score has to be between 1 and 5, where 1 is the worst and 5 is the best.
- If the generated answer is not relevant to the user query, you should give a score of 1.
- If the generated answer is relevant but contains mistakes, you should give a score between 2 and 3.
- If the generated answer is relevant and fully correct, you should give a score between 4 and 5.

Example Response:
4.0
The generated answer has the exact same metrics as the reference answer, but it is not as concise."""

CORRECTNESS_USER_PROMPT = """## User Query
{query}

## Reference Answer
{reference}

## Generated Answer
{response}"""


class CorrectnessEvaluator(BaseJudgeEvaluator):
    """
    Evaluator for answer correctness against a reference.

    The judge receives a system prompt with the scoring rubric and a user
    prompt with the query, reference and generated answer. The score is the
    first rating between 1 and 5 found in the judge's reply.

    Args:
        llm: Judge model
        prompt_template: User prompt with ``{query}``, ``{reference}`` and ``{response}``
        system_prompt: Scoring rubric sent as the system message
        threshold: Passing score, 4.0 by default
    """

    required_fields = ("query", "response", "reference")
    default_threshold = 4.0
    default_template = CORRECTNESS_USER_PROMPT

    def __init__(
        self,
        llm: BaseLLM,
        prompt_template: str | None = None,
        system_prompt: str = CORRECTNESS_SYSTEM_PROMPT,
        threshold: float | None = None,
        retry_config: RetryConfig = RETRY_ONCE,
    ):
        super().__init__(llm, prompt_template=prompt_template, threshold=threshold, retry_config=retry_config)
        self.system_prompt = system_prompt

    @property
    def name(self) -> str:
        return "correctness"

    async def _evaluate(self, sample: EvalInput) -> EvalResult:
        messages = [
            ChatMessage.system(self.system_prompt),
            ChatMessage.user(self.prompt_template.format(
                query=sample.query,
                reference=sample.reference,
                response=sample.response,
            )),
        ]
        response = await execute_with_retry(self.llm.chat, messages, config=self.retry_config)
        score = parse_rating(response, low=1.0, high=5.0)

        return EvalResult.from_score(
            score,
            self.threshold,
            sample=sample,
            feedback=response.strip(),
            metric_name=self.name,
        )
