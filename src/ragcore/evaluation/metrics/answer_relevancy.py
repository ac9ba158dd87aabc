"""
Answer Relevancy evaluator.

Measures whether the response directly answers the question, without
looking at the retrieved context.
"""

from ragcore.evaluation.base import BaseJudgeEvaluator
from ragcore.evaluation.types import EvalInput, EvalResult
from ragcore.utils.parsing import parse_yes_no

ANSWER_RELEVANCY_PROMPT = """Your task is to evaluate if the response directly answers the query.
You have two options to answer. Either YES or NO.
Answer YES if the response provides a direct answer to the query, otherwise NO.

Query: {query}
Response: {response}

Answer: """


class AnswerRelevancyEvaluator(BaseJudgeEvaluator):
    """
    Evaluator for answer relevancy to the question.

    Useful for spotting off-topic or evasive answers independently of
    retrieval quality.

    Example:
        >>> evaluator = AnswerRelevancyEvaluator(llm)
        >>> result = await evaluator.evaluate(EvalInput(
        ...     query="What is the capital of France?",
        ...     response="The capital of France is Paris.",
        ... ))
    """

    required_fields = ("query", "response")
    default_template = ANSWER_RELEVANCY_PROMPT

    @property
    def name(self) -> str:
        return "answer_relevancy"

    async def _evaluate(self, sample: EvalInput) -> EvalResult:
        prompt = self.prompt_template.format(query=sample.query, response=sample.response)
        response = await self._call_llm(prompt)
        score = 1.0 if parse_yes_no(response) else 0.0

        return EvalResult.from_score(
            score,
            self.threshold,
            sample=sample,
            feedback=response.strip(),
            metric_name=self.name,
        )
