"""
Relevancy evaluator.

Checks whether the response to a query agrees with the retrieved context,
considering all three together.
"""

from ragcore.evaluation.base import BaseJudgeEvaluator
from ragcore.evaluation.types import EvalInput, EvalResult
from ragcore.utils.parsing import parse_yes_no

RELEVANCY_PROMPT = """Your task is to evaluate if the response for the query is in line with the context information provided.
You have two options to answer. Either YES or NO.
Answer YES if the response for the query is in line with context information, otherwise NO.

Query and Response:
{query_response}

Context:
{context}

Answer: """


class RelevancyEvaluator(BaseJudgeEvaluator):
    """
    Evaluator for query, response and context agreement.

    Score interpretation:
    - 1.0: The response is in line with the context for this query
    - 0.0: It is not
    """

    required_fields = ("query", "response", "contexts")
    default_template = RELEVANCY_PROMPT

    @property
    def name(self) -> str:
        return "relevancy"

    async def _evaluate(self, sample: EvalInput) -> EvalResult:
        prompt = self.prompt_template.format(
            query_response=f"Question: {sample.query}\nResponse: {sample.response}",
            context="\n\n".join(sample.contexts),
        )
        response = await self._call_llm(prompt)
        score = 1.0 if parse_yes_no(response) else 0.0

        return EvalResult.from_score(
            score,
            self.threshold,
            sample=sample,
            feedback=response.strip(),
            metric_name=self.name,
        )
