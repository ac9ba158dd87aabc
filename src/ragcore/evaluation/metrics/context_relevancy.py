"""
Context Relevancy evaluator.

Measures how many of the retrieved passages are relevant to the question.
Low context relevancy points at retrieval problems rather than generation
problems.
"""

from ragcore.evaluation.base import BaseJudgeEvaluator
from ragcore.evaluation.types import EvalInput, EvalResult
from ragcore.utils.parsing import parse_yes_no

CONTEXT_RELEVANCY_PROMPT = """Your task is to evaluate if the retrieved context is relevant to the query.
You have two options to answer. Either YES or NO.
Answer YES if the context contains information that could help answer the query, otherwise NO.

Query: {query}

Context:
{context}

Answer: """


class ContextRelevancyEvaluator(BaseJudgeEvaluator):
    """
    Evaluator for measuring context relevancy to the question.

    Each passage is judged on its own, one call per passage in order. The
    score is the fraction of passages judged relevant and the feedback
    lists every verdict with the judge's rationale.

    Score interpretation:
    - 1.0: Every retrieved passage is relevant
    - 0.5: Half of them are
    - 0.0: None are
    """

    required_fields = ("query", "contexts")
    default_template = CONTEXT_RELEVANCY_PROMPT

    @property
    def name(self) -> str:
        return "context_relevancy"

    async def _evaluate(self, sample: EvalInput) -> EvalResult:
        relevant = 0
        feedback = []
        for i, context in enumerate(sample.contexts, start=1):
            prompt = self.prompt_template.format(query=sample.query, context=context)
            response = await self._call_llm(prompt)
            verdict = parse_yes_no(response)
            relevant += verdict
            feedback.append(f"Context {i}: {'YES' if verdict else 'NO'} - {response.strip()}")

        score = relevant / len(sample.contexts)
        return EvalResult.from_score(
            score,
            self.threshold,
            sample=sample,
            feedback="\n".join(feedback),
            metric_name=self.name,
        )
