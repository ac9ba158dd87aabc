"""
Faithfulness evaluator.

Measures whether the response is supported by the retrieved contexts, i.e.
whether the system hallucinated.
"""

from ragcore.evaluation.base import BaseJudgeEvaluator
from ragcore.evaluation.types import EvalInput, EvalResult
from ragcore.utils.parsing import parse_yes_no

FAITHFULNESS_PROMPT = """Please tell if a given piece of information is supported by the context.
You need to answer with either YES or NO.
Answer YES if any of the context supports the information, even if most of the context is unrelated.
Some examples are provided below.

Information: Apple pie is generally double-crusted.
Context: An apple pie is a fruit pie in which the principal filling ingredient is apples.
Apple pie is often served with whipped cream, ice cream ('apple pie à la mode'), custard or cheddar cheese.
It is generally double-crusted, with pastry both above and below the filling; the upper crust may be solid or latticed (woven of crosswise strips).
Answer: YES

Information: Apple pies tastes bad.
Context: An apple pie is a fruit pie in which the principal filling ingredient is apples.
Apple pie is often served with whipped cream, ice cream ('apple pie à la mode'), custard or cheddar cheese.
It is generally double-crusted, with pastry both above and below the filling; the upper crust may be solid or latticed (woven of crosswise strips).
Answer: NO

Information: {response}
Context: {context}
Answer: """


class FaithfulnessEvaluator(BaseJudgeEvaluator):
    """
    Evaluator for response faithfulness to the retrieved contexts.

    Score interpretation:
    - 1.0: The judge found the response supported (YES)
    - 0.0: The judge found unsupported claims (NO)

    Example:
        >>> evaluator = FaithfulnessEvaluator(llm)
        >>> result = await evaluator.evaluate(EvalInput(
        ...     response="The sky is blue during the day.",
        ...     contexts=["The sky appears blue due to Rayleigh scattering."],
        ... ))
    """

    required_fields = ("response", "contexts")
    default_template = FAITHFULNESS_PROMPT

    @property
    def name(self) -> str:
        return "faithfulness"

    async def _evaluate(self, sample: EvalInput) -> EvalResult:
        prompt = self.prompt_template.format(
            response=sample.response,
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
