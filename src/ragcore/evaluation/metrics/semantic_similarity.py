"""
Semantic Similarity evaluator.

Compares the response with the reference answer in embedding space. No
judge model is involved.
"""

from ragcore.embedder.base import BaseEmbedder
from ragcore.errors import ConfigurationError, ValidationError
from ragcore.evaluation.base import BaseEvaluator
from ragcore.evaluation.types import EvalInput, EvalResult
from ragcore.utils.similarity import SimilarityMode, similarity


class SemanticSimilarityEvaluator(BaseEvaluator):
    """
    Evaluator for embedding similarity between response and reference.

    Both texts are embedded in one batched call and compared under ``mode``.
    Euclidean distance is negated so that higher always means closer.

    Args:
        embed_model: Embedder for both texts
        mode: ``cosine``, ``dot_product`` or ``euclidean``
        threshold: Passing score, 0.8 by default
    """

    required_fields = ("response", "reference")
    default_threshold = 0.8

    def __init__(
        self,
        embed_model: BaseEmbedder,
        mode: SimilarityMode | str = SimilarityMode.COSINE,
        threshold: float | None = None,
    ):
        super().__init__(threshold=threshold)
        try:
            self.mode = SimilarityMode(mode)
        except ValueError as e:
            raise ValidationError(
                f"Unknown similarity mode: {mode}",
                details={"available": [m.value for m in SimilarityMode]},
            ) from e
        self.embed_model = embed_model

    @property
    def name(self) -> str:
        return "semantic_similarity"

    async def _evaluate(self, sample: EvalInput) -> EvalResult:
        response_vec, reference_vec = await self.embed_model.get_text_embedding_batch(
            [sample.response, sample.reference]
        )
        if not response_vec or not reference_vec:
            raise ConfigurationError("Embedder returned an empty vector")

        score = similarity(response_vec, reference_vec, self.mode)
        return EvalResult.from_score(
            score,
            self.threshold,
            sample=sample,
            feedback=f"Similarity score: {score:.4f} (threshold: {self.threshold:.4f})",
            metric_name=self.name,
        )
