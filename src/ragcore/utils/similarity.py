"""Vector similarity calculation utilities."""

import math
from enum import StrEnum

from ragcore.errors import ValidationError


class SimilarityMode(StrEnum):
    """How two embedding vectors are compared."""

    COSINE = "cosine"
    DOT_PRODUCT = "dot_product"
    EUCLIDEAN = "euclidean"


def _check_dimensions(vec1: list[float], vec2: list[float]) -> None:
    if len(vec1) != len(vec2):
        raise ValidationError(
            f"Vector dimension mismatch: {len(vec1)} != {len(vec2)}",
            details={"left": len(vec1), "right": len(vec2)},
        )


def dot_product(vec1: list[float], vec2: list[float]) -> float:
    """Sum of element-wise products.

    Raises:
        ValidationError: If vectors have different dimensions
    """
    _check_dimensions(vec1, vec2)
    return math.fsum(a * b for a, b in zip(vec1, vec2))


def cosine_similarity(vec1: list[float], vec2: list[float]) -> float:
    """Calculate cosine similarity between two vectors.

    Args:
        vec1: First vector
        vec2: Second vector

    Returns:
        Similarity in [-1, 1]; 0.0 when either vector has zero norm

    Raises:
        ValidationError: If vectors have different dimensions
    """
    _check_dimensions(vec1, vec2)

    norm1 = math.sqrt(math.fsum(a * a for a in vec1))
    norm2 = math.sqrt(math.fsum(b * b for b in vec2))
    if norm1 == 0.0 or norm2 == 0.0:
        return 0.0

    value = math.fsum(a * b for a, b in zip(vec1, vec2)) / (norm1 * norm2)
    # Clamp floating point drift
    return max(-1.0, min(1.0, value))


def euclidean_distance(vec1: list[float], vec2: list[float]) -> float:
    """L2 distance between two vectors.

    Raises:
        ValidationError: If vectors have different dimensions
    """
    _check_dimensions(vec1, vec2)
    return math.sqrt(math.fsum((a - b) ** 2 for a, b in zip(vec1, vec2)))


def similarity(
    vec1: list[float],
    vec2: list[float],
    mode: SimilarityMode | str = SimilarityMode.COSINE,
) -> float:
    """Compare two vectors so that a higher value always means more similar.

    Euclidean mode returns the negated distance.

    Raises:
        ValidationError: On dimension mismatch or an unknown mode
    """
    try:
        mode = SimilarityMode(mode)
    except ValueError as e:
        raise ValidationError(f"Unknown similarity mode: {mode!r}", original_error=e) from e

    if mode is SimilarityMode.COSINE:
        return cosine_similarity(vec1, vec2)
    if mode is SimilarityMode.DOT_PRODUCT:
        return dot_product(vec1, vec2)
    return -euclidean_distance(vec1, vec2)
