"""Utility functions for ragcore."""

from .parsing import parse_doc_relevance, parse_permutation, parse_rating, parse_yes_no
from .retry import RetryConfig, execute_with_retry, retry_with_backoff
from .similarity import (
    SimilarityMode,
    cosine_similarity,
    dot_product,
    euclidean_distance,
    similarity,
)
from .tokenizer import Tokenizer, approximate_token_count

__all__ = [
    "parse_doc_relevance",
    "parse_permutation",
    "parse_rating",
    "parse_yes_no",
    "RetryConfig",
    "execute_with_retry",
    "retry_with_backoff",
    "SimilarityMode",
    "cosine_similarity",
    "dot_product",
    "euclidean_distance",
    "similarity",
    "Tokenizer",
    "approximate_token_count",
]
