"""Node postprocessors applied between retrieval and prompt assembly."""

from .base import BaseNodePostprocessor, PostprocessorChain
from .factory import PostprocessorFactory
from .filters import KeywordPostprocessor, SimilarityCutoffPostprocessor, TopKPostprocessor
from .llm_rerank import DEFAULT_CHOICE_SELECT_PROMPT, LLMRerank
from .long_context_reorder import LongContextReorder
from .metadata_replacement import MetadataReplacementPostprocessor
from .optimizer import SentenceEmbeddingOptimizer
from .pii import PIIMatch, PIIPattern, PIIPostprocessor, PIIType, default_pii_patterns
from .rankgpt_rerank import RankGPTRerank, SlidingWindowRankGPTRerank
from .recency import NodeRecencyPostprocessor, TimeWeightMode

__all__ = [
    "BaseNodePostprocessor",
    "PostprocessorChain",
    "PostprocessorFactory",
    "KeywordPostprocessor",
    "SimilarityCutoffPostprocessor",
    "TopKPostprocessor",
    "DEFAULT_CHOICE_SELECT_PROMPT",
    "LLMRerank",
    "LongContextReorder",
    "MetadataReplacementPostprocessor",
    "SentenceEmbeddingOptimizer",
    "PIIMatch",
    "PIIPattern",
    "PIIPostprocessor",
    "PIIType",
    "default_pii_patterns",
    "RankGPTRerank",
    "SlidingWindowRankGPTRerank",
    "NodeRecencyPostprocessor",
    "TimeWeightMode",
]
