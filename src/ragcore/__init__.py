"""
ragcore - conversation memory, post-retrieval processing and evaluation for RAG.

This package provides the pieces that sit around retrieval in a RAG system:
token-bounded chat memory, node postprocessors (rerankers, filters,
reorderers) and LLM-as-a-Judge evaluation, on top of a small async LLM and
embedding abstraction.
"""

__version__ = "0.1.0"

# Entities
from .entities import ChatMessage, MessageRole, NodeWithScore, QueryBundle, TextNode

# Models
from .embedder import BaseEmbedder, EmbedderFactory, MockEmbedder
from .llm import BaseLLM, LLMFactory, MockLLM

# Memory
from .memory import MemoryFactory, SimpleMemory, SummaryBufferMemory, TokenBufferMemory

# Postprocessing
from .postprocessor import BaseNodePostprocessor, PostprocessorChain, PostprocessorFactory

# Evaluation
from .evaluation import BatchRunner, EvalInput, EvalResult, EvaluatorFactory, evaluate_many

# Configuration
from .config import ComponentConfig, ComponentFactory, PipelineConfig, load_settings

from .errors import RAGCoreError

__all__ = [
    "__version__",
    "ChatMessage",
    "MessageRole",
    "NodeWithScore",
    "QueryBundle",
    "TextNode",
    "BaseEmbedder",
    "EmbedderFactory",
    "MockEmbedder",
    "BaseLLM",
    "LLMFactory",
    "MockLLM",
    "MemoryFactory",
    "SimpleMemory",
    "SummaryBufferMemory",
    "TokenBufferMemory",
    "BaseNodePostprocessor",
    "PostprocessorChain",
    "PostprocessorFactory",
    "BatchRunner",
    "EvalInput",
    "EvalResult",
    "EvaluatorFactory",
    "evaluate_many",
    "ComponentConfig",
    "ComponentFactory",
    "PipelineConfig",
    "load_settings",
    "RAGCoreError",
]
