"""Conversation memory.

- SimpleMemory: unbounded history
- TokenBufferMemory: evicts the oldest messages past a token limit
- SummaryBufferMemory: folds the oldest messages into a rolling summary
"""

from .base import BaseMemory, SimpleMemory
from .factory import MemoryFactory
from .summary_buffer import DEFAULT_SUMMARIZE_PROMPT, SummaryBufferMemory, is_summary
from .token_buffer import TokenBufferMemory

__all__ = [
    "BaseMemory",
    "SimpleMemory",
    "TokenBufferMemory",
    "SummaryBufferMemory",
    "MemoryFactory",
    "DEFAULT_SUMMARIZE_PROMPT",
    "is_summary",
]
