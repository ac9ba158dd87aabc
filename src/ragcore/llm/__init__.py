"""LLM abstraction: capability interfaces, value types and providers."""

from .base import BaseLLM, StreamingLLM, StructuredOutputLLM, ToolCallingLLM
from .config import LLMConfig, TimeoutConfig
from .factory import LLMFactory
from .providers.mock import MockLLM
from .types import (
    ChatResponse,
    LLMMetadata,
    ResponseFormat,
    ResponseFormatType,
    StreamDelta,
    ToolChoice,
    ToolSpec,
)

__all__ = [
    "BaseLLM",
    "StreamingLLM",
    "StructuredOutputLLM",
    "ToolCallingLLM",
    "LLMConfig",
    "TimeoutConfig",
    "LLMFactory",
    "MockLLM",
    "ChatResponse",
    "LLMMetadata",
    "ResponseFormat",
    "ResponseFormatType",
    "StreamDelta",
    "ToolChoice",
    "ToolSpec",
]
