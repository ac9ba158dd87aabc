"""
Capability-typed LLM interfaces.

Every provider implements ``BaseLLM``. Streaming, tool calling and structured
output are separate interfaces that a provider opts into; callers check the
capability predicates before relying on them.

All operations are coroutines. Cancelling the awaiting task cancels the
provider call; deadlines are the caller's ``asyncio.timeout``. Providers
raise ``TransportError`` for transient transport problems and
``ProviderError`` for everything the provider rejected. Nothing here retries.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from ragcore.entities.message import ChatMessage
from ragcore.errors import ResponseFormatError

from .types import (
    ChatResponse,
    LLMMetadata,
    ResponseFormat,
    ResponseFormatType,
    StreamDelta,
    ToolChoice,
    ToolSpec,
)


class BaseLLM(ABC):
    """Minimal text generation handle."""

    @property
    @abstractmethod
    def metadata(self) -> LLMMetadata:
        """Static model facts used to size buffers and pick call styles."""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Generate a completion for a single prompt."""

    @abstractmethod
    async def chat(self, messages: list[ChatMessage]) -> str:
        """Generate the assistant reply to a conversation."""

    def supports_streaming(self) -> bool:
        return isinstance(self, StreamingLLM)

    def supports_tool_calling(self) -> bool:
        return isinstance(self, ToolCallingLLM) and self.metadata.is_function_calling

    def supports_structured_output(self) -> bool:
        return isinstance(self, StructuredOutputLLM) and self.metadata.supports_structured_output

    async def respond(self, prompt: str) -> str:
        """Send a single-turn prompt the way the model prefers."""
        if self.metadata.is_chat:
            return await self.chat([ChatMessage.user(prompt)])
        return await self.complete(prompt)


class StreamingLLM(ABC):
    """Incremental output as async generators.

    Streams are finite, ordered and single-use. Consumers pull chunks;
    closing the generator or cancelling the consuming task stops the
    provider stream.
    """

    @abstractmethod
    def stream(self, prompt: str) -> AsyncIterator[str]:
        """Yield completion text chunks."""

    @abstractmethod
    def stream_chat(self, messages: list[ChatMessage]) -> AsyncIterator[StreamDelta]:
        """Yield chat deltas."""


class ToolCallingLLM(ABC):

    @abstractmethod
    async def chat_with_tools(
        self,
        messages: list[ChatMessage],
        tools: list[ToolSpec],
        tool_choice: ToolChoice | str | None = None,
    ) -> ChatResponse:
        """
        Chat with tools available to the model.

        The returned message may carry ``tool_call`` blocks. The caller runs
        the tools and sends the outputs back as ``ChatMessage.tool_result``
        messages in a follow-up call.

        Args:
            messages: Conversation so far
            tools: Tools the model may call
            tool_choice: ``auto``, ``none``, ``required`` or a tool name
        """


class StructuredOutputLLM(ABC):

    async def chat_with_format(
        self,
        messages: list[ChatMessage],
        response_format: ResponseFormat,
    ) -> str:
        """
        Chat constrained to JSON output.

        Raises:
            ResponseFormatError: If the reply is not valid JSON, or not a JSON
                object when ``json_object`` was requested
        """
        raw = await self._chat_with_format(messages, response_format)
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ResponseFormatError(
                "Model output is not valid JSON",
                details={"format": response_format.type.value, "output": raw[:200]},
                original_error=e,
            ) from e
        if response_format.type is ResponseFormatType.JSON_OBJECT and not isinstance(parsed, dict):
            raise ResponseFormatError(
                "Model output is not a JSON object",
                details={"format": response_format.type.value, "output": raw[:200]},
            )
        return raw

    @abstractmethod
    async def _chat_with_format(
        self,
        messages: list[ChatMessage],
        response_format: ResponseFormat,
    ) -> str:
        """Provider call returning the raw reply text."""
