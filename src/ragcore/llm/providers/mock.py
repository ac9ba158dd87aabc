"""Scripted LLM for tests and offline runs."""

import asyncio
from collections import deque
from collections.abc import AsyncIterator
from typing import Callable

from ragcore.entities.message import ChatMessage, ToolCallBlock

from ..base import BaseLLM, StreamingLLM, StructuredOutputLLM, ToolCallingLLM
from ..types import (
    ChatResponse,
    LLMMetadata,
    ResponseFormat,
    StreamDelta,
    ToolChoice,
    ToolSpec,
)


class MockLLM(BaseLLM, StreamingLLM, ToolCallingLLM, StructuredOutputLLM):
    """
    LLM that replays scripted answers.

    Each call consumes the next entry of ``responses``. An entry that is an
    exception instance is raised instead of returned. Once the script is
    exhausted, ``response_fn`` (called with the rendered prompt) or
    ``default_response`` answers.

    Every call is recorded in ``calls`` as the list of messages sent; plain
    completions are recorded as a single user message.
    """

    def __init__(
        self,
        responses: list[str | Exception] | None = None,
        default_response: str = "",
        response_fn: Callable[[str], str] | None = None,
        tool_calls: list[list[ToolCallBlock]] | None = None,
        metadata: LLMMetadata | None = None,
        stream_chunk_size: int = 4,
        stream_delay: float = 0.0,
        model_name: str = "mock-llm",
    ):
        self._responses: deque[str | Exception] = deque(responses or [])
        self._tool_calls: deque[list[ToolCallBlock]] = deque(tool_calls or [])
        self.default_response = default_response
        self.response_fn = response_fn
        self.stream_chunk_size = max(1, stream_chunk_size)
        self.stream_delay = stream_delay
        self._metadata = metadata or LLMMetadata(
            model_name=model_name,
            is_function_calling=True,
            supports_structured_output=True,
        )
        self.calls: list[list[ChatMessage]] = []

    @property
    def metadata(self) -> LLMMetadata:
        return self._metadata

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def prompts(self) -> list[str]:
        """Rendered text of every recorded call."""
        return [_render(messages) for messages in self.calls]

    def _next_response(self, messages: list[ChatMessage]) -> str:
        self.calls.append(list(messages))
        if self._responses:
            item = self._responses.popleft()
            if isinstance(item, BaseException):
                raise item
            return item
        if self.response_fn is not None:
            return self.response_fn(_render(messages))
        return self.default_response

    async def complete(self, prompt: str) -> str:
        await asyncio.sleep(0)
        return self._next_response([ChatMessage.user(prompt)])

    async def chat(self, messages: list[ChatMessage]) -> str:
        await asyncio.sleep(0)
        return self._next_response(messages)

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        text = self._next_response([ChatMessage.user(prompt)])
        for start in range(0, len(text), self.stream_chunk_size):
            await asyncio.sleep(self.stream_delay)
            yield text[start:start + self.stream_chunk_size]

    async def stream_chat(self, messages: list[ChatMessage]) -> AsyncIterator[StreamDelta]:
        text = self._next_response(messages)
        first = True
        for start in range(0, len(text), self.stream_chunk_size):
            await asyncio.sleep(self.stream_delay)
            yield StreamDelta(
                delta=text[start:start + self.stream_chunk_size],
                role="assistant" if first else None,
            )
            first = False
        yield StreamDelta(finish_reason="stop")

    async def chat_with_tools(
        self,
        messages: list[ChatMessage],
        tools: list[ToolSpec],
        tool_choice: ToolChoice | str | None = None,
    ) -> ChatResponse:
        await asyncio.sleep(0)
        if self._tool_calls and tool_choice != ToolChoice.NONE:
            self.calls.append(list(messages))
            calls = self._tool_calls.popleft()
            return ChatResponse(message=ChatMessage.assistant(tool_calls=calls))
        return ChatResponse(message=ChatMessage.assistant(self._next_response(messages)))

    async def _chat_with_format(
        self,
        messages: list[ChatMessage],
        response_format: ResponseFormat,
    ) -> str:
        await asyncio.sleep(0)
        return self._next_response(messages)


def _render(messages: list[ChatMessage]) -> str:
    return "\n".join(m.text for m in messages)
