"""OpenAI-compatible chat completion provider."""

from collections.abc import AsyncIterator
from typing import Any

import openai
from loguru import logger
from openai import AsyncOpenAI

from ragcore.entities.message import ChatMessage, ToolCallBlock
from ragcore.errors import (
    ConfigurationError,
    NetworkError,
    ProviderError,
    RAGCoreError,
    RequestTimeoutError,
    classify_http_error,
    wrap_exception,
)

from ..base import BaseLLM, StreamingLLM, StructuredOutputLLM, ToolCallingLLM
from ..config import LLMConfig
from ..types import (
    ChatResponse,
    LLMMetadata,
    ResponseFormat,
    StreamDelta,
    ToolChoice,
    ToolSpec,
)

# Longest matching prefix wins
KNOWN_CONTEXT_WINDOWS: dict[str, int] = {
    "gpt-4.1": 1047576,
    "gpt-4o": 128000,
    "gpt-4-turbo": 128000,
    "gpt-4": 8192,
    "gpt-3.5-turbo": 16385,
    "o1": 200000,
    "o3": 200000,
}


def _lookup_context_window(model: str) -> int:
    matches = [prefix for prefix in KNOWN_CONTEXT_WINDOWS if model.startswith(prefix)]
    if not matches:
        return LLMMetadata.model_fields["context_window"].default
    return KNOWN_CONTEXT_WINDOWS[max(matches, key=len)]


def to_openai_messages(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    """Convert chat messages to the OpenAI wire shape.

    Tool results expand to one ``tool`` message per result block.
    """
    converted: list[dict[str, Any]] = []
    for message in messages:
        if message.tool_results:
            for result in message.tool_results:
                converted.append({
                    "role": "tool",
                    "tool_call_id": result.id,
                    "content": result.output,
                })
        elif message.tool_calls:
            converted.append({
                "role": "assistant",
                "content": message.text or None,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {"name": call.name, "arguments": call.arguments},
                    }
                    for call in message.tool_calls
                ],
            })
        else:
            converted.append({"role": message.role.value, "content": message.text})
    return converted


def translate_error(error: Exception) -> RAGCoreError:
    """Map an ``openai`` SDK exception onto the ragcore taxonomy."""
    if isinstance(error, openai.APITimeoutError):
        return RequestTimeoutError(str(error), original_error=error)
    if isinstance(error, openai.APIConnectionError):
        return NetworkError(str(error), original_error=error)
    if isinstance(error, openai.APIStatusError):
        classified = classify_http_error(
            error.status_code,
            error.message,
            dict(error.response.headers),
        )
        classified.original_error = error
        return classified
    return wrap_exception(error, context="OpenAI request failed")


class OpenAILLM(BaseLLM, StreamingLLM, ToolCallingLLM, StructuredOutputLLM):
    """
    LLM backed by an OpenAI-compatible ``/chat/completions`` endpoint.

    Args:
        client: Pre-built ``AsyncOpenAI`` client; built from settings when omitted
        model: Model name
        api_key: API key, defaults to ``OPENAI_API_KEY``
        base_url: Endpoint, defaults to ``OPENAI_URL``
        config: Transport and sampling configuration
        context_window: Override for models missing from the known table
        is_chat: False routes ``complete`` to the legacy completions endpoint
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        config: LLMConfig | None = None,
        context_window: int | None = None,
        num_output_tokens: int | None = None,
        is_chat: bool = True,
        is_function_calling: bool = True,
        supports_structured_output: bool = True,
    ):
        self.config = config or LLMConfig.default()

        if client is None or model is None:
            from ragcore.config.settings import load_settings

            settings = load_settings()
            model = model or settings.OPENAI_MODEL
            if client is None:
                api_key = api_key or settings.OPENAI_API_KEY
                if not api_key:
                    raise ConfigurationError(
                        "OpenAILLM requires an API key",
                        details={"hint": "pass api_key or set OPENAI_API_KEY"},
                    )
                client = AsyncOpenAI(
                    api_key=api_key,
                    base_url=base_url or settings.OPENAI_URL,
                    timeout=self.config.timeout.to_httpx(),
                    max_retries=self.config.max_retries,
                )

        self.client = client
        self.model = model
        self._metadata = LLMMetadata(
            model_name=model,
            context_window=context_window or _lookup_context_window(model),
            num_output_tokens=num_output_tokens or self.config.max_tokens or 1024,
            is_chat=is_chat,
            is_function_calling=is_function_calling,
            supports_structured_output=supports_structured_output,
        )
        logger.info(f"OpenAILLM initialized with model: {model}")

    @property
    def metadata(self) -> LLMMetadata:
        return self._metadata

    def _request_kwargs(self, **extra: Any) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"model": self.model, "temperature": self.config.temperature}
        if self.config.max_tokens is not None:
            kwargs["max_tokens"] = self.config.max_tokens
        kwargs.update({k: v for k, v in extra.items() if v is not None})
        return kwargs

    async def _create(self, messages: list[ChatMessage], **extra: Any):
        try:
            return await self.client.chat.completions.create(
                messages=to_openai_messages(messages),
                **self._request_kwargs(**extra),
            )
        except openai.OpenAIError as e:
            raise translate_error(e) from e

    @staticmethod
    def _first_choice(response):
        if not response.choices:
            raise ProviderError("Provider returned no choices")
        return response.choices[0]

    async def complete(self, prompt: str) -> str:
        if self.metadata.is_chat:
            return await self.chat([ChatMessage.user(prompt)])
        try:
            response = await self.client.completions.create(
                prompt=prompt,
                **self._request_kwargs(),
            )
        except openai.OpenAIError as e:
            raise translate_error(e) from e
        return self._first_choice(response).text or ""

    async def chat(self, messages: list[ChatMessage]) -> str:
        response = await self._create(messages)
        return self._first_choice(response).message.content or ""

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        async for delta in self.stream_chat([ChatMessage.user(prompt)]):
            if delta.delta:
                yield delta.delta

    async def stream_chat(self, messages: list[ChatMessage]) -> AsyncIterator[StreamDelta]:
        stream = await self._create(messages, stream=True)
        pending: dict[int, dict[str, str]] = {}
        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                choice = chunk.choices[0]
                delta = choice.delta

                for call in delta.tool_calls or []:
                    entry = pending.setdefault(call.index, {"id": "", "name": "", "arguments": ""})
                    if call.id:
                        entry["id"] = call.id
                    if call.function is not None:
                        entry["name"] += call.function.name or ""
                        entry["arguments"] += call.function.arguments or ""

                if delta.content or delta.role:
                    yield StreamDelta(delta=delta.content or "", role=delta.role)

                if choice.finish_reason:
                    for index in sorted(pending):
                        yield StreamDelta(tool_call=ToolCallBlock(**pending[index]))
                    pending.clear()
                    yield StreamDelta(finish_reason=choice.finish_reason)
        except openai.OpenAIError as e:
            raise translate_error(e) from e
        finally:
            await stream.close()

    async def chat_with_tools(
        self,
        messages: list[ChatMessage],
        tools: list[ToolSpec],
        tool_choice: ToolChoice | str | None = None,
    ) -> ChatResponse:
        choice_param: Any = None
        if tools and tool_choice is not None:
            if tool_choice in {c.value for c in ToolChoice}:
                choice_param = str(tool_choice)
            else:
                choice_param = {"type": "function", "function": {"name": tool_choice}}

        response = await self._create(
            messages,
            tools=[tool.to_openai_tool() for tool in tools] or None,
            tool_choice=choice_param,
        )
        choice = self._first_choice(response)
        calls = [
            ToolCallBlock(id=call.id, name=call.function.name, arguments=call.function.arguments or "{}")
            for call in choice.message.tool_calls or []
        ]
        message = ChatMessage.assistant(choice.message.content or "", tool_calls=calls)
        return ChatResponse(message=message, raw={"finish_reason": choice.finish_reason})

    async def _chat_with_format(
        self,
        messages: list[ChatMessage],
        response_format: ResponseFormat,
    ) -> str:
        response = await self._create(messages, response_format=response_format.to_openai())
        return self._first_choice(response).message.content or ""


__all__ = ["OpenAILLM", "to_openai_messages", "translate_error"]
