"""Chat message entities shared by the LLM abstraction and memory."""

import json
from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from ragcore.errors import ResponseFormatError


class MessageRole(StrEnum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class TextBlock(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class ToolCallBlock(BaseModel):
    """A tool invocation requested by the model.

    Attributes:
        id: Provider-assigned call id, echoed back in the matching result
        name: Tool name
        arguments: JSON-encoded arguments exactly as the model produced them
    """

    kind: Literal["tool_call"] = "tool_call"
    id: str
    name: str
    arguments: str = "{}"

    def parse_arguments(self) -> dict[str, Any]:
        try:
            parsed = json.loads(self.arguments or "{}")
        except json.JSONDecodeError as e:
            raise ResponseFormatError(
                f"Tool call '{self.name}' has malformed arguments",
                details={"arguments": self.arguments},
                original_error=e,
            ) from e
        if not isinstance(parsed, dict):
            raise ResponseFormatError(
                f"Tool call '{self.name}' arguments must be a JSON object",
                details={"arguments": self.arguments},
            )
        return parsed


class ToolResultBlock(BaseModel):
    kind: Literal["tool_result"] = "tool_result"
    id: str
    output: str
    is_error: bool = False


ContentBlock = Annotated[
    Union[TextBlock, ToolCallBlock, ToolResultBlock],
    Field(discriminator="kind"),
]


class ChatMessage(BaseModel):
    """
    One turn of a conversation.

    Plain messages only set ``content``. Messages that carry tool calls or
    tool results use ``blocks``; when blocks are present the transport text is
    the concatenation of their text blocks and tool outputs, and ``content``
    is ignored.
    """

    role: MessageRole = MessageRole.USER
    content: str = ""
    blocks: list[ContentBlock] = Field(default_factory=list)
    additional_kwargs: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
    }

    @property
    def text(self) -> str:
        if self.blocks:
            parts = []
            for block in self.blocks:
                if isinstance(block, TextBlock):
                    parts.append(block.text)
                elif isinstance(block, ToolResultBlock):
                    parts.append(block.output)
            return "".join(parts)
        return self.content

    @property
    def tool_calls(self) -> list[ToolCallBlock]:
        return [b for b in self.blocks if isinstance(b, ToolCallBlock)]

    @property
    def tool_results(self) -> list[ToolResultBlock]:
        return [b for b in self.blocks if isinstance(b, ToolResultBlock)]

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(
        cls,
        content: str = "",
        tool_calls: list[ToolCallBlock] | None = None,
        **additional_kwargs: Any,
    ) -> "ChatMessage":
        blocks: list = []
        if tool_calls:
            if content:
                blocks.append(TextBlock(text=content))
            blocks.extend(tool_calls)
        return cls(
            role=MessageRole.ASSISTANT,
            content=content,
            blocks=blocks,
            additional_kwargs=additional_kwargs,
        )

    @classmethod
    def tool_result(cls, call_id: str, output: str, is_error: bool = False) -> "ChatMessage":
        return cls(
            role=MessageRole.TOOL,
            blocks=[ToolResultBlock(id=call_id, output=output, is_error=is_error)],
        )

    def __str__(self) -> str:
        return f"{self.role}: {self.text}"
