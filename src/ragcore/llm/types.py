"""Value types exchanged with LLM providers."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from ragcore.entities.message import ChatMessage, ToolCallBlock


class LLMMetadata(BaseModel):
    """Static facts about a model handle.

    Attributes:
        context_window: Total tokens the model accepts (prompt + output)
        num_output_tokens: Tokens reserved for generation
        is_chat: Whether the model expects chat messages rather than a prompt
        is_function_calling: Whether tool calling is available
        supports_structured_output: Whether JSON output formats are honored
    """

    model_name: str = "unknown"
    context_window: int = Field(default=4096, gt=0)
    num_output_tokens: int = Field(default=1024, ge=0)
    is_chat: bool = True
    is_function_calling: bool = False
    supports_structured_output: bool = False

    model_config = {
        "frozen": True,
        "protected_namespaces": (),
    }


class ResponseFormatType(StrEnum):
    JSON_OBJECT = "json_object"
    JSON_SCHEMA = "json_schema"


class ResponseFormat(BaseModel):
    type: ResponseFormatType = ResponseFormatType.JSON_OBJECT
    name: str = "response"
    json_schema: dict[str, Any] | None = None

    def to_openai(self) -> dict[str, Any]:
        if self.type is ResponseFormatType.JSON_OBJECT:
            return {"type": "json_object"}
        return {
            "type": "json_schema",
            "json_schema": {"name": self.name, "schema": self.json_schema or {}},
        }


class ToolChoice(StrEnum):
    AUTO = "auto"
    NONE = "none"
    REQUIRED = "required"


class ToolSpec(BaseModel):
    """Description of a tool the model may call.

    Attributes:
        name: Function name
        description: What the tool does
        parameters: JSON schema of the arguments
    """

    name: str
    description: str = ""
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def to_openai_tool(self) -> dict[str, Any]:
        """Convert to OpenAI tool format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class ChatResponse(BaseModel):
    """Result of a tool-capable chat call."""

    message: ChatMessage
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.message.text

    @property
    def tool_calls(self) -> list[ToolCallBlock]:
        return self.message.tool_calls


class StreamDelta(BaseModel):
    """One chunk of a streamed chat response."""

    delta: str = ""
    role: str | None = None
    tool_call: ToolCallBlock | None = None
    finish_reason: str | None = None
