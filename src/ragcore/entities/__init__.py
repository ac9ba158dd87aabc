from .message import (
    ChatMessage,
    ContentBlock,
    MessageRole,
    TextBlock,
    ToolCallBlock,
    ToolResultBlock,
)
from .node import NodeRelationship, NodeWithScore, RelatedNodeInfo, TextNode
from .query import QueryBundle

__all__ = [
    "ChatMessage",
    "ContentBlock",
    "MessageRole",
    "TextBlock",
    "ToolCallBlock",
    "ToolResultBlock",
    "NodeRelationship",
    "NodeWithScore",
    "RelatedNodeInfo",
    "TextNode",
    "QueryBundle",
]
