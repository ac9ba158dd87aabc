"""Node entities flowing through the postprocessing pipeline."""

from enum import StrEnum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class NodeRelationship(StrEnum):
    SOURCE = "source"      # The document this node was cut from
    PREVIOUS = "previous"
    NEXT = "next"
    PARENT = "parent"
    CHILD = "child"


class RelatedNodeInfo(BaseModel):
    """Reference to another node, stored on the referring node."""

    node_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class TextNode(BaseModel):
    """
    A unit of retrievable text.

    The id is fixed at construction; text and metadata may be replaced, but
    postprocessors do so on copies so that caller-owned nodes never change.
    """

    id: str = Field(default_factory=lambda: str(uuid4()), frozen=True)
    text: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)
    relationships: dict[NodeRelationship, RelatedNodeInfo] = Field(default_factory=dict)

    def get_content(self) -> str:
        return self.text

    def with_text(self, text: str) -> "TextNode":
        """Copy with new text, the same id and a copy of the metadata."""
        return self.model_copy(update={"text": text, "metadata": dict(self.metadata)})

    @property
    def source_node(self) -> RelatedNodeInfo | None:
        return self.relationships.get(NodeRelationship.SOURCE)


class NodeWithScore(BaseModel):
    """A node paired with a channel-dependent score.

    Attributes:
        node: The scored node
        score: Retrieval similarity, rerank relevance or whatever the last
            stage assigned; no range is implied
    """

    node: TextNode
    score: float = 0.0

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def text(self) -> str:
        return self.node.text

    def with_score(self, score: float) -> "NodeWithScore":
        return NodeWithScore(node=self.node, score=score)

    def with_node(self, node: TextNode) -> "NodeWithScore":
        return NodeWithScore(node=node, score=self.score)
