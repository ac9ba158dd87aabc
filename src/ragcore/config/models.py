"""Configuration models for pipeline components.

Every component is configured via a type string and optional parameters,
resolved through the matching factory.
"""

from typing import Any

from pydantic import BaseModel, Field


class ComponentConfig(BaseModel):
    """Configuration for a single component.

    Attributes:
        type: Component type identifier (e.g., "token_buffer", "llm_rerank")
        params: Component-specific parameters as a dictionary
    """

    type: str
    params: dict[str, Any] = Field(default_factory=dict)


class PipelineConfig(BaseModel):
    """Configuration for a conversation/post-retrieval/evaluation pipeline.

    Attributes:
        llm: LLM shared by memory summarization, reranking and judging
        embedder: Embedder shared by the optimizer and semantic similarity
        memory: Conversation buffer
        postprocessors: Postprocessor chain, applied in list order
        evaluators: Evaluators to run over samples
        eval_concurrency: Maximum evaluations in flight per evaluator
    """

    llm: ComponentConfig | None = None
    embedder: ComponentConfig | None = None
    memory: ComponentConfig | None = None
    postprocessors: list[ComponentConfig] = Field(default_factory=list)
    evaluators: list[ComponentConfig] = Field(default_factory=list)
    eval_concurrency: int = Field(default=4, gt=0)
