"""LLM Rerank - relevance scores assigned by a judge model, batch by batch."""

from loguru import logger

from ragcore.entities.node import NodeWithScore
from ragcore.entities.query import QueryBundle
from ragcore.errors import ConfigurationError, ParseError, ValidationError
from ragcore.llm.base import BaseLLM
from ragcore.utils.parsing import parse_doc_relevance

from .base import BaseNodePostprocessor

DEFAULT_CHOICE_SELECT_PROMPT = """A list of documents is shown below. Each document has a number next to it along with a summary of the document. A question is also provided.
Respond with the numbers of the documents you should consult to answer the question, in order of relevance, as well as the relevance score. The relevance score is a number from 1-10 based on how relevant you think the document is to the question.
Do not include any documents that are not relevant to the question.
Example format:
Document 1:
<summary of document 1>

Document 2:
<summary of document 2>

...

Document 10:
<summary of document 10>

Question: <question>
Answer:
Doc: 9, Relevance: 7
Doc: 3, Relevance: 4
Doc: 7, Relevance: 3

Let's try this now:

{context_str}
Question: {query_str}
Answer:
"""


class LLMRerank(BaseNodePostprocessor):
    """
    Rerank nodes with relevance scores produced by an LLM.

    Nodes are sent in batches of ``batch_size`` (default: all at once). The
    judge answers with ``Doc: <n>, Relevance: <score>`` lines where ``n`` is
    the 1-based position within the batch. Nodes the judge leaves out score
    0, and so does every node of a batch whose answer has no such line.
    The final order is by descending score, ties by input position, and the
    first ``top_n`` nodes are returned with the new scores.

    Args:
        llm: Judge model
        top_n: Number of nodes to return
        batch_size: Nodes per judge call, None for a single call
        prompt_template: Template with ``{context_str}`` and ``{query_str}``
        max_doc_chars: Truncate each document in the prompt, None to disable
    """

    def __init__(
        self,
        llm: BaseLLM,
        top_n: int = 10,
        batch_size: int | None = None,
        prompt_template: str = DEFAULT_CHOICE_SELECT_PROMPT,
        max_doc_chars: int | None = 500,
    ):
        if top_n <= 0:
            raise ConfigurationError("top_n must be positive", details={"top_n": top_n})
        if batch_size is not None and batch_size <= 0:
            raise ConfigurationError("batch_size must be positive", details={"batch_size": batch_size})
        self.llm = llm
        self.top_n = top_n
        self.batch_size = batch_size
        self.prompt_template = prompt_template
        self.max_doc_chars = max_doc_chars

        logger.info(
            f"Initialized LLMRerank with model: {llm.metadata.model_name}, top_n={top_n}"
        )

    def _format_batch(self, batch: list[NodeWithScore]) -> str:
        parts = []
        for i, item in enumerate(batch, start=1):
            content = item.node.get_content()
            if self.max_doc_chars is not None and len(content) > self.max_doc_chars:
                content = content[:self.max_doc_chars] + "..."
            parts.append(f"Document {i}:\n{content}\n\n")
        return "".join(parts)

    async def _score_batch(self, batch: list[NodeWithScore], query_str: str) -> dict[int, float]:
        prompt = self.prompt_template.format(
            context_str=self._format_batch(batch),
            query_str=query_str,
        )
        response = await self.llm.respond(prompt)
        try:
            scores = parse_doc_relevance(response)
        except ParseError:
            # "Leave out irrelevant documents" allows an answer with no lines at all
            logger.warning(f"No Doc/Relevance lines in judge response, batch of {len(batch)} scores 0")
            return {}
        return {doc - 1: score for doc, score in scores.items() if 1 <= doc <= len(batch)}

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        if query_bundle is None:
            raise ValidationError("LLMRerank requires a query bundle")

        size = self.batch_size or len(nodes)
        new_scores = [0.0] * len(nodes)
        for start in range(0, len(nodes), size):
            batch = nodes[start:start + size]
            for offset, score in (await self._score_batch(batch, query_bundle.query_str)).items():
                new_scores[start + offset] = score

        order = sorted(range(len(nodes)), key=lambda i: (-new_scores[i], i))
        reranked = [nodes[i].with_score(new_scores[i]) for i in order[:self.top_n]]

        logger.info(f"LLM rerank: {len(nodes)} -> {len(reranked)} nodes")
        return reranked
