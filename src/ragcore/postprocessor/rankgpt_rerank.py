"""RankGPT - listwise reranking by asking the model for a permutation."""

from loguru import logger

from ragcore.entities.message import ChatMessage
from ragcore.entities.node import NodeWithScore
from ragcore.entities.query import QueryBundle
from ragcore.errors import ConfigurationError, ValidationError
from ragcore.llm.base import BaseLLM
from ragcore.utils.parsing import parse_permutation

from .base import BaseNodePostprocessor

RANKGPT_SYSTEM_PROMPT = (
    "You are RankGPT, an intelligent assistant that can rank passages "
    "based on their relevancy to the query."
)

DEFAULT_RANKGPT_PROMPT = (
    "Search Query: {query}. \n"
    "Rank the {num} passages above based on their relevance to the search query. "
    "The passages should be listed in descending order using identifiers. "
    "The most relevant passages should be listed first. "
    "The output format should be [] > [], e.g., [1] > [2]. "
    "Only response the ranking results, do not say any word or explain."
)


def truncate_words(text: str, max_words: int) -> str:
    words = text.split()
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words])


class RankGPTRerank(BaseNodePostprocessor):
    """
    Rerank by asking a chat model to order the passages ``[1]..[n]``.

    The conversation presents every passage as its own turn, then asks for a
    ranking like ``[2] > [1] > [3]``. Labels the model repeats keep their
    first position, unknown labels are ignored and labels it leaves out are
    appended in input order. Scores are kept as they were.

    Args:
        llm: Chat model used for ranking
        top_n: Number of nodes to return
        verbose: Log the parsed permutation
        prompt_template: Final instruction with ``{query}`` and ``{num}``
        max_words_per_doc: Passages are cut to this many words
    """

    def __init__(
        self,
        llm: BaseLLM,
        top_n: int = 5,
        verbose: bool = False,
        prompt_template: str = DEFAULT_RANKGPT_PROMPT,
        max_words_per_doc: int = 300,
    ):
        if top_n <= 0:
            raise ConfigurationError("top_n must be positive", details={"top_n": top_n})
        self.llm = llm
        self.top_n = top_n
        self.verbose = verbose
        self.prompt_template = prompt_template
        self.max_words_per_doc = max_words_per_doc

    def build_messages(self, query: str, passages: list[str]) -> list[ChatMessage]:
        num = len(passages)
        messages = [
            ChatMessage.system(RANKGPT_SYSTEM_PROMPT),
            ChatMessage.user(
                f"I will provide you with {num} passages, each indicated by number identifier []. \n"
                f"Rank the passages based on their relevance to query: {query}."
            ),
            ChatMessage.assistant("Okay, please provide the passages."),
        ]
        for rank, passage in enumerate(passages, start=1):
            messages.append(ChatMessage.user(f"[{rank}] {passage}"))
            messages.append(ChatMessage.assistant(f"Received passage [{rank}]."))

        final_prompt = self.prompt_template.replace("{query}", query).replace("{num}", str(num))
        messages.append(ChatMessage.user(final_prompt))
        return messages

    async def _permute(self, nodes: list[NodeWithScore], query: str) -> list[NodeWithScore]:
        passages = [truncate_words(item.node.get_content(), self.max_words_per_doc) for item in nodes]
        response = await self.llm.chat(self.build_messages(query, passages))
        permutation = parse_permutation(response, len(nodes))
        if self.verbose:
            logger.info(f"RankGPT permutation: {[i + 1 for i in permutation]}")
        return [nodes[i] for i in permutation]

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        if query_bundle is None:
            raise ValidationError("RankGPTRerank requires a query bundle")
        ranked = await self._permute(nodes, query_bundle.query_str)
        return ranked[:self.top_n]


class SlidingWindowRankGPTRerank(RankGPTRerank):
    """
    RankGPT over long candidate lists.

    A window of ``window_size`` passages starts at the end of the list and
    moves towards the front, reranking each window in place. Each new window
    ends ``step_size`` passages past the start of the previous one, so
    consecutive windows share ``step_size`` passages and the best of each
    window is carried forward. The pass ends once a window covers the head
    of the list. Lists no longer than one window get a single RankGPT call.
    """

    def __init__(
        self,
        llm: BaseLLM,
        top_n: int = 5,
        window_size: int = 20,
        step_size: int = 10,
        **kwargs,
    ):
        super().__init__(llm, top_n=top_n, **kwargs)
        if step_size <= 0 or step_size >= window_size:
            raise ConfigurationError(
                "Require 0 < step_size < window_size",
                details={"window_size": window_size, "step_size": step_size},
            )
        self.window_size = window_size
        self.step_size = step_size

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        if query_bundle is None:
            raise ValidationError("SlidingWindowRankGPTRerank requires a query bundle")
        if len(nodes) <= self.window_size:
            return await super()._postprocess_nodes(nodes, query_bundle)

        current = list(nodes)
        end = len(current)
        while True:
            start = max(0, end - self.window_size)
            current[start:end] = await self._permute(current[start:end], query_bundle.query_str)
            if start == 0:
                break
            end = start + self.step_size
        return current[:self.top_n]
