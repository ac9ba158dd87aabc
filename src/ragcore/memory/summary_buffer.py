"""Token-bounded buffer that folds old turns into a rolling summary."""

import logging

from ragcore.entities.message import ChatMessage, MessageRole
from ragcore.errors import ConfigurationError, ValidationError
from ragcore.llm.base import BaseLLM
from ragcore.utils.retry import RETRY_ONCE, RetryConfig, execute_with_retry
from ragcore.utils.tokenizer import Tokenizer, approximate_token_count, count_message_tokens

from .base import BaseMemory
from .token_buffer import DEFAULT_TOKEN_LIMIT_RATIO

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_TOKEN_LIMIT = 2000
DEFAULT_SUMMARIZE_PROMPT = (
    "Progressively summarize the lines of conversation provided, "
    "adding onto the previous summary returning a new summary."
)

SUMMARY_MARKER = "memory_summary"
SUMMARIZED_COUNT = "summarized_count"


def is_summary(message: ChatMessage) -> bool:
    return bool(message.additional_kwargs.get(SUMMARY_MARKER))


class SummaryBufferMemory(BaseMemory):
    """
    History that stays within a token limit by summarizing its oldest turns.

    When a mutation pushes the buffer over ``summary_token_limit``, the
    oldest run of non-system messages (starting with the previous summary,
    if there is one) is sent to ``summary_llm`` and replaced by a single
    assistant message holding the new summary. Folding repeats while the
    buffer is still over the limit and there is something left to fold.

    The summary message is always the first non-system message and carries
    ``additional_kwargs`` markers, so ``set(await memory.get_all())``
    restores a buffer exactly. Reads never call the model.

    If the summarizer fails (after one retry on transport errors) the
    mutation raises and the buffer is left as it was.

    Args:
        summary_llm: Model used to write summaries
        summary_token_limit: Maximum total tokens kept
        tokenizer: Token counter applied to each message's text
        summarize_prompt: System prompt for the summarizer
        retry_config: Retry policy around the summarizer call
    """

    def __init__(
        self,
        summary_llm: BaseLLM,
        summary_token_limit: int = DEFAULT_SUMMARY_TOKEN_LIMIT,
        tokenizer: Tokenizer = approximate_token_count,
        summarize_prompt: str = DEFAULT_SUMMARIZE_PROMPT,
        retry_config: RetryConfig = RETRY_ONCE,
    ):
        super().__init__()
        if summary_token_limit <= 0:
            raise ConfigurationError(
                "summary_token_limit must be positive",
                details={"summary_token_limit": summary_token_limit},
            )
        self.summary_llm = summary_llm
        self.summary_token_limit = summary_token_limit
        self.tokenizer = tokenizer
        self.summarize_prompt = summarize_prompt
        self.retry_config = retry_config

    @classmethod
    def from_llm(
        cls,
        llm: BaseLLM,
        summary_token_limit: int | None = None,
        **kwargs,
    ) -> "SummaryBufferMemory":
        """Use ``llm`` as summarizer and size the buffer from its context window."""
        if summary_token_limit is None:
            meta = llm.metadata
            summary_token_limit = max(
                1,
                int(DEFAULT_TOKEN_LIMIT_RATIO * (meta.context_window - meta.num_output_tokens)),
            )
        return cls(summary_llm=llm, summary_token_limit=summary_token_limit, **kwargs)

    @property
    def summary(self) -> ChatMessage | None:
        head, body = _split_leading_system(self._messages)
        if body and is_summary(body[0]):
            return body[0]
        return None

    @property
    def summarized_count(self) -> int:
        """Number of original messages the current summary stands for."""
        summary = self.summary
        if summary is None:
            return 0
        return int(summary.additional_kwargs.get(SUMMARIZED_COUNT, 0))

    def _tokens(self, messages: list[ChatMessage]) -> int:
        return count_message_tokens(messages, self.tokenizer)

    def _fold_length(self, head: list[ChatMessage], body: list[ChatMessage]) -> int:
        """How many leading body messages to fold, 0 when nothing can be folded."""
        foldable = next(
            (i for i, m in enumerate(body) if m.role == MessageRole.SYSTEM),
            len(body),
        )
        minimum = 2 if body and is_summary(body[0]) else 1
        if foldable < minimum:
            return 0

        budget = self.summary_token_limit - self._tokens(head)
        remaining = self._tokens(body)
        count = 0
        for i in range(foldable):
            if count >= minimum and remaining <= budget:
                break
            remaining -= self.tokenizer(body[i].text)
            count = i + 1

        # Never leave a tool result without the call it answers.
        while count < foldable and body[count].role == MessageRole.TOOL:
            count += 1
        return count

    def _build_transcript(self, folded: list[ChatMessage]) -> str:
        parts = []
        if folded and is_summary(folded[0]):
            parts.append(f"Previous summary:\n{folded[0].text}\n\n")
            folded = folded[1:]
        parts.append("Transcript so far:\n")
        for message in folded:
            parts.append(f"{message.role.value}: {message.text}\n\n")
        return "".join(parts)

    async def _summarize(self, folded: list[ChatMessage]) -> ChatMessage:
        request = [
            ChatMessage.system(self.summarize_prompt),
            ChatMessage.user(self._build_transcript(folded)),
        ]
        text = await execute_with_retry(self.summary_llm.chat, request, config=self.retry_config)

        subsumed = sum(
            int(m.additional_kwargs.get(SUMMARIZED_COUNT, 0)) if is_summary(m) else 1
            for m in folded
        )
        return ChatMessage(
            role=MessageRole.ASSISTANT,
            content=text.strip(),
            additional_kwargs={SUMMARY_MARKER: True, SUMMARIZED_COUNT: subsumed},
        )

    async def _fit(self, messages: list[ChatMessage]) -> list[ChatMessage]:
        head, body = _split_leading_system(messages)
        summaries = [i for i, m in enumerate(body) if is_summary(m)]
        if len(summaries) > 1 or (summaries and summaries[0] != 0):
            raise ValidationError(
                "A summary message may only appear once, as the first non-system message"
            )

        while self._tokens(head) + self._tokens(body) > self.summary_token_limit:
            count = self._fold_length(head, body)
            if count == 0:
                logger.warning(
                    f"Memory holds {self._tokens(head) + self._tokens(body)} tokens, "
                    f"over the {self.summary_token_limit} limit, with nothing left to summarize"
                )
                break

            summary = await self._summarize(body[:count])
            logger.debug(
                f"Summarized {count} messages "
                f"({summary.additional_kwargs[SUMMARIZED_COUNT]} originals in total)"
            )
            body = [summary, *body[count:]]

        return [*head, *body]


def _split_leading_system(
    messages: list[ChatMessage],
) -> tuple[list[ChatMessage], list[ChatMessage]]:
    split = 0
    while split < len(messages) and messages[split].role == MessageRole.SYSTEM:
        split += 1
    return list(messages[:split]), list(messages[split:])
