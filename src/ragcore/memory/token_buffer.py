"""Token-bounded conversation buffer."""

import logging

from ragcore.entities.message import ChatMessage, MessageRole
from ragcore.errors import ConfigurationError, ValidationError
from ragcore.llm.base import BaseLLM
from ragcore.utils.tokenizer import Tokenizer, approximate_token_count, count_message_tokens

from .base import BaseMemory

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_LIMIT = 3000
DEFAULT_TOKEN_LIMIT_RATIO = 0.75


def find_sticky_index(messages: list[ChatMessage]) -> int | None:
    """Position of the first system message, which is never evicted."""
    for i, message in enumerate(messages):
        if message.role == MessageRole.SYSTEM:
            return i
    return None


class TokenBufferMemory(BaseMemory):
    """
    History that evicts the oldest messages once a token limit is exceeded.

    After every mutation whole messages are dropped from the front until the
    summed token count is within ``token_limit``. The first system message
    is kept and counts toward the limit; if it alone is larger than the limit
    the mutation fails with ConfigurationError.

    Args:
        token_limit: Maximum total tokens kept
        tokenizer: Token counter applied to each message's text
    """

    def __init__(
        self,
        token_limit: int = DEFAULT_TOKEN_LIMIT,
        tokenizer: Tokenizer = approximate_token_count,
    ):
        super().__init__()
        if token_limit <= 0:
            raise ConfigurationError(
                "token_limit must be positive", details={"token_limit": token_limit}
            )
        self.token_limit = token_limit
        self.tokenizer = tokenizer

    @classmethod
    def from_llm(
        cls,
        llm: BaseLLM,
        token_limit: int | None = None,
        tokenizer: Tokenizer = approximate_token_count,
    ) -> "TokenBufferMemory":
        """Size the buffer from the model's context window.

        The default limit is 75% of the context left after reserving the
        model's output tokens.
        """
        if token_limit is None:
            meta = llm.metadata
            token_limit = max(
                1,
                int(DEFAULT_TOKEN_LIMIT_RATIO * (meta.context_window - meta.num_output_tokens)),
            )
        return cls(token_limit=token_limit, tokenizer=tokenizer)

    def _evict(
        self,
        messages: list[ChatMessage],
        limit: int,
    ) -> tuple[list[ChatMessage], int]:
        """Drop messages from the front, skipping the sticky one, until within ``limit``.

        Returns:
            The kept messages and their token total
        """
        counts = [self.tokenizer(m.text) for m in messages]
        total = sum(counts)
        sticky = find_sticky_index(messages)

        evicted: set[int] = set()
        for i in range(len(messages)):
            if total <= limit:
                break
            if i == sticky:
                continue
            evicted.add(i)
            total -= counts[i]

        kept = [m for i, m in enumerate(messages) if i not in evicted]
        return kept, total

    async def _fit(self, messages: list[ChatMessage]) -> list[ChatMessage]:
        sticky = find_sticky_index(messages)
        if sticky is not None:
            sticky_tokens = self.tokenizer(messages[sticky].text)
            if sticky_tokens > self.token_limit:
                raise ConfigurationError(
                    "System message alone exceeds the memory token limit",
                    details={"system_tokens": sticky_tokens, "token_limit": self.token_limit},
                )

        kept, total = self._evict(messages, self.token_limit)
        if messages and (not kept or kept[-1] is not messages[-1]):
            logger.warning(
                f"Newest message alone exceeds the {self.token_limit} token limit and was dropped"
            )
        elif len(kept) < len(messages):
            logger.debug(
                f"Evicted {len(messages) - len(kept)} messages, "
                f"{total}/{self.token_limit} tokens kept"
            )
        return kept

    async def get(
        self,
        input: str | None = None,
        initial_token_count: int = 0,
    ) -> list[ChatMessage]:
        """
        Messages to send, leaving room for ``initial_token_count`` tokens.

        With a reservation, older messages are left out of the returned view
        (the stored history is not changed) and the view does not start with
        an assistant or tool message. When even the system message does not
        fit, the view is empty.

        Raises:
            ValidationError: If the reservation is larger than the limit
        """
        if initial_token_count < 0 or initial_token_count > self.token_limit:
            raise ValidationError(
                f"initial_token_count {initial_token_count} outside 0..{self.token_limit}"
            )
        messages = list(self._messages)
        if initial_token_count == 0:
            return messages

        budget = self.token_limit - initial_token_count
        kept, total = self._evict(messages, budget)
        if total > budget:
            return []

        if len(kept) < len(messages):
            sticky = find_sticky_index(kept)
            start = 0 if sticky != 0 else 1
            while start < len(kept) and kept[start].role in (MessageRole.ASSISTANT, MessageRole.TOOL):
                kept.pop(start)
        return kept

    def token_count(self) -> int:
        """Tokens currently held."""
        return count_message_tokens(self._messages, self.tokenizer)
