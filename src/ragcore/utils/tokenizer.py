"""Token counting used by the memory buffers."""

import math
from typing import Callable

Tokenizer = Callable[[str], int]


def approximate_token_count(text: str) -> int:
    """Rough token estimate of one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


def count_message_tokens(messages, tokenizer: Tokenizer = approximate_token_count) -> int:
    """Sum the tokenizer over the transport text of each chat message."""
    return sum(tokenizer(m.text) for m in messages)
