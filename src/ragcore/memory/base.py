"""Conversation memory interface and the unbounded buffer."""

import asyncio
from abc import ABC, abstractmethod

from ragcore.entities.message import ChatMessage


class BaseMemory(ABC):
    """
    Ordered chat history owned by one conversation.

    Mutations are serialized on an ``asyncio.Lock`` and are all-or-nothing:
    each variant computes the new history with ``_fit`` and the result is
    committed only if that succeeds. Reads return snapshot lists.
    """

    def __init__(self):
        self._messages: list[ChatMessage] = []
        self._lock = asyncio.Lock()

    @abstractmethod
    async def _fit(self, messages: list[ChatMessage]) -> list[ChatMessage]:
        """Bring a candidate history within this buffer's bound.

        Must not touch ``self._messages``; raising leaves the buffer unchanged.
        """

    async def get(self, input: str | None = None) -> list[ChatMessage]:
        """Messages to send with the next model call."""
        return list(self._messages)

    async def get_all(self) -> list[ChatMessage]:
        """The full stored history, usable as a snapshot for ``set``."""
        return list(self._messages)

    async def put(self, message: ChatMessage) -> None:
        await self.put_messages([message])

    async def put_messages(self, messages: list[ChatMessage]) -> None:
        async with self._lock:
            self._messages = await self._fit([*self._messages, *messages])

    async def set(self, messages: list[ChatMessage]) -> None:
        """Replace the history."""
        async with self._lock:
            self._messages = await self._fit(list(messages))

    async def reset(self) -> None:
        async with self._lock:
            self._messages = []

    def __len__(self) -> int:
        return len(self._messages)


class SimpleMemory(BaseMemory):
    """Append-only history with no bound."""

    async def _fit(self, messages: list[ChatMessage]) -> list[ChatMessage]:
        return messages
