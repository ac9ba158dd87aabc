"""Memory factory for creating conversation buffers."""

from typing import Any

from loguru import logger

from ragcore.errors import ConfigurationError

from .base import BaseMemory, SimpleMemory
from .summary_buffer import SummaryBufferMemory
from .token_buffer import TokenBufferMemory


class MemoryFactory:
    """Factory for creating memory instances based on type."""

    _registry: dict[str, type[BaseMemory]] = {
        "simple": SimpleMemory,
        "token_buffer": TokenBufferMemory,
        "summary_buffer": SummaryBufferMemory,
    }

    @classmethod
    def create(cls, memory_type: str, **params: Any) -> BaseMemory:
        """Create a memory instance by type.

        Args:
            memory_type: Type identifier (e.g., "token_buffer")
            **params: Initialization parameters; "summary_buffer" needs ``summary_llm``

        Raises:
            ConfigurationError: If memory type is not registered
        """
        if memory_type not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise ConfigurationError(
                f"Unknown memory type: '{memory_type}'. Available types: {available}"
            )

        memory_class = cls._registry[memory_type]
        logger.debug(f"Creating {memory_class.__name__} with params: {sorted(params)}")
        return memory_class(**params)

    @classmethod
    def register(cls, memory_type: str, memory_class: type[BaseMemory]):
        """Register a new memory type.

        Raises:
            TypeError: If memory_class is not a subclass of BaseMemory
        """
        if not issubclass(memory_class, BaseMemory):
            raise TypeError(f"{memory_class.__name__} must be a subclass of BaseMemory")

        cls._registry[memory_type] = memory_class
        logger.info(f"Registered memory type '{memory_type}': {memory_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        return list(cls._registry.keys())
