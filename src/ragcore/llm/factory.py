"""LLM factory for creating LLM instances."""

from typing import Any

from loguru import logger

from ragcore.errors import ConfigurationError

from .base import BaseLLM
from .providers.mock import MockLLM


class LLMFactory:
    """Factory for creating LLM instances based on type.

    The ``openai`` provider is imported lazily so that the SDK is only
    touched when it is actually requested.
    """

    _registry: dict[str, type[BaseLLM]] = {
        "mock": MockLLM,
    }

    @classmethod
    def create(cls, llm_type: str, **params: Any) -> BaseLLM:
        """Create an LLM instance by type.

        Args:
            llm_type: Type identifier (e.g., "openai", "mock")
            **params: Initialization parameters for the LLM

        Raises:
            ConfigurationError: If LLM type is not registered
        """
        if llm_type == "openai" and llm_type not in cls._registry:
            from .providers.openai import OpenAILLM

            cls._registry["openai"] = OpenAILLM

        if llm_type not in cls._registry:
            available = ", ".join(cls.list_types())
            raise ConfigurationError(
                f"Unknown LLM type: '{llm_type}'. Available types: {available}"
            )

        llm_class = cls._registry[llm_type]
        logger.debug(f"Creating {llm_class.__name__} with params: {sorted(params)}")

        return llm_class(**params)

    @classmethod
    def register(cls, llm_type: str, llm_class: type[BaseLLM]):
        """Register a new LLM type.

        Raises:
            TypeError: If llm_class is not a subclass of BaseLLM
        """
        if not issubclass(llm_class, BaseLLM):
            raise TypeError(
                f"{llm_class.__name__} must be a subclass of BaseLLM"
            )

        cls._registry[llm_type] = llm_class
        logger.info(f"Registered LLM type '{llm_type}': {llm_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        """Get list of available LLM types."""
        return sorted(set(cls._registry) | {"openai"})
