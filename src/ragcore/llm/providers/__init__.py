from .mock import MockLLM

__all__ = ["MockLLM"]
