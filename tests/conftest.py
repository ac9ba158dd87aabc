"""Pytest configuration and global fixtures for ragcore tests."""

from pathlib import Path

import pytest

from ragcore.embedder import MockEmbedder
from ragcore.entities import NodeWithScore, TextNode
from ragcore.llm import MockLLM


# ==================== Component Fixtures ====================

@pytest.fixture
def mock_llm():
    """Scripted LLM that answers YES unless told otherwise."""
    return MockLLM(default_response="YES")


@pytest.fixture
def mock_embedder():
    return MockEmbedder(dimension=8)


@pytest.fixture
def make_nodes():
    """Build scored nodes with ids n0, n1, ... from a list of scores."""
    def _make(scores, texts=None):
        texts = texts or [f"Passage number {i}." for i in range(len(scores))]
        return [
            NodeWithScore(node=TextNode(id=f"n{i}", text=text), score=score)
            for i, (score, text) in enumerate(zip(scores, texts))
        ]
    return _make


@pytest.fixture
def word_tokenizer():
    """Tokenizer that counts whitespace-separated words."""
    return lambda text: len(text.split())


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests")


def pytest_collection_modifyitems(config, items):
    for item in items:
        rel_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "unit" in rel_path.parts:
            item.add_marker(pytest.mark.unit)
