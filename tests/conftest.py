"""
Pytest configuration and shared fixtures.
"""

import hashlib
import re
import shutil
import tempfile
from pathlib import Path

import pytest

from pdfchat.adapters.outbound.document_store import DocumentStore
from pdfchat.adapters.outbound.vector_store.qdrant_adapter import QdrantAdapter
from pdfchat.core.ports.embedding_port import EmbeddingPort
from pdfchat.core.services.memory import ConversationMemory
from pdfchat.core.services.session import SessionState

FAKE_EMBEDDING_DIMENSION = 64


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (API with fake backends)")


class FakeEmbedding(EmbeddingPort):
    """Deterministic bag-of-words embedding, no network access.

    Each word is hashed into one of a fixed number of buckets, so texts that
    share words end up close in cosine space.
    """

    def __init__(self, dimension: int = FAKE_EMBEDDING_DIMENSION) -> None:
        self.dimension = dimension
        self.query_calls: list[str] = []
        self.document_calls: list[list[str]] = []

    def _embed(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        # Constant component keeps empty texts away from the zero vector
        vector[0] = 0.1
        for word in re.findall(r"\w+", text.lower()):
            bucket = int(hashlib.md5(word.encode("utf-8")).hexdigest(), 16) % (self.dimension - 1)
            vector[bucket + 1] += 1.0
        return vector

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        return self._embed(text)

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        return [self._embed(text) for text in texts]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test data."""
    dir_path = Path(tempfile.mkdtemp(prefix="pdfchat_test_"))
    yield dir_path
    if dir_path.exists():
        shutil.rmtree(dir_path)


@pytest.fixture
def fake_embedding():
    return FakeEmbedding()


@pytest.fixture
def index_factory(fake_embedding):
    """Creates empty in-memory Qdrant indexes backed by the fake embedding."""
    return lambda: QdrantAdapter(embedding=fake_embedding)


@pytest.fixture
def document_store(temp_dir):
    return DocumentStore(temp_dir / "data")


@pytest.fixture
def session():
    """Fresh session state, reset after the test."""
    state = SessionState(memory_factory=lambda: ConversationMemory(4000, 0.7))
    yield state
    state.reset()


@pytest.fixture
def sample_pages():
    """Three pages of distinct text."""
    return [
        "Photosynthesis converts sunlight water and carbon dioxide into glucose and oxygen.",
        "The French Revolution began in 1789 with the storming of the Bastille in Paris.",
        "Binary search halves a sorted array at every step to find a target value.",
    ]
