"""Vector Store Port Interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..domain import Node, SearchResult


class VectorStorePort(ABC):
    """Abstract interface for a vector index holding one document."""

    @abstractmethod
    def add_nodes(self, nodes: list[Node]) -> int:
        """Embed and add nodes to the index."""
        ...

    @abstractmethod
    def search(self, query: str, top_k: int = 2) -> list[SearchResult]:
        """Return the nearest nodes to the query, best first."""
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize the index contents for persistence."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of nodes in the index."""
        ...
