"""Document Store Port Interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..domain import Page


class DocumentStorePort(ABC):
    """Abstract interface for persisting the last uploaded document."""

    @abstractmethod
    def save_document_text(self, text: str) -> None: ...

    @abstractmethod
    def save_pages(self, pages: list[Page]) -> None: ...

    @abstractmethod
    def save_vector_store(self, data: dict[str, Any]) -> None: ...

    @abstractmethod
    def load_pages(self) -> list[Page] | None:
        """Return persisted pages, or None when absent or malformed."""
        ...

    @abstractmethod
    def load_document_text(self) -> str | None: ...

    @abstractmethod
    def has_persisted_document(self) -> bool: ...

    @abstractmethod
    def clear(self) -> None: ...
