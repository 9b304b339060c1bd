"""Document, page and index node models for the RAG pipeline."""

from dataclasses import dataclass, field
from typing import Any

DOCUMENT_SOURCE_ID = "pdf-document"


@dataclass
class Page:
    """One page of extracted PDF text.

    Attributes:
        number: 1-based page number, contiguous within a document.
        text: Text attributed to this page by the segmenter.
        source_id: Identifier of the document the page belongs to.
    """

    number: int
    text: str
    source_id: str = DOCUMENT_SOURCE_ID

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``pages.json`` record shape."""
        return {"page": self.number, "text": self.text}


@dataclass
class Node:
    """A text node stored in the vector index.

    Page nodes carry ``page`` in their metadata; the legacy whole-document
    node only carries ``source``.
    """

    node_id: str
    text: str
    metadata: dict[str, Any]
    embedding: list[float] = field(default_factory=list)

    @property
    def page(self) -> int | None:
        return self.metadata.get("page")

    @classmethod
    def from_page(cls, page: Page) -> "Node":
        return cls(
            node_id=f"page-{page.number}",
            text=page.text,
            metadata={"page": page.number, "source": page.source_id},
        )

    @classmethod
    def from_document_text(cls, text: str) -> "Node":
        return cls(
            node_id=DOCUMENT_SOURCE_ID,
            text=text,
            metadata={"source": DOCUMENT_SOURCE_ID},
        )


@dataclass
class SearchResult:
    """A node matched by the vector index with its similarity score."""

    node: Node
    score: float
