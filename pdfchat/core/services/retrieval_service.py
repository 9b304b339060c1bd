"""Retrieval of relevant pages from the active or persisted index."""

import logging
from collections.abc import Callable

from ..domain import Node, RetrievalResult, SearchResult
from ..domain.exceptions import InvalidPersistedStateError, VectorStoreNotFoundError
from ..ports.document_store_port import DocumentStorePort
from ..ports.vector_store_port import VectorStorePort
from .session import SessionState

logger = logging.getLogger(__name__)


def make_preview(text: str, max_chars: int = 200) -> str:
    """Bound a source text for display, marking truncation with an ellipsis."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."


class RetrievalService:
    """Finds the pages most relevant to a question."""

    def __init__(
        self,
        session: SessionState,
        document_store: DocumentStorePort,
        index_factory: Callable[[], VectorStorePort],
        top_k: int = 2,
        min_score: float = 0.0,
        preview_chars: int = 200,
    ) -> None:
        self.session = session
        self.document_store = document_store
        self.index_factory = index_factory
        self.top_k = top_k
        self.min_score = min_score
        self.preview_chars = preview_chars

    def get_index(self) -> VectorStorePort:
        """Return the session index, rebuilding it from disk if needed.

        Raises:
            VectorStoreNotFoundError: Nothing loaded and nothing persisted,
                or the rebuild failed for any unexpected reason.
            InvalidPersistedStateError: The persisted document text is blank.
        """
        index = self.session.get_index()
        if index is not None:
            return index

        try:
            index = self._reload()
        except (VectorStoreNotFoundError, InvalidPersistedStateError):
            raise
        except Exception as e:
            logger.error("Error loading index: %s", e)
            raise VectorStoreNotFoundError(cause=e) from e

        self.session.set_index(index)
        return index

    def _reload(self) -> VectorStorePort:
        pages = self.document_store.load_pages()
        if pages:
            nodes = [Node.from_page(page) for page in pages if page.text.strip()]
            if nodes:
                index = self.index_factory()
                index.add_nodes(nodes)
                logger.info("Index recreated from %d persisted pages", len(nodes))
                return index

        text = self.document_store.load_document_text()
        if text is None:
            raise VectorStoreNotFoundError()
        if not text.strip():
            raise InvalidPersistedStateError()

        index = self.index_factory()
        index.add_nodes([Node.from_document_text(text)])
        logger.info("Index recreated from persisted document text")
        return index

    def search(self, query: str) -> list[SearchResult]:
        """Nearest nodes for ``query``, best first, at or above ``min_score``."""
        index = self.get_index()
        results = index.search(query, top_k=self.top_k)
        results = [r for r in results if r.score >= self.min_score]
        results.sort(key=lambda r: r.score, reverse=True)
        logger.debug("Retrieved %d results for query", len(results))
        return results

    def to_retrieval_result(self, result: SearchResult) -> RetrievalResult:
        return RetrievalResult(
            content=make_preview(result.node.text, self.preview_chars),
            score=min(1.0, max(0.0, result.score)),
            page=result.node.page,
        )

    def retrieve(self, query: str) -> list[RetrievalResult]:
        """Retrieve client-facing source previews for ``query``."""
        return [self.to_retrieval_result(r) for r in self.search(query)]
