"""PDF ingestion: extract, segment into pages, embed and persist."""

import logging
from collections.abc import Callable

from ..domain import Node, Page
from ..domain.exceptions import EmptyDocumentError, InvalidInputError
from ..ports.document_store_port import DocumentStorePort
from ..ports.pdf_parser_port import PDFParserPort
from ..ports.vector_store_port import VectorStorePort
from .page_segmenter import PageSegmenter
from .session import SessionState

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT_MESSAGE = (
    "No text content found in PDF. The PDF might be image-based, corrupted, or protected."
)


class IngestionService:
    """Builds the vector index for an uploaded document."""

    def __init__(
        self,
        parser: PDFParserPort,
        index_factory: Callable[[], VectorStorePort],
        document_store: DocumentStorePort,
        session: SessionState,
        segmenter: PageSegmenter | None = None,
    ) -> None:
        """Initialize the ingestion service.

        Args:
            parser: PDF text extractor.
            index_factory: Creates a fresh, empty vector index.
            document_store: Flat-file persistence for reloads.
            session: Session state that receives the new index.
            segmenter: Page segmenter, default thresholds if omitted.
        """
        self.parser = parser
        self.index_factory = index_factory
        self.document_store = document_store
        self.session = session
        self.segmenter = segmenter or PageSegmenter()

    def ingest(self, data: bytes) -> VectorStorePort:
        """Ingest raw PDF bytes and make the result the active index.

        Raises:
            InvalidInputError: If ``data`` is not a non-empty byte buffer.
            PDFParseError: If the PDF cannot be read.
            EmptyDocumentError: If the PDF holds no extractable text.
        """
        if not isinstance(data, (bytes, bytearray)) or len(data) == 0:
            raise InvalidInputError("Invalid file buffer provided")

        text, page_count = self.parser.extract(bytes(data))
        return self.ingest_text(text, page_count)

    def ingest_text(self, text: str, page_count: int) -> VectorStorePort:
        """Run the indexing pipeline on already-extracted text."""
        if not text or not text.strip():
            raise EmptyDocumentError(EMPTY_DOCUMENT_MESSAGE)

        page_texts = self.segmenter.segment(text, page_count)
        pages = [Page(number=i, text=page_text) for i, page_text in enumerate(page_texts, 1)]
        nodes = [Node.from_page(page) for page in pages if page.text.strip()]

        index = self.index_factory()
        index.add_nodes(nodes)
        self.session.set_index(index)
        logger.info("Indexed %d of %d pages", len(nodes), len(pages))

        self._persist(text, pages, index)
        return index

    def _persist(self, text: str, pages: list[Page], index: VectorStorePort) -> None:
        # The index is already live in memory, a failed write only loses reloads.
        # Files from the previous upload go first so a partial write never mixes documents.
        try:
            self.document_store.clear()
            self.document_store.save_pages(pages)
            self.document_store.save_document_text(text)
            self.document_store.save_vector_store(index.to_dict())
            logger.info("PDF processed and index persisted")
        except Exception as e:
            logger.error("Failed to persist index: %s", e)
