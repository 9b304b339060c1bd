"""PDF text extraction with pypdf."""

import io
import logging

from pypdf import PdfReader

from ...core.domain.exceptions import PDFParseError
from ...core.ports.pdf_parser_port import PDFParserPort

logger = logging.getLogger(__name__)

# Form feed between pages gives the segmenter a reliable marker to split on
PAGE_SEPARATOR = "\f\n"


class PypdfParser(PDFParserPort):
    """Extracts text page by page and joins it into one blob."""

    def extract(self, data: bytes) -> tuple[str, int]:
        """Extract the full text and declared page count.

        Args:
            data: Raw PDF bytes.

        Returns:
            Tuple of (text, page_count). Text may be empty for image-only PDFs.

        Raises:
            PDFParseError: If pypdf cannot read the document.
        """
        try:
            reader = PdfReader(io.BytesIO(data))
            text_parts = []
            for page in reader.pages:
                text = page.extract_text() or ""
                text_parts.append(text.replace("\ufeff", ""))
            page_count = len(reader.pages)
        except Exception as e:
            raise PDFParseError(
                f"Failed to parse PDF: {e}",
                cause=e,
                context={"size": len(data)},
            ) from e

        logger.debug("Extracted %d pages from %d byte PDF", page_count, len(data))
        return PAGE_SEPARATOR.join(text_parts), page_count
