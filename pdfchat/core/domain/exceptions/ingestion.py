"""PDF ingestion exceptions for pdfchat."""

from .base import PDFChatError


class IngestionError(PDFChatError):
    """Error while turning an uploaded PDF into an index."""

    error_code = "PDF_ING_001"


class InvalidInputError(IngestionError):
    """Upload payload is empty or not a byte buffer."""

    error_code = "PDF_ING_002"


class EmptyDocumentError(IngestionError):
    """The PDF contains no extractable text (scanned, corrupted or protected)."""

    error_code = "PDF_ING_003"


class PDFParseError(IngestionError):
    """The PDF parser failed to read the document."""

    error_code = "PDF_ING_004"
