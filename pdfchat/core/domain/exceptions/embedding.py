"""Embedding exceptions for pdfchat."""

from .base import PDFChatError


class EmbeddingError(PDFChatError):
    """Failed to generate embeddings."""

    error_code = "PDF_EMB_001"


class EmbeddingAPIError(EmbeddingError):
    """Embedding API returned a non-2xx response."""

    error_code = "PDF_EMB_002"
