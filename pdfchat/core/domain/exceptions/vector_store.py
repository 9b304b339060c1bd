"""Vector store and retrieval exceptions for pdfchat."""

from .base import PDFChatError

VECTOR_STORE_NOT_FOUND_MESSAGE = "Vector store not found. Please upload a PDF first."
INVALID_PERSISTED_STATE_MESSAGE = "Persisted document text is empty or invalid."


class VectorStoreError(PDFChatError):
    """Base error for vector index operations."""

    error_code = "PDF_VEC_001"


class VectorStoreNotFoundError(VectorStoreError):
    """No index in memory and nothing persisted to rebuild one from.

    The message text is matched by callers, keep it stable.
    """

    error_code = "PDF_VEC_002"

    def __init__(self, message: str = VECTOR_STORE_NOT_FOUND_MESSAGE, **kwargs) -> None:
        super().__init__(message, **kwargs)


class InvalidPersistedStateError(VectorStoreError):
    """Persisted document files exist but hold empty or unusable text."""

    error_code = "PDF_VEC_003"

    def __init__(self, message: str = INVALID_PERSISTED_STATE_MESSAGE, **kwargs) -> None:
        super().__init__(message, **kwargs)


class VectorStoreQueryError(VectorStoreError):
    """Failed to build or query the in-process index.

    Common causes:
    - Embedding dimension mismatch between documents and query
    - Index queried before any points were added
    """

    error_code = "PDF_VEC_004"
