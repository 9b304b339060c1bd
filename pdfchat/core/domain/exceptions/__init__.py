"""Custom exception hierarchy for pdfchat.

Each exception includes an error code, the location it was raised from,
an optional cause, and JSON serialization for structured logging.
Import from this package directly:

    from pdfchat.core.domain.exceptions import PDFChatError, VectorStoreNotFoundError
"""

# Base classes
from .base import ExceptionContext, PDFChatError

# Configuration exceptions
from .configuration import (
    MISSING_API_KEY_MESSAGE,
    ConfigurationError,
    MissingAPIKeyError,
)

# Embedding exceptions
from .embedding import (
    EmbeddingAPIError,
    EmbeddingError,
)

# Ingestion exceptions
from .ingestion import (
    EmptyDocumentError,
    IngestionError,
    InvalidInputError,
    PDFParseError,
)

# LLM exceptions
from .llm import (
    LLMError,
    NoResponseBodyError,
    StreamProtocolError,
    UpstreamHTTPError,
)

# Validation exceptions
from .validation import (
    EmptyPromptError,
    InvalidMessageError,
    ValidationError,
)

# Vector store exceptions
from .vector_store import (
    INVALID_PERSISTED_STATE_MESSAGE,
    VECTOR_STORE_NOT_FOUND_MESSAGE,
    InvalidPersistedStateError,
    VectorStoreError,
    VectorStoreNotFoundError,
    VectorStoreQueryError,
)

__all__ = [
    # Base
    "ExceptionContext",
    "PDFChatError",
    # Configuration
    "ConfigurationError",
    "MissingAPIKeyError",
    "MISSING_API_KEY_MESSAGE",
    # Ingestion
    "IngestionError",
    "InvalidInputError",
    "EmptyDocumentError",
    "PDFParseError",
    # Vector Store
    "VectorStoreError",
    "VectorStoreNotFoundError",
    "InvalidPersistedStateError",
    "VectorStoreQueryError",
    "VECTOR_STORE_NOT_FOUND_MESSAGE",
    "INVALID_PERSISTED_STATE_MESSAGE",
    # Embedding
    "EmbeddingError",
    "EmbeddingAPIError",
    # LLM
    "LLMError",
    "UpstreamHTTPError",
    "NoResponseBodyError",
    "StreamProtocolError",
    # Validation
    "ValidationError",
    "EmptyPromptError",
    "InvalidMessageError",
]
