"""Exception handling utilities for consistent error formatting.

This module formats exceptions as structured JSON, logs them consistently,
and maps them to HTTP status codes and client-facing chat errors.
"""

import logging
import traceback
from typing import Any

from ...core.domain.exceptions import (
    MISSING_API_KEY_MESSAGE,
    VECTOR_STORE_NOT_FOUND_MESSAGE,
    ConfigurationError,
    EmbeddingError,
    IngestionError,
    LLMError,
    PDFChatError,
    ValidationError,
    VectorStoreError,
    VectorStoreNotFoundError,
)

logger = logging.getLogger(__name__)

NO_DOCUMENTS_MESSAGE = "No documents have been uploaded yet. Please upload a PDF first."
SERVER_CONFIGURATION_MESSAGE = "Server configuration error"
CHAT_FAILED_MESSAGE = "An error occurred while processing your message"

# Substrings matched against plain exception messages
_NOT_FOUND_MARKER = VECTOR_STORE_NOT_FOUND_MESSAGE.split(".")[0]
_MISSING_KEY_MARKER = MISSING_API_KEY_MESSAGE.split()[0]


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Format any exception as structured JSON.

    Works with both PDFChatError and standard Python exceptions.

    Args:
        exc: The exception to format.
        include_trace: If True, include full stack trace.
        extra_context: Additional context to include in output.

    Returns:
        Dictionary with structured error information.
    """
    if isinstance(exc, PDFChatError):
        result = exc.to_dict(include_trace=include_trace)
        if extra_context:
            result.setdefault("context", {}).update(extra_context)
        return result

    tb = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last_frame = tb[-1] if tb else None

    result: dict[str, Any] = {
        "error": {
            "type": type(exc).__name__,
            "code": "PYTHON_ERR",
            "message": str(exc),
        },
        "location": {
            "class": "<unknown>",
            "method": last_frame.name if last_frame else "<unknown>",
            "file": (
                last_frame.filename.split("\\")[-1].split("/")[-1] if last_frame else "<unknown>"
            ),
            "line": last_frame.lineno if last_frame else 0,
        },
    }

    if extra_context:
        result["context"] = extra_context

    if include_trace:
        result["stack_trace"] = [
            line.strip()
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
            if line.strip()
        ]

    return result


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log an exception with its traceback and error code.

    The exception travels on the record as ``exc_info`` and ``extra_context`` as
    the record's ``context``, so the JSON formatter can render both.

    Example:
        >>> try:
        ...     ingestion.ingest(data)
        ... except Exception as e:
        ...     log_exception(e, extra_context={"operation": "upload"})
    """
    log_instance = log or logger
    log_instance.log(
        level,
        "%s [%s]: %s",
        type(exc).__name__,
        get_error_code(exc),
        exc,
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"context": extra_context or {}},
    )


def get_error_code(exc: Exception) -> str:
    """Error code of a PDFChatError, or "PYTHON_ERR" for anything else."""
    if isinstance(exc, PDFChatError):
        return exc.error_code
    return "PYTHON_ERR"


def get_http_status_code(exc: Exception) -> int:
    """Map exception type to appropriate HTTP status code.

    Args:
        exc: The exception to map.

    Returns:
        HTTP status code (400, 404, 500, 502, 503).
    """
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, VectorStoreNotFoundError):
        return 404
    if isinstance(exc, ConfigurationError):
        return 500
    if isinstance(exc, LLMError | EmbeddingError):
        return 502
    if isinstance(exc, VectorStoreError | IngestionError | PDFChatError):
        return 500

    # Standard Python exceptions
    message = str(exc)
    if _NOT_FOUND_MARKER in message:
        return 404
    if isinstance(exc, ValueError):
        return 400
    if isinstance(exc, ConnectionError | TimeoutError):
        return 503

    return 500


def chat_error_response(exc: Exception) -> tuple[int, str]:
    """Map a chat failure to (status code, client-safe message).

    Internal details never reach the client. Only a missing document and a
    missing API key are distinguished.
    """
    message = str(exc)
    if isinstance(exc, VectorStoreNotFoundError) or _NOT_FOUND_MARKER in message:
        return 404, NO_DOCUMENTS_MESSAGE
    if _MISSING_KEY_MARKER in message:
        return 500, SERVER_CONFIGURATION_MESSAGE
    return 500, CHAT_FAILED_MESSAGE
