"""Unit tests for exception handling system.

Tests both the exception hierarchy and the exception handler utilities,
including the mapping of failures to HTTP responses.
"""

import json
from datetime import datetime

import pytest

from pdfchat.adapters.common.exception_handler import (
    CHAT_FAILED_MESSAGE,
    NO_DOCUMENTS_MESSAGE,
    SERVER_CONFIGURATION_MESSAGE,
    chat_error_response,
    format_exception_json,
    get_error_code,
    get_http_status_code,
)
from pdfchat.core.domain.exceptions import (
    MISSING_API_KEY_MESSAGE,
    VECTOR_STORE_NOT_FOUND_MESSAGE,
    ConfigurationError,
    EmbeddingAPIError,
    EmbeddingError,
    EmptyDocumentError,
    EmptyPromptError,
    IngestionError,
    InvalidInputError,
    InvalidMessageError,
    InvalidPersistedStateError,
    LLMError,
    MissingAPIKeyError,
    NoResponseBodyError,
    PDFChatError,
    PDFParseError,
    StreamProtocolError,
    UpstreamHTTPError,
    ValidationError,
    VectorStoreError,
    VectorStoreNotFoundError,
    VectorStoreQueryError,
)

# Apply @pytest.mark.unit to all tests in this module
pytestmark = pytest.mark.unit


class TestExceptionHierarchy:
    """Tests for the exception class hierarchy."""

    def test_pdfchat_error_is_base(self):
        """PDFChatError should be the base for all custom exceptions."""
        for cls in (
            ConfigurationError,
            IngestionError,
            VectorStoreError,
            EmbeddingError,
            LLMError,
            ValidationError,
        ):
            assert issubclass(cls, PDFChatError)

    def test_vector_store_errors(self):
        assert issubclass(VectorStoreNotFoundError, VectorStoreError)
        assert issubclass(InvalidPersistedStateError, VectorStoreError)
        assert issubclass(VectorStoreQueryError, VectorStoreError)

    def test_llm_errors(self):
        assert issubclass(UpstreamHTTPError, LLMError)
        assert issubclass(NoResponseBodyError, LLMError)
        assert issubclass(StreamProtocolError, LLMError)

    def test_ingestion_errors(self):
        assert issubclass(InvalidInputError, IngestionError)
        assert issubclass(EmptyDocumentError, IngestionError)
        assert issubclass(PDFParseError, IngestionError)

    def test_validation_and_config_errors(self):
        assert issubclass(EmptyPromptError, ValidationError)
        assert issubclass(InvalidMessageError, ValidationError)
        assert issubclass(MissingAPIKeyError, ConfigurationError)
        assert issubclass(EmbeddingAPIError, EmbeddingError)


class TestExceptionCreation:
    """Tests for creating and using exceptions."""

    def test_basic_exception_creation(self):
        """Basic exception should have message and error code."""
        exc = PDFChatError("Test error message")
        assert str(exc) == "Test error message"
        assert exc.message == "Test error message"
        assert exc.error_code == "PDF_ERR_001"

    def test_default_messages(self):
        assert VectorStoreNotFoundError().message == VECTOR_STORE_NOT_FOUND_MESSAGE
        assert MissingAPIKeyError().message == MISSING_API_KEY_MESSAGE
        assert EmptyPromptError().message == "Prompt cannot be empty"
        assert NoResponseBodyError().message == "No response body received"

    def test_upstream_http_error_keeps_status_and_body(self):
        exc = UpstreamHTTPError(503, "overloaded")

        assert exc.status == 503
        assert exc.body == "overloaded"
        assert str(exc) == "HTTP 503: overloaded"

    def test_exception_with_context_and_cause(self):
        original = ConnectionError("Network unreachable")
        exc = EmbeddingAPIError("Embedding failed", cause=original, context={"batch": 2})

        assert exc.cause is original
        assert exc.extra_context["batch"] == 2

    def test_exception_captures_location(self):
        """Exception should capture file, method, and line number."""
        exc = VectorStoreNotFoundError()
        assert exc.location.file_name == "test_exceptions.py"
        assert exc.location.method_name == "test_exception_captures_location"
        assert exc.location.line_number > 0

    def test_each_exception_has_unique_error_code(self):
        """Each exception type should have a unique error code."""
        classes = [
            PDFChatError,
            ConfigurationError,
            MissingAPIKeyError,
            IngestionError,
            InvalidInputError,
            EmptyDocumentError,
            PDFParseError,
            VectorStoreError,
            VectorStoreNotFoundError,
            InvalidPersistedStateError,
            VectorStoreQueryError,
            EmbeddingError,
            EmbeddingAPIError,
            LLMError,
            NoResponseBodyError,
            StreamProtocolError,
            ValidationError,
            EmptyPromptError,
            InvalidMessageError,
        ]
        codes = {cls.error_code for cls in classes} | {UpstreamHTTPError.error_code}

        assert len(codes) == len(classes) + 1


class TestExceptionToDict:
    """Tests for exception JSON serialization."""

    def test_to_dict_basic_structure(self):
        exc = VectorStoreQueryError("Test error")
        result = exc.to_dict()

        assert result["error"] == {
            "type": "VectorStoreQueryError",
            "code": "PDF_VEC_004",
            "message": "Test error",
        }
        assert set(result["location"]) == {"class", "method", "file", "line", "timestamp"}
        assert datetime.fromisoformat(result["location"]["timestamp"]).tzinfo is not None

    def test_to_dict_includes_cause(self):
        exc = InvalidInputError("Invalid input", cause=ValueError("Bad value"))
        result = exc.to_dict()

        assert result["cause"] == {"type": "ValueError", "message": "Bad value"}

    def test_to_dict_excludes_trace_by_default(self):
        exc = InvalidInputError("Invalid input", cause=ValueError("Bad value"))

        assert "stack_trace" not in exc.to_dict()

    def test_to_dict_is_json_serializable(self):
        exc = UpstreamHTTPError(429, "quota", context={"model": "gemini", "retry": 1})

        assert isinstance(json.dumps(exc.to_dict()), str)


class TestExceptionHandler:
    """Tests for exception handler utilities."""

    def test_format_custom_exception(self):
        exc = PDFParseError("Failed to parse PDF: bad xref", context={"size": 10})
        result = format_exception_json(exc, extra_context={"operation": "upload"})

        assert result["error"]["code"] == "PDF_ING_004"
        assert result["context"] == {"size": 10, "operation": "upload"}

    def test_format_standard_exception(self):
        try:
            raise ValueError("Standard error")
        except ValueError as e:
            result = format_exception_json(e, include_trace=True)

        assert result["error"] == {
            "type": "ValueError",
            "code": "PYTHON_ERR",
            "message": "Standard error",
        }
        assert result["location"]["method"] == "test_format_standard_exception"
        assert result["stack_trace"]

    def test_get_error_code(self):
        assert get_error_code(VectorStoreNotFoundError()) == "PDF_VEC_002"
        assert get_error_code(RuntimeError("test")) == "PYTHON_ERR"


class TestHTTPStatusCodes:
    """Tests for HTTP status code mapping."""

    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (EmptyPromptError(), 400),
            (InvalidMessageError("Message is required"), 400),
            (VectorStoreNotFoundError(), 404),
            (MissingAPIKeyError(), 500),
            (UpstreamHTTPError(500, "boom"), 502),
            (EmbeddingAPIError("HTTP 403"), 502),
            (InvalidPersistedStateError(), 500),
            (PDFParseError("bad"), 500),
            (PDFChatError("generic"), 500),
            (RuntimeError(VECTOR_STORE_NOT_FOUND_MESSAGE), 404),
            (ValueError("test"), 400),
            (ConnectionError("test"), 503),
            (TimeoutError("test"), 503),
            (RuntimeError("test"), 500),
        ],
    )
    def test_status_mapping(self, exc, status):
        assert get_http_status_code(exc) == status


class TestChatErrorResponse:
    """Tests for the client-facing chat error mapping."""

    def test_missing_index(self):
        assert chat_error_response(VectorStoreNotFoundError()) == (404, NO_DOCUMENTS_MESSAGE)

    def test_not_found_message_in_plain_exception(self):
        exc = RuntimeError("Vector store not found somewhere deep")

        assert chat_error_response(exc) == (404, NO_DOCUMENTS_MESSAGE)

    def test_missing_api_key(self):
        assert chat_error_response(MissingAPIKeyError()) == (500, SERVER_CONFIGURATION_MESSAGE)

    @pytest.mark.parametrize(
        "exc",
        [
            UpstreamHTTPError(500, "internal details"),
            InvalidPersistedStateError(),
            RuntimeError("secret stack info"),
        ],
    )
    def test_other_failures_are_generic(self, exc):
        assert chat_error_response(exc) == (500, CHAT_FAILED_MESSAGE)
