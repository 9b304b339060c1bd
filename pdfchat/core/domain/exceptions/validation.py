"""Validation exceptions for pdfchat."""

from .base import PDFChatError


class ValidationError(PDFChatError):
    """Input validation failed."""

    error_code = "PDF_VAL_001"


class EmptyPromptError(ValidationError):
    """Prompt cannot be empty or whitespace only."""

    error_code = "PDF_VAL_002"

    def __init__(self, message: str = "Prompt cannot be empty", **kwargs) -> None:
        super().__init__(message, **kwargs)


class InvalidMessageError(ValidationError):
    """Chat message is missing, not a string, or blank."""

    error_code = "PDF_VAL_003"
