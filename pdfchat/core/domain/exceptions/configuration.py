"""Configuration-related exceptions for pdfchat."""

from .base import PDFChatError

MISSING_API_KEY_MESSAGE = "GEMINI_API_KEY environment variable is required"


class ConfigurationError(PDFChatError):
    """Configuration or environment variable errors."""

    error_code = "PDF_CFG_001"


class MissingAPIKeyError(ConfigurationError):
    """The Gemini API key is not configured.

    The message always names ``GEMINI_API_KEY``; the HTTP layer keys its
    "server configuration error" response off that substring.
    """

    error_code = "PDF_CFG_002"

    def __init__(self, message: str = MISSING_API_KEY_MESSAGE, **kwargs) -> None:
        super().__init__(message, **kwargs)
