"""LLM and streaming exceptions for pdfchat."""

from .base import PDFChatError


class LLMError(PDFChatError):
    """Base error for completion API operations."""

    error_code = "PDF_LLM_001"


class UpstreamHTTPError(LLMError):
    """The hosted model API answered with a non-2xx status.

    Common causes:
    - Invalid API key (400/403)
    - Quota exhausted (429)
    - Model name not available in this region (404)
    """

    error_code = "PDF_LLM_002"

    def __init__(self, status: int, body: str, **kwargs) -> None:
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}", **kwargs)


class NoResponseBodyError(LLMError):
    """The streaming request succeeded but carried no body to read."""

    error_code = "PDF_LLM_003"

    def __init__(self, message: str = "No response body received", **kwargs) -> None:
        super().__init__(message, **kwargs)


class StreamProtocolError(LLMError):
    """The SSE stream was interrupted or could not be read."""

    error_code = "PDF_LLM_004"
