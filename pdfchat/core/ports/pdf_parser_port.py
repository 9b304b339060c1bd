"""PDF Parser Port Interface."""

from abc import ABC, abstractmethod


class PDFParserPort(ABC):
    """Abstract interface for PDF text extraction."""

    @abstractmethod
    def extract(self, data: bytes) -> tuple[str, int]:
        """Extract the full text and the declared page count from a PDF."""
        ...
