"""pdfchat - chat with an uploaded PDF using retrieval-augmented generation."""

__version__ = "1.0.0"
