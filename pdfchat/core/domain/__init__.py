"""Domain models for pdfchat.

- document: Page, Node and SearchResult for the vector index
- chat: ChatMessage, RetrievalResult and ChatAnswer for the chat flow

    from pdfchat.core.domain import Page, Node, RetrievalResult
"""

from .chat import ChatAnswer, ChatMessage, RetrievalResult, Role
from .document import DOCUMENT_SOURCE_ID, Node, Page, SearchResult

__all__ = [
    # Document models
    "DOCUMENT_SOURCE_ID",
    "Page",
    "Node",
    "SearchResult",
    # Chat models
    "Role",
    "ChatMessage",
    "RetrievalResult",
    "ChatAnswer",
]
