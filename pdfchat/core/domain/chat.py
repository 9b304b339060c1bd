"""Chat and retrieval result models."""

from dataclasses import dataclass, field
from typing import Literal

Role = Literal["user", "assistant"]


@dataclass
class ChatMessage:
    """A single turn in the conversation memory."""

    role: Role
    content: str


@dataclass
class RetrievalResult:
    """A retrieved source as shown to the client.

    Attributes:
        content: Bounded-length preview of the node text.
        score: Relevance score clamped to [0, 1].
        page: Page number, absent for the legacy whole-document node.
    """

    content: str
    score: float
    page: int | None = None


@dataclass
class ChatAnswer:
    """A completed, non-streaming answer."""

    message: str
    sources: list[RetrievalResult] = field(default_factory=list)
