"""LLM Port Interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterator


class LLMPort(ABC):
    """Abstract interface for streaming completion providers."""

    @abstractmethod
    def stream_completion(self, prompt: str) -> Iterator[str]:
        """Open a completion stream and return an iterator of text chunks.

        Request-level failures (missing key, non-2xx status, missing body)
        are raised before the iterator is returned.
        """
        ...
