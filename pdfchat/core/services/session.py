"""Process-wide session state: the loaded index and the conversation memory."""

import logging
from collections.abc import Callable

from ..ports.vector_store_port import VectorStorePort
from .memory import ConversationMemory

logger = logging.getLogger(__name__)


class SessionState:
    """Holds the current vector index and conversation memory.

    The memory is created lazily by ``memory_factory`` so its budget is
    configured once and then reused across requests.
    """

    def __init__(self, memory_factory: Callable[[], ConversationMemory] = ConversationMemory) -> None:
        self._memory_factory = memory_factory
        self._index: VectorStorePort | None = None
        self._memory: ConversationMemory | None = None

    def get_index(self) -> VectorStorePort | None:
        return self._index

    def set_index(self, index: VectorStorePort | None) -> None:
        self._index = index

    def reset_index(self) -> None:
        self._index = None

    def get_memory(self) -> ConversationMemory:
        if self._memory is None:
            self._memory = self._memory_factory()
            logger.debug(
                "Created conversation memory (token_limit=%d, short_term_ratio=%.2f)",
                self._memory.token_limit,
                self._memory.short_term_ratio,
            )
        return self._memory

    def set_memory(self, memory: ConversationMemory | None) -> None:
        self._memory = memory

    def reset_memory(self) -> None:
        self._memory = None

    def reset(self) -> None:
        """Drop the index and the conversation."""
        self.reset_index()
        self.reset_memory()
