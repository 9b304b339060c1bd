"""Token-budgeted conversation memory.

Messages are kept in order. A snapshot returns the most recent messages
verbatim up to ``short_term_ratio * token_limit`` tokens, then fills the rest
of the budget with older messages, dropping the oldest first.
"""

import logging
from collections.abc import Callable
from functools import lru_cache

import tiktoken

from ..domain import ChatMessage, Role

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_LIMIT = 4000
DEFAULT_SHORT_TERM_RATIO = 0.7

_ROLE_LABELS = {"user": "User", "assistant": "Assistant"}
TOKEN_ENCODING = "cl100k_base"


@lru_cache
def _get_encoder() -> tiktoken.Encoding | None:
    try:
        return tiktoken.get_encoding(TOKEN_ENCODING)
    except Exception as e:
        # The BPE file is fetched on first use and may be unreachable offline
        logger.warning("Token encoder %s unavailable, using heuristic: %s", TOKEN_ENCODING, e)
        return None


def _heuristic_tokens(text: str) -> int:
    non_ascii = sum(1 for ch in text if ord(ch) > 127)
    return non_ascii + (len(text) - non_ascii) // 4


def count_tokens(text: str) -> int:
    """Token count of ``text`` under ``cl100k_base``, at least 1 per message.

    Falls back to one token per non-ASCII character plus four ASCII
    characters per token when the encoder cannot be loaded.
    """
    encoder = _get_encoder()
    if encoder is not None:
        return max(1, len(encoder.encode(text, disallowed_special=())))
    return max(1, _heuristic_tokens(text))


class ConversationMemory:
    """Ordered chat history bounded by a token budget."""

    def __init__(
        self,
        token_limit: int = DEFAULT_TOKEN_LIMIT,
        short_term_ratio: float = DEFAULT_SHORT_TERM_RATIO,
        token_counter: Callable[[str], int] = count_tokens,
    ) -> None:
        if token_limit < 1:
            raise ValueError("token_limit must be positive")
        if not 0.0 < short_term_ratio <= 1.0:
            raise ValueError("short_term_ratio must be in (0, 1]")

        self.token_limit = token_limit
        self.short_term_ratio = short_term_ratio
        self.token_counter = token_counter
        self._messages: list[ChatMessage] = []

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, message: ChatMessage) -> None:
        """Add a message and drop anything that can no longer fit the budget."""
        self._messages.append(message)
        # Newer messages only consume budget, so excluded ones never come back
        self._messages = self.snapshot()

    def add(self, role: Role, content: str) -> None:
        self.append(ChatMessage(role=role, content=content))

    def snapshot(self) -> list[ChatMessage]:
        """Return the messages that fit the token budget, oldest first."""
        short_term_budget = int(self.token_limit * self.short_term_ratio)

        used = 0
        split = len(self._messages)
        while split > 0:
            cost = self.token_counter(self._messages[split - 1].content)
            if used + cost > short_term_budget:
                break
            used += cost
            split -= 1

        remaining = self.token_limit - used
        older: list[ChatMessage] = []
        for message in reversed(self._messages[:split]):
            cost = self.token_counter(message.content)
            if cost > remaining:
                break
            older.append(message)
            remaining -= cost

        older.reverse()
        return older + self._messages[split:]

    def reset(self) -> None:
        logger.debug("Clearing %d messages from conversation memory", len(self._messages))
        self._messages = []

    def format_history(self, messages: list[ChatMessage] | None = None) -> str:
        """Render messages as ``User: ...`` / ``Assistant: ...`` lines."""
        if messages is None:
            messages = self.snapshot()
        return "\n".join(f"{_ROLE_LABELS[m.role]}: {m.content}" for m in messages)
