"""Question answering over the uploaded document with conversation memory."""

import logging
from collections.abc import Iterator

from ..domain import ChatAnswer, RetrievalResult
from ..ports.llm_port import LLMPort
from .memory import ConversationMemory
from .prompts import NO_RESULTS_MESSAGE, build_context, build_prompt
from .retrieval_service import RetrievalService
from .session import SessionState

logger = logging.getLogger(__name__)


class RAGService:
    """Retrieves context, builds the prompt and streams the answer."""

    def __init__(
        self,
        llm_client: LLMPort,
        retriever: RetrievalService,
        session: SessionState,
    ) -> None:
        """Initialize the service.

        Args:
            llm_client: Streaming completion client.
            retriever: Retriever for the active document.
            session: Session state holding the conversation memory.
        """
        self.llm = llm_client
        self.retriever = retriever
        self.session = session

    def query_stream(self, message: str) -> tuple[Iterator[str], list[RetrievalResult]]:
        """Answer ``message`` as a stream of text chunks.

        The history used in the prompt is captured before the user turn is
        recorded, and the user turn is recorded only once retrieval succeeds.
        The assistant turn is recorded once the stream completes.

        Returns:
            Tuple of (chunk iterator, sources). Sources are known up front so
            they can be sent before the first chunk.
        """
        memory = self.session.get_memory()
        history_text = memory.format_history(memory.snapshot())

        results = self.retriever.search(message)
        sources = [self.retriever.to_retrieval_result(r) for r in results]
        memory.add("user", message)

        if not results:
            logger.info("No relevant context found, skipping completion")
            return self._accumulate(iter([NO_RESULTS_MESSAGE]), memory), sources

        prompt = build_prompt(history_text, build_context(results), message)
        chunks = self.llm.stream_completion(prompt)
        return self._accumulate(chunks, memory), sources

    def query(self, message: str) -> ChatAnswer:
        """Answer ``message`` in one piece."""
        chunks, sources = self.query_stream(message)
        return ChatAnswer(message="".join(chunks), sources=sources)

    @staticmethod
    def _accumulate(chunks: Iterator[str], memory: ConversationMemory) -> Iterator[str]:
        parts: list[str] = []
        try:
            for chunk in chunks:
                parts.append(chunk)
                yield chunk
        finally:
            close = getattr(chunks, "close", None)
            if close is not None:
                close()

        memory.add("assistant", "".join(parts))
