"""Optional Langfuse tracing for embedding and completion calls.

Tracing is active only when both ``LANGFUSE_PUBLIC_KEY`` and
``LANGFUSE_SECRET_KEY`` are configured. Otherwise every observation is a
no-op, so callers never need to check.

Usage:
    observation = get_tracer().start_generation("gemini.streamGenerateContent", model=...)
    try:
        ...
        observation.success(output={"chars": n})
    except Exception as e:
        observation.failure(str(e))
        raise
"""

import logging
import time
from functools import lru_cache
from typing import Any

from langfuse import Langfuse

from ...config import settings

logger = logging.getLogger(__name__)


class Observation:
    """One traced operation. Ended exactly once, later calls are ignored."""

    def __init__(self, handle: Any | None = None) -> None:
        self._handle = handle
        self._started = time.perf_counter()
        self.ended = False

    @property
    def duration_ms(self) -> int:
        return int((time.perf_counter() - self._started) * 1000)

    def success(self, output: Any | None = None, **metadata: Any) -> None:
        self._finish(output=output, metadata=metadata)

    def failure(self, message: str, output: Any | None = None, **metadata: Any) -> None:
        self._finish(output=output, metadata=metadata, level="ERROR", status_message=message)

    def warning(self, message: str, **metadata: Any) -> None:
        self._finish(output=None, metadata=metadata, level="WARNING", status_message=message)

    def _finish(
        self,
        output: Any | None,
        metadata: dict[str, Any],
        level: str | None = None,
        status_message: str | None = None,
    ) -> None:
        if self.ended:
            return
        self.ended = True

        if self._handle is None:
            return

        update: dict[str, Any] = {"metadata": {**metadata, "durationMs": self.duration_ms}}
        if output is not None:
            update["output"] = output
        if level:
            update["level"] = level
        if status_message:
            update["status_message"] = status_message

        try:
            self._handle.update(**update)
            self._handle.end()
        except Exception as e:
            # Tracing must never fail the traced request
            logger.debug("Failed to record Langfuse observation: %s", e)


class Tracer:
    """Thin wrapper around the Langfuse client."""

    def __init__(self, client: Langfuse | None = None) -> None:
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def start_generation(
        self,
        name: str,
        model: str,
        input: Any | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Observation:
        if self._client is None:
            return Observation()
        try:
            handle = self._client.start_generation(
                name=name, model=model, input=input, metadata=metadata
            )
        except Exception as e:
            logger.debug("Failed to start Langfuse generation %s: %s", name, e)
            return Observation()
        return Observation(handle)

    def start_span(
        self,
        name: str,
        input: Any | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Observation:
        if self._client is None:
            return Observation()
        try:
            handle = self._client.start_span(name=name, input=input, metadata=metadata)
        except Exception as e:
            logger.debug("Failed to start Langfuse span %s: %s", name, e)
            return Observation()
        return Observation(handle)

    def flush(self) -> None:
        if self._client is not None:
            self._client.flush()


@lru_cache
def get_tracer() -> Tracer:
    """Get the process-wide tracer (singleton)."""
    if not settings.langfuse_enabled:
        logger.debug("Langfuse tracing disabled")
        return Tracer()

    client = Langfuse(
        public_key=settings.langfuse_public_key,
        secret_key=settings.langfuse_secret_key,
        host=settings.langfuse_base_url,
    )
    logger.info("Langfuse tracing enabled")
    return Tracer(client)
