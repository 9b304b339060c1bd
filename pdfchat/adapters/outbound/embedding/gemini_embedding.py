"""Gemini embeddings over the REST API.

Uses ``embedContent`` for single queries and ``batchEmbedContents`` for
documents, in batches the API accepts.
"""

import logging
from typing import Any

import requests

from ....config import settings
from ....core.domain.exceptions import EmbeddingAPIError, MissingAPIKeyError
from ....core.ports.embedding_port import EmbeddingPort
from ...common.tracing import Tracer, get_tracer

logger = logging.getLogger(__name__)

# batchEmbedContents rejects more than 100 requests per call
EMBEDDING_BATCH_SIZE = 100
# Error bodies recorded in traces are truncated to this many characters
TRACE_ERROR_CHARS = 2000


class GeminiEmbedding(EmbeddingPort):
    """Embedding function backed by the Gemini REST API."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model_name = model_name or settings.gemini_embedding_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout_seconds
        self._tracer = tracer

    @property
    def tracer(self) -> Tracer:
        if self._tracer is None:
            self._tracer = get_tracer()
        return self._tracer

    def _url(self, method: str) -> str:
        if not self.api_key:
            raise MissingAPIKeyError()
        return f"{self.base_url}/models/{self.model_name}:{method}?key={self.api_key}"

    def _post(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = requests.post(self._url(method), json=payload, timeout=self.timeout)
        if not response.ok:
            raise EmbeddingAPIError(
                f"HTTP {response.status_code}: {response.text}",
                context={"method": method, "status": response.status_code},
            )
        return response.json()

    def embed_query(self, text: str) -> list[float]:
        """Generate the embedding for a single text."""
        if not text.strip():
            raise ValueError("Text cannot be empty")

        observation = self.tracer.start_span(
            "gemini.embedContent",
            input={"textLength": len(text)},
            metadata={"endpoint": "embedContent", "model": self.model_name},
        )
        try:
            data = self._post("embedContent", {"content": {"parts": [{"text": text}]}})
        except EmbeddingAPIError as e:
            observation.failure(e.message[:TRACE_ERROR_CHARS])
            raise
        except Exception as e:
            observation.failure(str(e))
            raise

        values = data.get("embedding", {}).get("values", [])
        observation.success(output={"dimensions": len(values)})
        return values

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts, preserving order."""
        if not texts:
            return []

        observation = self.tracer.start_span(
            "gemini.batchEmbedContents",
            input={"batchSize": len(texts), "totalChars": sum(len(t) for t in texts)},
            metadata={"endpoint": "batchEmbedContents", "model": self.model_name},
        )

        embeddings: list[list[float]] = []
        try:
            for i in range(0, len(texts), EMBEDDING_BATCH_SIZE):
                batch = texts[i : i + EMBEDDING_BATCH_SIZE]
                payload = {
                    "requests": [
                        {
                            "model": f"models/{self.model_name}",
                            "content": {"parts": [{"text": text}]},
                        }
                        for text in batch
                    ]
                }
                data = self._post("batchEmbedContents", payload)
                embeddings.extend(item.get("values", []) for item in data.get("embeddings", []))
                logger.debug("Embedded batch of %d texts", len(batch))
        except Exception as e:
            observation.failure(str(e)[:TRACE_ERROR_CHARS])
            raise

        if len(embeddings) != len(texts):
            observation.failure("Embedding count mismatch")
            raise EmbeddingAPIError(
                f"Expected {len(texts)} embeddings, got {len(embeddings)}",
                context={"expected": len(texts), "received": len(embeddings)},
            )

        observation.success(
            output={"count": len(embeddings), "dimensions": len(embeddings[0])}
        )
        return embeddings
