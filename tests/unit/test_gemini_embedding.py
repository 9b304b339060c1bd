"""Unit tests for Gemini REST embeddings."""

from unittest.mock import MagicMock, patch

import pytest

from pdfchat.adapters.common.tracing import Tracer
from pdfchat.adapters.outbound.embedding.gemini_embedding import (
    EMBEDDING_BATCH_SIZE,
    GeminiEmbedding,
)
from pdfchat.core.domain.exceptions import EmbeddingAPIError, MissingAPIKeyError

pytestmark = pytest.mark.unit

POST_PATH = "pdfchat.adapters.outbound.embedding.gemini_embedding.requests.post"


def _ok(payload):
    response = MagicMock()
    response.ok = True
    response.json.return_value = payload
    return response


def _batch_response(*args, **kwargs):
    count = len(kwargs["json"]["requests"])
    return _ok({"embeddings": [{"values": [float(i), 1.0]} for i in range(count)]})


@pytest.fixture
def embedding():
    return GeminiEmbedding(
        api_key="test-key",
        model_name="text-embedding-test",
        base_url="https://example.test/v1beta",
        tracer=Tracer(),
    )


class TestEmbedQuery:
    def test_returns_values(self, embedding):
        with patch(POST_PATH, return_value=_ok({"embedding": {"values": [0.1, 0.2]}})) as mock_post:
            result = embedding.embed_query("What is this about?")

        assert result == [0.1, 0.2]
        assert mock_post.call_args.args[0] == (
            "https://example.test/v1beta/models/text-embedding-test:embedContent?key=test-key"
        )
        assert mock_post.call_args.kwargs["json"] == {
            "content": {"parts": [{"text": "What is this about?"}]}
        }

    @pytest.mark.parametrize("text", ["", "   "])
    def test_empty_text_raises(self, embedding, text):
        with pytest.raises(ValueError, match="Text cannot be empty"):
            embedding.embed_query(text)

    def test_http_error_raises(self, embedding):
        response = MagicMock()
        response.ok = False
        response.status_code = 403
        response.text = "API key not valid"

        with patch(POST_PATH, return_value=response):
            with pytest.raises(EmbeddingAPIError, match="HTTP 403: API key not valid"):
                embedding.embed_query("question")

    def test_missing_api_key_raises(self):
        embedding = GeminiEmbedding(api_key="", tracer=Tracer())

        with patch(POST_PATH) as mock_post:
            with pytest.raises(MissingAPIKeyError):
                embedding.embed_query("question")

        mock_post.assert_not_called()


class TestEmbedDocuments:
    """Tests for GeminiEmbedding.embed_documents."""

    def test_empty_input(self, embedding):
        with patch(POST_PATH) as mock_post:
            assert embedding.embed_documents([]) == []

        mock_post.assert_not_called()

    def test_single_batch(self, embedding):
        with patch(POST_PATH, side_effect=_batch_response) as mock_post:
            result = embedding.embed_documents(["first", "second"])

        assert result == [[0.0, 1.0], [1.0, 1.0]]
        assert mock_post.call_args.args[0].endswith(":batchEmbedContents?key=test-key")
        requests_payload = mock_post.call_args.kwargs["json"]["requests"]
        assert requests_payload[0] == {
            "model": "models/text-embedding-test",
            "content": {"parts": [{"text": "first"}]},
        }

    def test_batches_large_input(self, embedding):
        texts = [f"text {i}" for i in range(EMBEDDING_BATCH_SIZE + 5)]

        with patch(POST_PATH, side_effect=_batch_response) as mock_post:
            result = embedding.embed_documents(texts)

        assert mock_post.call_count == 2
        assert len(result) == len(texts)
        assert result[EMBEDDING_BATCH_SIZE] == [0.0, 1.0]

    def test_count_mismatch_raises(self, embedding):
        with patch(POST_PATH, return_value=_ok({"embeddings": [{"values": [1.0]}]})):
            with pytest.raises(EmbeddingAPIError, match="Expected 2 embeddings, got 1"):
                embedding.embed_documents(["a", "b"])
