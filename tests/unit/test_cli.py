"""Unit tests for the pdfchat CLI."""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from pdfchat.adapters.inbound.cli.commands import app
from pdfchat.core.domain import RetrievalResult
from pdfchat.core.domain.exceptions import PDFParseError, VectorStoreNotFoundError

pytestmark = pytest.mark.unit

runner = CliRunner()


class TestIngestCommand:
    def test_ingest_success(self, tmp_path):
        pdf = tmp_path / "notes.pdf"
        pdf.write_bytes(b"%PDF-1.4")
        service = MagicMock()
        service.ingest.return_value.count.return_value = 4

        with patch("pdfchat.composition.container.get_ingestion_service", return_value=service):
            result = runner.invoke(app, ["ingest", str(pdf)])

        assert result.exit_code == 0
        assert "Indexed 4 pages from notes.pdf" in result.output
        service.ingest.assert_called_once_with(b"%PDF-1.4")

    def test_ingest_failure_shows_error_code(self, tmp_path):
        pdf = tmp_path / "broken.pdf"
        pdf.write_bytes(b"garbage")
        service = MagicMock()
        service.ingest.side_effect = PDFParseError("Failed to parse PDF: bad header")

        with patch("pdfchat.composition.container.get_ingestion_service", return_value=service):
            result = runner.invoke(app, ["ingest", str(pdf)])

        assert result.exit_code == 1
        assert "PDF_ING_004" in result.output
        assert "Failed to parse PDF" in result.output


class TestAskCommand:
    def test_streams_answer_and_sources(self):
        rag = MagicMock()
        rag.query_stream.return_value = (
            iter(["Forty", "-two."]),
            [RetrievalResult(content="The answer is 42.", score=0.91, page=7)],
        )

        with patch("pdfchat.composition.container.get_rag_service", return_value=rag):
            result = runner.invoke(app, ["ask", "What is the answer?"])

        assert result.exit_code == 0
        assert "Forty-two." in result.output
        assert "p.7 (0.91) The answer is 42." in result.output

    def test_missing_document(self):
        rag = MagicMock()
        rag.query_stream.side_effect = VectorStoreNotFoundError()

        with patch("pdfchat.composition.container.get_rag_service", return_value=rag):
            result = runner.invoke(app, ["ask", "Anything?"])

        assert result.exit_code == 1
        assert "PDF_VEC_002" in result.output


def test_status_without_document(document_store):
    with patch("pdfchat.composition.container.get_document_store", return_value=document_store):
        result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    assert "Document" in result.output
    assert "none" in result.output
