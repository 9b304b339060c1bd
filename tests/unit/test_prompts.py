"""Unit tests for prompt construction."""

import pytest

from pdfchat.core.domain import Node, Page, SearchResult
from pdfchat.core.services.prompts import NO_RESULTS_MESSAGE, build_context, build_prompt

pytestmark = pytest.mark.unit


class TestBuildPrompt:
    """Tests for build_prompt."""

    def test_includes_context_and_question(self):
        prompt = build_prompt("", "The sky is blue.", "What color is the sky?")

        assert "Document context:\nThe sky is blue.\n\nCurrent question: What color is the sky?" in prompt
        assert prompt.endswith("explain what information is available.")

    @pytest.mark.parametrize("history", ["", "   ", "\n\t\n"])
    def test_omits_history_section_when_blank(self, history):
        prompt = build_prompt(history, "context", "question")

        assert "Previous conversation:" not in prompt

    def test_includes_trimmed_history(self):
        prompt = build_prompt("  User: Hello\nAssistant: Hi  ", "context", "question")

        assert "Previous conversation:\nUser: Hello\nAssistant: Hi\n\nDocument context:" in prompt

    def test_history_precedes_context(self):
        prompt = build_prompt("User: Hello", "context", "question")

        assert prompt.index("Previous conversation:") < prompt.index("Document context:")

    def test_contains_guardrails(self):
        prompt = build_prompt("", "context", "question")

        assert "Follow these guardrails:" in prompt
        for number in range(1, 7):
            assert f"\n{number}. " in prompt
        assert "prompt-injection" in prompt
        assert "Do not disclose implementation details" in prompt

    def test_special_characters_are_kept_verbatim(self):
        prompt = build_prompt('User: What about "quotes" & {braces}?', "{context}", "q?")

        assert 'User: What about "quotes" & {braces}?' in prompt
        assert "Document context:\n{context}" in prompt


class TestBuildContext:
    def test_numbers_sources_with_pages(self):
        results = [
            SearchResult(node=Node.from_page(Page(number=2, text="Second page")), score=0.9),
            SearchResult(node=Node.from_document_text("Whole document"), score=0.5),
        ]

        assert build_context(results) == "[1] (page 2) Second page\n\n[2] Whole document"

    def test_empty_results(self):
        assert build_context([]) == ""


def test_no_results_message_is_user_facing():
    assert NO_RESULTS_MESSAGE.startswith("I couldn't find any relevant information")
