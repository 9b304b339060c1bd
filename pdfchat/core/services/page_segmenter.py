"""Heuristic page segmentation for extracted PDF text.

PDF text extraction hands back one blob plus the number of pages the file
declares. The segmenter tries to recover page boundaries from that blob so
answers can point the viewer at the right page. Strategies run in order and
the first one that produces more than one page wins:

1. Marker split: form feeds, bare page-number lines, "Page N", "N / M", "- N -".
2. Repeated-line split: recurring headers/footers.
3. Paragraph-length split: greedy fill to a fraction of the average page size.
4. Equal-length slices (always succeeds).

Whatever the strategy returns is then forced to the declared page count by
``adjust_to_page_count``. None of this guarantees true page boundaries.
"""

import logging
import re
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmenterConfig:
    """Tunable thresholds for the segmentation heuristics.

    Attributes:
        marker_bound_factor: A marker kind is accepted only if it matches at
            most ``marker_bound_factor * declared_page_count`` times.
        candidate_min_length: Shortest line considered a header/footer.
        candidate_max_length: Longest line considered a header/footer.
        max_candidates: How many of the longest repeated lines to try.
        page_fill_ratio: Fraction of the average page length at which the
            paragraph strategy closes a page.
    """

    marker_bound_factor: int = 2
    candidate_min_length: int = 5
    candidate_max_length: int = 100
    max_candidates: int = 3
    page_fill_ratio: float = 0.7


DEFAULT_CONFIG = SegmenterConfig()

# Tried in this order; the first kind whose match count is within bounds is used.
MARKER_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("form_feed", re.compile(r"\f")),
    ("numeric_line", re.compile(r"^[ \t]*\d{1,4}[ \t]*$", re.MULTILINE)),
    ("page_label", re.compile(r"\bPage\s+\d+\b", re.IGNORECASE)),
    ("page_fraction", re.compile(r"\b\d+[ \t]*/[ \t]*\d+\b")),
    ("dashed_number", re.compile(r"^[ \t]*-[ \t]*\d+[ \t]*-[ \t]*$", re.MULTILINE)),
)

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

Strategy = Callable[[str, int, SegmenterConfig], list[str] | None]


def _clean_segments(segments: list[str]) -> list[str]:
    cleaned = (segment.replace("\f", "").strip() for segment in segments)
    return [segment for segment in cleaned if segment]


def split_by_markers(text: str, declared_count: int, config: SegmenterConfig) -> list[str] | None:
    """Split on the first generic page marker kind found a plausible number of times."""
    upper_bound = config.marker_bound_factor * declared_count

    for name, pattern in MARKER_PATTERNS:
        matches = len(pattern.findall(text))
        if not 1 <= matches <= upper_bound:
            continue

        pages = _clean_segments(pattern.split(text))
        if len(pages) > 1:
            logger.debug("Marker '%s' matched %d times", name, matches)
            return pages

    return None


def split_by_repeated_lines(
    text: str, declared_count: int, config: SegmenterConfig
) -> list[str] | None:
    """Split on lines that repeat like running headers or footers."""
    lines = text.split("\n")

    counts: Counter[str] = Counter()
    for line in lines:
        stripped = line.strip()
        if config.candidate_min_length <= len(stripped) <= config.candidate_max_length:
            counts[stripped] += 1

    candidates = [line for line, count in counts.items() if 2 <= count <= declared_count]
    candidates.sort(key=len, reverse=True)

    for candidate in candidates[: config.max_candidates]:
        segments: list[str] = []
        current: list[str] = []
        for line in lines:
            if line.strip() == candidate:
                segments.append("\n".join(current))
                current = []
            else:
                current.append(line)
        segments.append("\n".join(current))

        pages = _clean_segments(segments)
        if len(pages) > 1:
            logger.debug("Repeated line %r split text into %d pages", candidate, len(pages))
            return pages

    return None


def split_by_paragraph_length(
    text: str, declared_count: int, config: SegmenterConfig
) -> list[str] | None:
    """Greedily pack blank-line paragraphs into pages of roughly average length."""
    paragraphs = _clean_segments(_PARAGRAPH_BREAK.split(text))
    if len(paragraphs) < 2:
        return None

    target_length = len(text) / declared_count * config.page_fill_ratio

    pages: list[str] = []
    current: list[str] = []
    current_length = 0
    for paragraph in paragraphs:
        current.append(paragraph)
        current_length += len(paragraph)
        # At most declared_count - 1 boundaries
        if current_length >= target_length and len(pages) < declared_count - 1:
            pages.append("\n\n".join(current))
            current = []
            current_length = 0

    if current:
        pages.append("\n\n".join(current))

    return pages if len(pages) > 1 else None


def split_equally(text: str, declared_count: int, config: SegmenterConfig) -> list[str]:
    """Cut the text into ``declared_count`` equal character slices."""
    length = len(text)
    bounds = [index * length // declared_count for index in range(declared_count + 1)]
    return [text[bounds[i] : bounds[i + 1]].strip() for i in range(declared_count)]


def adjust_to_page_count(pages: list[str], declared_count: int) -> list[str]:
    """Force a page list to exactly ``declared_count`` entries.

    Too few pages: bisect the longest page at its character midpoint.
    Too many pages: merge the shortest page into the following page, or into
    the preceding one when it is last, joined by a single space.

    Args:
        pages: Candidate pages in document order.
        declared_count: Page count the PDF declares.

    Returns:
        A new list of length ``declared_count`` in the same text order.
    """
    declared_count = max(1, declared_count)
    adjusted = list(pages) or [""]

    while len(adjusted) < declared_count:
        index = max(range(len(adjusted)), key=lambda i: len(adjusted[i]))
        longest = adjusted[index]
        middle = len(longest) // 2
        adjusted[index : index + 1] = [longest[:middle].strip(), longest[middle:].strip()]

    while len(adjusted) > declared_count:
        index = min(range(len(adjusted)), key=lambda i: len(adjusted[i]))
        if index < len(adjusted) - 1:
            adjusted[index : index + 2] = [f"{adjusted[index]} {adjusted[index + 1]}"]
        else:
            adjusted[index - 1 : index + 1] = [f"{adjusted[index - 1]} {adjusted[index]}"]

    return adjusted


class PageSegmenter:
    """Splits a full-text blob into exactly the declared number of pages."""

    strategies: tuple[Strategy, ...] = (
        split_by_markers,
        split_by_repeated_lines,
        split_by_paragraph_length,
        split_equally,
    )

    def __init__(self, config: SegmenterConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def segment(self, full_text: str, declared_page_count: int) -> list[str]:
        """Split text into ``declared_page_count`` pages.

        Args:
            full_text: Non-empty extracted document text.
            declared_page_count: Page count reported by the PDF parser.

        Returns:
            List of page texts, exactly ``declared_page_count`` long.
        """
        declared = max(1, declared_page_count)
        if declared == 1:
            return [full_text.strip()]

        for strategy in self.strategies:
            pages = strategy(full_text, declared, self.config)
            if pages:
                logger.info(
                    "Segmented %d chars into %d pages with %s (declared %d)",
                    len(full_text),
                    len(pages),
                    strategy.__name__,
                    declared,
                )
                return adjust_to_page_count(pages, declared)

        return adjust_to_page_count([full_text.strip()], declared)
