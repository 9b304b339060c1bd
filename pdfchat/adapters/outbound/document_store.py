"""Flat-file persistence for the last uploaded document.

Layout under the data directory:
    document.txt       full extracted text (legacy reload path)
    pages.json         [{"page": 1, "text": "..."}, ...]
    vector_store.json  serialized index contents
"""

import json
import logging
from pathlib import Path
from typing import Any

from ...core.domain import Page
from ...core.ports.document_store_port import DocumentStorePort

logger = logging.getLogger(__name__)

DOCUMENT_FILE = "document.txt"
PAGES_FILE = "pages.json"
VECTOR_STORE_FILE = "vector_store.json"


class DocumentStore(DocumentStorePort):
    """Reads and writes the persisted document files."""

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)

    @property
    def document_path(self) -> Path:
        return self.data_dir / DOCUMENT_FILE

    @property
    def pages_path(self) -> Path:
        return self.data_dir / PAGES_FILE

    @property
    def vector_store_path(self) -> Path:
        return self.data_dir / VECTOR_STORE_FILE

    def _ensure_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def save_document_text(self, text: str) -> None:
        self._ensure_dir()
        self.document_path.write_text(text, encoding="utf-8")

    def save_pages(self, pages: list[Page]) -> None:
        self._ensure_dir()
        records = [page.to_dict() for page in pages]
        self.pages_path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")

    def save_vector_store(self, data: dict[str, Any]) -> None:
        self._ensure_dir()
        self.vector_store_path.write_text(json.dumps(data), encoding="utf-8")

    def load_pages(self) -> list[Page] | None:
        """Load persisted pages.

        Returns:
            Pages in file order, or None if the file is missing, unreadable,
            or does not hold a list of ``{page: int, text: str}`` records.
        """
        if not self.pages_path.exists():
            return None

        try:
            raw = json.loads(self.pages_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable %s: %s", self.pages_path, e)
            return None

        if not isinstance(raw, list):
            logger.warning("Ignoring %s: expected a list of pages", self.pages_path)
            return None

        pages = []
        for record in raw:
            if not isinstance(record, dict):
                logger.warning("Ignoring %s: malformed page record", self.pages_path)
                return None
            number = record.get("page")
            text = record.get("text")
            if isinstance(number, bool) or not isinstance(number, int) or not isinstance(text, str):
                logger.warning("Ignoring %s: malformed page record", self.pages_path)
                return None
            pages.append(Page(number=number, text=text))

        return pages

    def load_document_text(self) -> str | None:
        if not self.document_path.exists():
            return None
        return self.document_path.read_text(encoding="utf-8")

    def has_persisted_document(self) -> bool:
        return self.pages_path.exists() or self.document_path.exists()

    def clear(self) -> None:
        """Delete all persisted document files."""
        for path in (self.document_path, self.pages_path, self.vector_store_path):
            path.unlink(missing_ok=True)
