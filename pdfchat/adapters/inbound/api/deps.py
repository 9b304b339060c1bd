"""FastAPI dependency injection for pdfchat.

Each dependency returns the composition-root singleton. Tests replace them
with ``app.dependency_overrides``.
"""

from ....composition import container
from ....core.ports.document_store_port import DocumentStorePort
from ....core.services.ingestion_service import IngestionService
from ....core.services.rag_service import RAGService
from ....core.services.session import SessionState


def get_session_state() -> SessionState:
    return container.get_session_state()


def get_document_store() -> DocumentStorePort:
    return container.get_document_store()


def get_ingestion_service() -> IngestionService:
    return container.get_ingestion_service()


def get_rag_service() -> RAGService:
    return container.get_rag_service()
