"""Health check endpoints."""

from fastapi import APIRouter, Depends

from ..... import __version__
from .....core.ports.document_store_port import DocumentStorePort
from .....core.services.session import SessionState
from ..deps import get_document_store, get_session_state
from ..models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic liveness check."""
    return HealthResponse(status="healthy", version=__version__, document="not_checked")


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(
    session: SessionState = Depends(get_session_state),
    document_store: DocumentStorePort = Depends(get_document_store),
) -> HealthResponse:
    """Readiness check.

    Reports whether a document index is loaded in memory, can be rebuilt from
    persisted files, or is missing.
    """
    index = session.get_index()
    if index is not None:
        document = f"loaded ({index.count()} nodes)"
    elif document_store.has_persisted_document():
        document = "persisted"
    else:
        document = "none"

    return HealthResponse(status="ready", version=__version__, document=document)
