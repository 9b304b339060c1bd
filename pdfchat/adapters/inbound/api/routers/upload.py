"""Upload endpoint: ingest a PDF and make it the active document."""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .....core.services.ingestion_service import IngestionService
from ....common.exception_handler import log_exception
from ..deps import get_ingestion_service
from ..models import ErrorResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])

PDF_CONTENT_TYPE = "application/pdf"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or non-PDF file"},
        500: {"model": ErrorResponse, "description": "PDF could not be processed"},
    },
)
async def upload_pdf(
    file: UploadFile | None = File(None),
    ingestion: IngestionService = Depends(get_ingestion_service),
):
    """Upload a PDF, extract its pages and build the vector index.

    Args:
        file: Multipart ``file`` field holding the PDF.

    Returns:
        UploadResponse on success, ErrorResponse otherwise.
    """
    if file is None:
        return _error(400, "No file provided")

    if file.content_type != PDF_CONTENT_TYPE:
        logger.info("Rejected upload %s with type %s", file.filename, file.content_type)
        return _error(400, "Invalid file type. Please upload a PDF.")

    try:
        data = await file.read()
        # Parsing and embedding block, keep them off the event loop
        await run_in_threadpool(ingestion.ingest, data)
    except Exception as e:
        log_exception(e, extra_context={"operation": "upload", "filename": file.filename})
        return _error(500, f"Failed to process PDF: {e}")
    finally:
        await file.close()

    logger.info("Processed upload %s", file.filename)
    return UploadResponse()
