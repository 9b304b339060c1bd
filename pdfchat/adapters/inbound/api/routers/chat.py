"""Chat endpoint for asking questions about the uploaded document."""

import json
import logging
from collections.abc import Iterator

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, StreamingResponse

from .....core.domain import RetrievalResult
from .....core.domain.exceptions import InvalidMessageError
from .....core.services.rag_service import RAGService
from ....common.exception_handler import (
    chat_error_response,
    get_http_status_code,
    log_exception,
)
from ..deps import get_rag_service
from ..models import (
    ChatRequest,
    ChatResponse,
    ErrorEvent,
    ErrorResponse,
    MessageChunkEvent,
    MessageEndEvent,
    MessageStartEvent,
    SourceInfo,
    SourcesEvent,
    encode_event,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

STREAM_MEDIA_TYPE = "text/stream"
STREAM_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}
STREAM_FAILED_MESSAGE = "Stream processing failed"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _validate_message(body: object) -> str:
    message = body.get("message") if isinstance(body, dict) else None
    if not message or not isinstance(message, str):
        raise InvalidMessageError("Message is required and must be a string")
    if not message.strip():
        raise InvalidMessageError("Message cannot be empty")
    return message


def _event_stream(chunks: Iterator[str], sources: list[RetrievalResult]) -> Iterator[str]:
    """Sources first, then the message framed by start/end markers."""
    try:
        yield encode_event(SourcesEvent(sources=[SourceInfo.from_result(s) for s in sources]))
        yield encode_event(MessageStartEvent())
        try:
            for chunk in chunks:
                yield encode_event(MessageChunkEvent(content=chunk))
        except Exception as e:
            logger.error("Stream processing error: %s", e)
            yield encode_event(ErrorEvent(error=STREAM_FAILED_MESSAGE))
            return
        yield encode_event(MessageEndEvent())
    finally:
        close = getattr(chunks, "close", None)
        if close is not None:
            close()


@router.post(
    "/chat",
    response_model=ChatResponse,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ChatRequest.model_json_schema()}},
        }
    },
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request body"},
        404: {"model": ErrorResponse, "description": "No document uploaded"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
async def chat(request: Request, rag: RAGService = Depends(get_rag_service)):
    """Ask a question about the uploaded document.

    Streams NDJSON events when the ``Accept`` header contains ``text/stream``,
    otherwise returns the whole answer with its sources.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "Invalid JSON body")

    try:
        message = _validate_message(body)
    except InvalidMessageError as e:
        return _error(get_http_status_code(e), e.message)

    wants_stream = STREAM_MEDIA_TYPE in request.headers.get("accept", "")

    try:
        if wants_stream:
            chunks, sources = await run_in_threadpool(rag.query_stream, message)
        else:
            answer = await run_in_threadpool(rag.query, message)
    except Exception as e:
        log_exception(e, extra_context={"path": str(request.url.path), "stream": wants_stream})
        status_code, error_message = chat_error_response(e)
        return _error(status_code, error_message)

    if wants_stream:
        return StreamingResponse(
            _event_stream(chunks, sources),
            media_type=STREAM_MEDIA_TYPE,
            headers=STREAM_HEADERS,
        )

    return ChatResponse(
        message=answer.message,
        sources=[SourceInfo.from_result(s) for s in answer.sources],
    )
