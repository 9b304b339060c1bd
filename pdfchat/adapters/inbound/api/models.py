"""Pydantic models for API requests, responses and stream events."""

from typing import Literal

from pydantic import BaseModel, Field

from ....core.domain import RetrievalResult


class SourceInfo(BaseModel):
    """A retrieved source shown alongside an answer."""

    content: str = Field(..., description="Preview of the source text")
    score: float = Field(..., ge=0, le=1, description="Relevance score from retrieval")
    page: int | None = Field(None, ge=1, description="Page the source was found on")

    @classmethod
    def from_result(cls, result: RetrievalResult) -> "SourceInfo":
        return cls(content=result.content, score=result.score, page=result.page)


class ChatRequest(BaseModel):
    """Request model for a chat message."""

    message: str = Field(
        ...,
        description="The question to ask about the uploaded document",
        json_schema_extra={"example": "What is the main conclusion of the paper?"},
    )


class ChatResponse(BaseModel):
    """Non-streaming chat response."""

    message: str = Field(..., description="The generated answer")
    sources: list[SourceInfo] = Field(default_factory=list)


class UploadResponse(BaseModel):
    """Response model for a successful upload."""

    success: bool = True
    message: str = "PDF uploaded and processed successfully"


class ErrorResponse(BaseModel):
    """Error body returned by the upload and chat endpoints."""

    error: str = Field(..., description="Client-facing error message")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    document: str = Field(..., description="Index status: loaded, persisted or none")


# Stream events, serialized one JSON object per line


class SourcesEvent(BaseModel):
    type: Literal["sources"] = "sources"
    sources: list[SourceInfo]


class MessageStartEvent(BaseModel):
    type: Literal["message_start"] = "message_start"


class MessageChunkEvent(BaseModel):
    type: Literal["message_chunk"] = "message_chunk"
    content: str


class MessageEndEvent(BaseModel):
    type: Literal["message_end"] = "message_end"


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    error: str


StreamEvent = SourcesEvent | MessageStartEvent | MessageChunkEvent | MessageEndEvent | ErrorEvent


def encode_event(event: StreamEvent) -> str:
    """Serialize an event as one NDJSON line."""
    return event.model_dump_json(exclude_none=True) + "\n"
