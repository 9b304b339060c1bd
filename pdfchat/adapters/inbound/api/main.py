"""FastAPI application for the pdfchat API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .... import __version__
from ....config import settings
from ....config.logging import setup_logging
from ....core.domain.exceptions import PDFChatError
from ...common.exception_handler import (
    format_exception_json,
    get_http_status_code,
    log_exception,
)
from ...common.tracing import get_tracer
from .routers import chat, health, upload

setup_logging(level=settings.log_level, json_format=settings.log_json)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("pdfchat API starting up (data dir: %s)", settings.data_dir)
    logger.info("Debug mode: %s", "ENABLED" if settings.debug else "DISABLED")
    yield
    get_tracer().flush()
    logger.info("pdfchat API shutting down...")


app = FastAPI(
    title="pdfchat API",
    description="Upload a PDF and chat with it. Answers stream back with the pages they came from.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS for the browser front end
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(upload.router)
app.include_router(chat.router)


# =============================================================================
# Global Exception Handlers
# =============================================================================


@app.exception_handler(PDFChatError)
async def pdfchat_error_handler(request: Request, exc: PDFChatError) -> JSONResponse:
    """Handle PDFChatError exceptions that escape a route with a structured body."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=exc.to_dict(include_trace=settings.debug),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions with structured JSON response."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=format_exception_json(exc, include_trace=settings.debug),
    )


__all__ = ["app"]
