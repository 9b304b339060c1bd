"""Composition root wiring adapters to the application services."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..adapters.outbound.document_store import DocumentStore
from ..adapters.outbound.embedding.gemini_embedding import GeminiEmbedding
from ..adapters.outbound.llm.gemini_stream import GeminiStreamClient
from ..adapters.outbound.pdf_parser import PypdfParser
from ..adapters.outbound.vector_store.qdrant_adapter import QdrantAdapter
from ..config import settings
from ..core.services.ingestion_service import IngestionService
from ..core.services.memory import ConversationMemory
from ..core.services.rag_service import RAGService
from ..core.services.retrieval_service import RetrievalService
from ..core.services.session import SessionState

logger = logging.getLogger(__name__)


def create_memory() -> ConversationMemory:
    return ConversationMemory(
        token_limit=settings.memory_token_limit,
        short_term_ratio=settings.memory_short_term_ratio,
    )


@lru_cache
def get_session_state() -> SessionState:
    logger.info("Initializing SessionState...")
    return SessionState(memory_factory=create_memory)


@lru_cache
def get_document_store() -> DocumentStore:
    return DocumentStore(settings.data_dir)


@lru_cache
def get_embedding() -> GeminiEmbedding:
    logger.info("Initializing GeminiEmbedding (%s)...", settings.gemini_embedding_model)
    return GeminiEmbedding(
        api_key=settings.gemini_api_key,
        model_name=settings.gemini_embedding_model,
        base_url=settings.gemini_base_url,
        timeout=settings.request_timeout_seconds,
    )


@lru_cache
def get_llm() -> GeminiStreamClient:
    logger.info("Initializing GeminiStreamClient (%s)...", settings.gemini_model)
    return GeminiStreamClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.request_timeout_seconds,
    )


def create_index() -> QdrantAdapter:
    """Create a fresh in-memory index sharing the process embedding client."""
    return QdrantAdapter(embedding=get_embedding())


@lru_cache
def get_ingestion_service() -> IngestionService:
    logger.info("Initializing IngestionService...")
    return IngestionService(
        parser=PypdfParser(),
        index_factory=create_index,
        document_store=get_document_store(),
        session=get_session_state(),
    )


@lru_cache
def get_retrieval_service() -> RetrievalService:
    logger.info("Initializing RetrievalService...")
    return RetrievalService(
        session=get_session_state(),
        document_store=get_document_store(),
        index_factory=create_index,
        top_k=settings.retrieval_top_k,
        min_score=settings.retrieval_min_score,
        preview_chars=settings.source_preview_chars,
    )


@lru_cache
def get_rag_service() -> RAGService:
    logger.info("Initializing RAGService...")
    return RAGService(
        llm_client=get_llm(),
        retriever=get_retrieval_service(),
        session=get_session_state(),
    )
