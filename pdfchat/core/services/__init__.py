"""Application services: segmentation, ingestion, retrieval, memory and RAG orchestration."""
