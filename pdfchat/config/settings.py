"""Configuration management for pdfchat."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Secrets copied out of dashboards or injected by container runtimes may
    carry a BOM that breaks the query string of every Gemini request.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google Gemini API
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_embedding_model: str = "text-embedding-004"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    request_timeout_seconds: float = 60.0

    # Langfuse tracing (disabled unless both keys are set)
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str | None = None

    @field_validator("gemini_api_key", "langfuse_public_key", "langfuse_secret_key", mode="after")
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # Data directory holding document.txt, pages.json and vector_store.json
    data_dir: Path = Path("./data")

    # Conversation memory
    memory_token_limit: int = 4000
    memory_short_term_ratio: float = 0.7

    # Retrieval
    retrieval_top_k: int = 2
    retrieval_min_score: float = 0.0
    source_preview_chars: int = 200

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    debug: bool = False

    @property
    def langfuse_enabled(self) -> bool:
        """Tracing is only active when both Langfuse keys are configured."""
        return bool(self.langfuse_public_key and self.langfuse_secret_key)


# Global settings instance
settings = Settings()
