"""Configuration and logging setup for pdfchat."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
