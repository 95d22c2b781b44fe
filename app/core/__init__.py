"""Core package initialization."""
from app.core.config import settings

__all__ = ["settings"]
