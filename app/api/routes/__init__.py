"""API routes package initialization."""
from app.api.routes import auth, health, options

__all__ = ["auth", "health", "options"]
