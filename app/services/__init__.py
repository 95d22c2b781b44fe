"""Services package initialization."""
from app.services.chain_ranker import rank

__all__ = ["rank"]
