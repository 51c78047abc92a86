"""
Routes module - contains all API route handlers
"""

from .generation import router as generation_router
from .cache import router as cache_router

__all__ = [
    "generation_router",
    "cache_router",
]
