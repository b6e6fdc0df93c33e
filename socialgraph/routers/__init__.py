"""Aggregate router exports."""
from .auth import router as auth_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .relationships import router as relationships_router

__all__ = [
    "auth_router",
    "posts_router",
    "profiles_router",
    "relationships_router",
]
