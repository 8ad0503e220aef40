from .posts import posts_router
from .storage import storage_router

__all__ = ["posts_router", "storage_router"]
