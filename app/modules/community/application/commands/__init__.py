from .delete_post import BatchDeletePostsCommand, DeletePostCommand
from .sweep_orphans import SweepOrphanedAssetsCommand

__all__ = [
    "BatchDeletePostsCommand",
    "DeletePostCommand",
    "SweepOrphanedAssetsCommand",
]
