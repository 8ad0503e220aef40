from .command_handlers import (
    BatchDeletePostsCommandHandler,
    DeletePostCommandHandler,
    SweepOrphanedAssetsCommandHandler,
)

__all__ = [
    "BatchDeletePostsCommandHandler",
    "DeletePostCommandHandler",
    "SweepOrphanedAssetsCommandHandler",
]
