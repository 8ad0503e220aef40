from .cleanup_schemas import (
    BatchDeleteRequest,
    BatchDeletionResponse,
    CleanupResultResponse,
    OperationDetail,
    RetryStatsResponse,
)

__all__ = [
    "BatchDeleteRequest",
    "BatchDeletionResponse",
    "CleanupResultResponse",
    "OperationDetail",
    "RetryStatsResponse",
]
