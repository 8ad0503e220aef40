# 📄 File: app/modules/community/presentation/api/schemas/cleanup_schemas.py
# 🧭 Purpose (Layman Explanation):
# Defines what the app sends and receives when deleting posts or cleaning up photos,
# like a form with fixed fields everyone agrees on.
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for post deletion, orphan sweeps and retry monitoring,
# with from_domain constructors mapping domain results to API payloads.
# 🔗 Dependencies:
# pydantic, community domain models, sync_retry stats
# 🔄 Connected Modules / Calls From:
# presentation.api.v1.posts, presentation.api.v1.storage

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ....domain.models.asset import CleanupResult
from ....domain.services.post_deletion_service import BatchDeletionReport


class CleanupResultResponse(BaseModel):
    """Outcome of an asset cleanup or orphan sweep."""

    deleted_assets: List[str] = Field(default_factory=list, description="Paths removed from storage")
    deleted_count: int = Field(0, description="Number of removed paths")
    errors: List[str] = Field(default_factory=list, description="Per-batch or per-bucket failures")
    total_size: int = Field(0, description="Bytes reclaimed, when reported by storage")

    @classmethod
    def from_domain(cls, result: CleanupResult) -> "CleanupResultResponse":
        return cls(
            deleted_assets=list(result.deleted_assets),
            deleted_count=len(result.deleted_assets),
            errors=list(result.errors),
            total_size=result.total_size,
        )


class BatchDeleteRequest(BaseModel):
    """Request body for deleting several posts."""

    post_ids: List[str] = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Question or plant share ids",
        examples=[["5f0c6a9e-1d2b-4c8e-9a71-2f1e6b0c9d11"]],
    )


class BatchDeletionResponse(BaseModel):
    """Per-post outcome of a batch deletion."""

    deleted: List[str] = Field(default_factory=list)
    failed: Dict[str, str] = Field(default_factory=dict, description="post id -> error message")

    @classmethod
    def from_domain(cls, report: BatchDeletionReport) -> "BatchDeletionResponse":
        return cls(deleted=list(report.deleted), failed=dict(report.failed))


class OperationDetail(BaseModel):
    kind: str
    attempts: int
    duration_seconds: float
    last_error: Optional[str] = None


class RetryStatsResponse(BaseModel):
    """In-flight retryable operations."""

    active_operations: int
    operation_details: Dict[str, OperationDetail] = Field(default_factory=dict)

    @classmethod
    def from_stats(cls, stats: Dict[str, Any]) -> "RetryStatsResponse":
        return cls.model_validate(stats)
