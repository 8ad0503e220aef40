"""
Sweep Orphaned Assets Command

CQRS command for removing a user's unreferenced uploads. Issued from the
storage maintenance endpoint and from the scheduled Celery sweep.
"""

from pydantic import BaseModel, Field


class SweepOrphanedAssetsCommand(BaseModel):
    """Sweep every known bucket under the user's prefix."""

    user_id: str = Field(..., min_length=1, description="Owner whose namespace is swept")
    triggered_by: str = Field(default="api", description="api or scheduler")
