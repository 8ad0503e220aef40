# 📄 File: app/modules/community/application/commands/delete_post.py
# 🧭 Purpose (Layman Explanation):
# Describes the "delete my post" and "delete these posts" requests, with everything needed
# to carry them out safely on behalf of the right user.
# 🧪 Purpose (Technical Summary):
# CQRS command objects for single and batch community post deletion, validated with pydantic.
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# application.handlers.command_handlers, presentation.api.v1.posts

from typing import List

from pydantic import BaseModel, Field, field_validator


class DeletePostCommand(BaseModel):
    """Delete one community post (question or plant share) and its media."""

    post_id: str = Field(..., min_length=1, description="Question or plant share id")
    user_id: str = Field(..., min_length=1, description="Requesting user id")


class BatchDeletePostsCommand(BaseModel):
    """Delete several posts; each one succeeds or fails on its own."""

    post_ids: List[str] = Field(..., min_length=1, max_length=100, description="Post ids to delete")
    user_id: str = Field(..., min_length=1, description="Requesting user id")

    @field_validator("post_ids")
    @classmethod
    def validate_post_ids(cls, v: List[str]) -> List[str]:
        cleaned = [post_id.strip() for post_id in v if post_id and post_id.strip()]
        if not cleaned:
            raise ValueError("post_ids must contain at least one non-empty id")
        return cleaned
