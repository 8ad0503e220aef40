# 📄 File: app/modules/community/presentation/api/v1/posts.py
# 🧭 Purpose (Layman Explanation):
# The web addresses the app calls when a user deletes one of their community posts,
# or several at once. The post's photos are cleaned up along the way.
# 🧪 Purpose (Technical Summary):
# FastAPI endpoints for single and batch community post deletion. Authenticated via bearer JWT,
# rate limited with slowapi, delegating to the application command handlers.
# 🔗 Dependencies:
# - FastAPI router, status codes
# - app.modules.community.application (commands, handlers)
# - app.modules.community.presentation.api.schemas
# - app.shared.core.dependencies (current user)
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted under /community/posts)

"""
Community Posts API Endpoints

Endpoints:
- DELETE /{post_id}: Delete one post and its media (204)
- POST /batch-delete: Delete several posts; each succeeds or fails independently
"""

from fastapi import APIRouter, Depends, Request, Response, status

from app.api.middleware.rate_limiting import limiter, post_delete_limit
from app.shared.core.dependencies import CurrentUser, get_current_user
from app.shared.utils.logging import get_logger

from ....application.commands.delete_post import BatchDeletePostsCommand, DeletePostCommand
from ....application.handlers.command_handlers import (
    BatchDeletePostsCommandHandler,
    DeletePostCommandHandler,
)
from ...dependencies import get_batch_delete_posts_handler, get_delete_post_handler
from ..schemas.cleanup_schemas import BatchDeleteRequest, BatchDeletionResponse

logger = get_logger(__name__)

posts_router = APIRouter()


@posts_router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a community post",
    description="Delete a question or plant share owned by the current user, along with its images",
    responses={
        204: {"description": "Post deleted"},
        401: {"description": "Authentication required"},
        403: {"description": "Post belongs to another user"},
        404: {"description": "Post not found"},
    }
)
@limiter.limit(post_delete_limit)
async def delete_post(
    request: Request,
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    handler: DeletePostCommandHandler = Depends(get_delete_post_handler),
) -> Response:
    """
    Delete one community post.

    Asset cleanup failures do not fail the request; leftovers are removed by
    a later orphan sweep.
    """
    command = DeletePostCommand(post_id=post_id, user_id=current_user.user_id)
    await handler.handle(command)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@posts_router.post(
    "/batch-delete",
    response_model=BatchDeletionResponse,
    summary="Delete several community posts",
    responses={
        200: {"description": "Per-post deletion outcome"},
        401: {"description": "Authentication required"},
    }
)
@limiter.limit(post_delete_limit)
async def batch_delete_posts(
    request: Request,
    body: BatchDeleteRequest,
    current_user: CurrentUser = Depends(get_current_user),
    handler: BatchDeletePostsCommandHandler = Depends(get_batch_delete_posts_handler),
) -> BatchDeletionResponse:
    command = BatchDeletePostsCommand(post_ids=body.post_ids, user_id=current_user.user_id)
    report = await handler.handle(command)
    return BatchDeletionResponse.from_domain(report)
