# 📄 File: app/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# This file acts like a traffic director for all API version 1 requests, sending post deletions
# to the post handlers and storage clean-up requests to the storage handlers.
# 🧪 Purpose (Technical Summary):
# Main API v1 router aggregation that combines the health router and the community module
# routers under their prefixes.
# 🔗 Dependencies:
# FastAPI, app.api.v1.health, app.modules.community.presentation.api.v1
# 🔄 Connected Modules / Calls From:
# app.main.py

from fastapi import APIRouter

from app.modules.community.presentation.api.v1 import posts_router, storage_router
from app.shared.utils.logging import get_logger

from . import API_TAGS, ROUTE_PREFIXES
from .health import health_router

logger = get_logger(__name__)

# Create main API v1 router
api_v1_router = APIRouter()

# Include health check router (no prefix - direct access)
api_v1_router.include_router(
    health_router,
    tags=["Health Check"]
)

# =========================================================================
# MODULE ROUTER INCLUDES - COMMUNITY MODULE
# =========================================================================

api_v1_router.include_router(
    posts_router,
    prefix=ROUTE_PREFIXES["community_posts"],
    tags=[API_TAGS["community_posts"]],
)

api_v1_router.include_router(
    storage_router,
    prefix=ROUTE_PREFIXES["storage"],
    tags=[API_TAGS["storage"]],
)

logger.debug("Community module routers registered")
