# 📄 File: app/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# This file organizes version 1 of our API so we can add new versions later without
# breaking existing apps.
# 🧪 Purpose (Technical Summary):
# Package initialization for API version 1: route prefixes and OpenAPI tags shared by the
# v1 router.
# 🔗 Dependencies:
# None
# 🔄 Connected Modules / Calls From:
# app.api.v1.router

"""
Plant Care Application API Version 1

Structure:
    v1/
    ├── __init__.py          # This file
    ├── router.py            # Main v1 router aggregation
    └── health.py            # Health check endpoints

Module endpoints live in app/modules/<module>/presentation/api/v1.
"""

__version__ = "1.0.0"
__api_version__ = "v1"

ROUTE_PREFIXES = {
    "community_posts": "/community/posts",
    "storage": "/storage",
}

API_TAGS = {
    "community_posts": "Community Posts",
    "storage": "Storage Maintenance",
}
