# 📄 File: app/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# Marks the api folder as a Python package, like a table of contents for the web-facing parts
# of the service.
# 🧪 Purpose (Technical Summary):
# Package initialization for the API layer: versioned routers and HTTP middleware.
# 🔗 Dependencies:
# None (package initialization)
# 🔄 Connected Modules / Calls From:
# app.main.py

"""
Plant Care Application API Package

Structure:
    api/
    ├── __init__.py          # This file
    ├── middleware/          # Request logging, slowapi rate limiting
    └── v1/                  # API version 1
        ├── router.py        # Main v1 router
        └── health.py        # Health check endpoints
"""

__version__ = "1.0.0"

API_PREFIX = "/api"
CURRENT_VERSION = "v1"
