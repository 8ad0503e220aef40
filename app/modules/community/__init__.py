# 📄 File: app/modules/community/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes the community features that keep uploaded photos tidy: deleting a post's photos with
# the post, and sweeping away old photos nobody uses anymore.
# 🧪 Purpose (Technical Summary):
# Package initialization for the community module: storage garbage collection and post deletion,
# laid out as domain / application / infrastructure / presentation layers.
# 🔗 Dependencies:
# FastAPI, pydantic, supabase, app.shared.core
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, background_jobs.tasks.storage_cleanup

"""
Community Module

Architecture follows Domain-Driven Design:
- Domain: path resolution, ownership, bucket routing, reference scanning,
  orphan detection, batched deletion, post deletion
- Application: commands and handlers
- Infrastructure: Supabase record and object stores
- Presentation: post deletion and storage maintenance endpoints
"""

__version__ = "1.0.0"
