# 📄 File: app/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# Sets up the shared helper tools, mainly the structured logging every other part of the app writes to.

# 🧪 Purpose (Technical Summary):
# Utilities package initialization. Submodules are imported directly
# (e.g. `from app.shared.utils.logging import get_logger`).

# 🔗 Dependencies:
# - logging: Structured logging utilities

# 🔄 Connected Modules / Calls From:
# Used by: All application modules for logging

__version__ = "1.0.0"
