# 📄 File: app/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this 'app' folder holds the Plant Care storage maintenance service
# and records its version.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version info for the FastAPI service that
# garbage-collects community media and runs sync operations with bounded retries.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - app.main (application entry point)
# - celery_config (worker entry point)

"""
Plant Care Application - community media garbage collection and sync retry.
"""

__version__ = "1.0.0"
__title__ = "Plant Care Storage Service"
__description__ = "Reference-counted media cleanup for the Plant Care community"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
]
