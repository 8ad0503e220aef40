# 📄 File: app/background_jobs/tasks/__init__.py
# 🧭 Purpose (Layman Explanation):
# Groups the scheduled clean-up jobs so the task runner can find them.
# 🧪 Purpose (Technical Summary):
# Celery task package. Exposes the storage maintenance tasks registered on the maintenance queue.
# 🔗 Dependencies:
# celery
# 🔄 Connected Modules / Calls From:
# celery_config autodiscovery

from .storage_cleanup import sweep_all_orphaned_assets, sweep_orphaned_assets_for_user

__all__ = [
    "sweep_all_orphaned_assets",
    "sweep_orphaned_assets_for_user",
]
