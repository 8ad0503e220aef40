# 📄 File: app/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a Python package holding the common tools every part of the
# app uses, like settings, logging and error types.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package: configuration, Supabase client management, exceptions, clock,
# sync retry executor, authentication dependencies and structured logging.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - app.modules.community, app.api, celery_config

__all__ = []
