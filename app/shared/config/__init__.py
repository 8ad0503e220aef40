# 📄 File: app/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains all the settings and configuration files that tell our Plant Care app
# how to connect to Supabase, how carefully to clean up storage, and how to retry.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization with exports for settings management
# and the Supabase client manager.
#
# 🔗 Dependencies:
# - settings.py (application settings)
# - supabase.py (Supabase client manager)
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - All modules requiring configuration
# - Infrastructure components

"""
Configuration Management Package

Handles all application configuration including:
- Environment-based settings
- Supabase integration settings
- Storage cleanup and sync retry policies
"""

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
