"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    get_supabase_client: Cached Supabase client
    check_connection: Health check function
"""

from config.settings import settings, get_settings, Settings
from config.database import get_supabase_client, check_connection

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "get_supabase_client",
    "check_connection",
]
