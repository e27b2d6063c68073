"""
API package for the FitCoach API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- schemas/: Request and response models
- routers/: API route handlers
"""

from api.deps import (
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_current_user,
    get_optional_user,
    get_user_context,
    get_session_manager,
)

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Authentication
    "get_current_user",
    "get_optional_user",
    "get_user_context",
    # Workout sessions
    "get_session_manager",
]
