"""
Authentication module for Google sign-in, JWT tokens and role checks
"""
from pitchside.auth.utils import (
    get_current_user, require_role, create_access_token, create_refresh_token,
)
from pitchside.auth.config import settings

__all__ = [
    "get_current_user",
    "require_role",
    "create_access_token",
    "create_refresh_token",
    "settings",
]
