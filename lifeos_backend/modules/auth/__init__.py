"""Authentication module: Supabase access token verification."""

from .dependencies import CurrentUser, get_current_user
from .routers import router
from .schemas import AuthenticatedUser

__all__ = [
    "AuthenticatedUser",
    "CurrentUser",
    "get_current_user",
    "router",
]
