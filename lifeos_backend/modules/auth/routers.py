"""Authentication API routes.

Sign-in and token refresh happen against Supabase Auth directly; this router
only reports who the backend thinks the caller is.
"""

from fastapi import APIRouter

from ..commons import BaseResponse
from .dependencies import CurrentUser
from .schemas import AuthenticatedUser

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/me", response_model=BaseResponse[AuthenticatedUser])
async def get_me(current_user: CurrentUser):
    """Return the authenticated user."""
    return BaseResponse(success=True, data=current_user)
