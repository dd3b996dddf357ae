"""Authentication dependencies for FastAPI."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...core.exceptions import AuthenticationError, PermissionError
from .jwt_service import decode_access_token
from .schemas import AuthenticatedUser

security = HTTPBearer(auto_error=False)

ALLOWED_ROLES = ("authenticated", "service_role")


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthenticatedUser:
    """Extract and validate the current user from the Supabase JWT.

    No database call is made; the token carries everything needed.
    Tokens of roles other than signed-in users and the service role are
    refused.
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(credentials.credentials)

    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    try:
        user = AuthenticatedUser(
            id=UUID(payload["sub"]),
            email=payload.get("email"),
            role=payload.get("role", "authenticated"),
            session_id=payload.get("session_id"),
        )
    except (KeyError, ValueError) as e:
        raise AuthenticationError(f"Invalid token payload: {e}") from e

    if user.role not in ALLOWED_ROLES:
        raise PermissionError("access", "Life OS data", details={"role": user.role})

    return user


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
