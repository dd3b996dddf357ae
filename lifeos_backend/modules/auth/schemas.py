"""Authentication schemas."""

from uuid import UUID

from pydantic import BaseModel


class AuthenticatedUser(BaseModel):
    """The caller, as described by a verified Supabase access token."""

    id: UUID
    email: str | None = None
    role: str = "authenticated"
    session_id: str | None = None
