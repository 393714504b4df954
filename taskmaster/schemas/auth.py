"""Authentication schemas."""
from typing import Optional

from pydantic import BaseModel


class Credentials(BaseModel):
    """Register and login request body. Presence is checked by the auth service."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserSummary(BaseModel):
    """Public view of a user; the password hash is never exposed."""
    id: int
    email: str


class TokenResponse(BaseModel):
    """Response containing the bearer token after register or login."""
    access_token: str
    token_type: str = "bearer"
    user: UserSummary
