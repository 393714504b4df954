"""Authentication router."""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from taskmaster.db.config import get_session
from taskmaster.schemas.auth import Credentials, TokenResponse
from taskmaster.services.auth_service import AuthService
from taskmaster.services.security import (
    PasswordHasher,
    TokenService,
    get_password_hasher,
    get_token_service,
)

router = APIRouter(tags=["Authentication"])  # main.py adds the /api/auth prefix


def get_auth_service(
    session: Session = Depends(get_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    """Dependency for getting AuthService instance."""
    return AuthService(session, hasher, tokens)


@router.post("/register", response_model=TokenResponse)
def register(request: Credentials, service: AuthService = Depends(get_auth_service)):
    """Create an account and return a bearer token for it."""
    return service.register(request.email, request.password)


@router.post("/login", response_model=TokenResponse)
def login(request: Credentials, service: AuthService = Depends(get_auth_service)):
    """Exchange email and password for a bearer token."""
    return service.login(request.email, request.password)
