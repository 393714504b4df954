"""Password hashing and bearer token primitives."""
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from taskmaster.config import Settings
from taskmaster.errors import Unauthenticated


# bcrypt only reads the first 72 bytes of a password; longer input would be silently truncated
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """One-way bcrypt hashing via passlib."""

    max_password_bytes = BCRYPT_MAX_PASSWORD_BYTES

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._context.verify(password, password_hash)

    def accepts(self, password: str) -> bool:
        """Whether the whole password takes part in the hash."""
        return len(password.encode("utf-8")) <= self.max_password_bytes

    def dummy_verify(self) -> None:
        """Spend the same time as a real verification when there is no hash to check."""
        self._context.dummy_verify()


class TokenService:
    """
    Issues and verifies signed, time-limited identity tokens.

    Tokens carry ``sub`` (the user id, as a string), ``iat`` and ``exp``.
    Nothing is stored server side.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=24),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def issue(self, user_id: int) -> str:
        issued_at = self._clock()
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """
        Validate signature and expiry and return the subject user id.

        Raises:
            Unauthenticated: If the token is invalid, expired or has no usable subject
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise Unauthenticated("Token has expired")
        except JWTError:
            raise Unauthenticated("Invalid token")

        subject = payload.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise Unauthenticated("Invalid token: missing user ID")


def hasher_from_settings(settings: Settings) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


def token_service_from_settings(settings: Settings) -> TokenService:
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=timedelta(hours=settings.access_token_expire_hours),
    )


def get_password_hasher(request: Request) -> PasswordHasher:
    """Dependency returning the hasher built by create_app."""
    return request.app.state.hasher


def get_token_service(request: Request) -> TokenService:
    """Dependency returning the token service built by create_app."""
    return request.app.state.tokens
