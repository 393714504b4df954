"""Registration and login flows."""
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from taskmaster.db.errors import is_unique_violation
from taskmaster.errors import EmailConflict, InternalError, InvalidCredentials, ValidationError
from taskmaster.models.user import User
from taskmaster.schemas.auth import TokenResponse, UserSummary
from taskmaster.services.security import PasswordHasher, TokenService
from taskmaster.utils.logger import get_logger

logger = get_logger(__name__)


def _require_credentials(email: Optional[str], password: Optional[str]) -> None:
    if not email or not password:
        raise ValidationError("Email and password required")


class AuthService:
    """Turns credentials into bearer tokens."""

    def __init__(self, session: Session, hasher: PasswordHasher, tokens: TokenService):
        self.session = session
        self.hasher = hasher
        self.tokens = tokens

    def _token_response(self, user: User) -> TokenResponse:
        return TokenResponse(
            access_token=self.tokens.issue(user.id),
            token_type="bearer",
            user=UserSummary(id=user.id, email=user.email),
        )

    def register(self, email: Optional[str], password: Optional[str]) -> TokenResponse:
        """
        Create a user and return a token for it.

        Raises:
            ValidationError: If email or password is missing, or the password is too long to hash whole
            EmailConflict: If the email is already registered
            InternalError: On any other storage failure
        """
        _require_credentials(email, password)
        if not self.hasher.accepts(password):
            raise ValidationError(
                f"Password must be at most {self.hasher.max_password_bytes} bytes"
            )

        user = User(email=email, password_hash=self.hasher.hash(password))
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except IntegrityError as e:
            self.session.rollback()
            if is_unique_violation(e):
                logger.info("Registration rejected: email already exists")
                raise EmailConflict("Email already exists")
            logger.exception("Registration failed")
            raise InternalError("Registration failed")
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Registration failed")
            raise InternalError("Registration failed")

        logger.info("User registered", user_id=user.id)
        return self._token_response(user)

    def login(self, email: Optional[str], password: Optional[str]) -> TokenResponse:
        """
        Check credentials and return a token.

        Unknown email and wrong password produce the same error, and both
        paths run one hash verification.

        Raises:
            ValidationError: If email or password is missing
            InvalidCredentials: If the credentials do not match a user
            InternalError: On storage failure
        """
        _require_credentials(email, password)

        try:
            user = self.session.exec(select(User).where(User.email == email)).first()
        except SQLAlchemyError:
            logger.exception("Login failed")
            raise InternalError("Login failed")

        # Over-long passwords can never have been registered
        if user is None or not self.hasher.accepts(password):
            self.hasher.dummy_verify()
            verified = False
        else:
            verified = self.hasher.verify(password, user.password_hash)

        if not verified:
            logger.info("Login failed")
            raise InvalidCredentials("Invalid credentials")

        logger.info("User logged in", user_id=user.id)
        return self._token_response(user)
