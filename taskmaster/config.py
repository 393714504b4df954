"""Runtime configuration loaded from the environment (and an optional .env file)."""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from taskmaster.errors import ConfigurationError

# Load environment variables from .env if present
load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./taskmaster.db"


def _int_setting(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def normalize_database_url(url: str) -> str:
    """Hosted Postgres providers hand out postgres:// URLs; SQLAlchemy wants postgresql://."""
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


@dataclass(frozen=True)
class Settings:
    """Process-wide settings. Build with ``Settings.from_env()``."""

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_hours: int = 24
    bcrypt_rounds: int = 10
    database_url: str = DEFAULT_DATABASE_URL
    database_sslmode: Optional[str] = None
    environment: str = "development"
    cors_origins: Tuple[str, ...] = ("*",)
    static_dir: str = "public"
    log_level: str = "INFO"
    port: int = 3000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Read settings from the environment.

        Raises:
            ConfigurationError: If JWT_SECRET is missing or a numeric setting is malformed
        """
        env = os.environ if environ is None else environ

        secret = (env.get("JWT_SECRET") or "").strip()
        if not secret:
            raise ConfigurationError(
                "JWT_SECRET is not set; refusing to start without a token signing secret"
            )

        rounds = _int_setting(env, "BCRYPT_ROUNDS", 10)
        if not 4 <= rounds <= 31:
            raise ConfigurationError(f"BCRYPT_ROUNDS must be between 4 and 31, got {rounds}")

        expire_hours = _int_setting(env, "ACCESS_TOKEN_EXPIRE_HOURS", 24)
        if expire_hours <= 0:
            raise ConfigurationError("ACCESS_TOKEN_EXPIRE_HOURS must be positive")

        origins = tuple(
            origin.strip()
            for origin in env.get("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ) or ("*",)

        return cls(
            jwt_secret=secret,
            jwt_algorithm=env.get("JWT_ALGORITHM", "HS256"),
            access_token_expire_hours=expire_hours,
            bcrypt_rounds=rounds,
            database_url=normalize_database_url(env.get("DATABASE_URL", DEFAULT_DATABASE_URL)),
            database_sslmode=env.get("DATABASE_SSLMODE") or None,
            environment=env.get("ENVIRONMENT", "development"),
            cors_origins=origins,
            static_dir=env.get("STATIC_DIR", "public"),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            port=_int_setting(env, "PORT", 3000),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings for the running process."""
    return Settings.from_env()
