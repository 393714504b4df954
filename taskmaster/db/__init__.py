"""Database engine, sessions and error classification."""
from taskmaster.db.config import create_db_engine, engine_from_settings, get_session
from taskmaster.db.errors import is_unique_violation
from taskmaster.db.init import init_db

__all__ = ["create_db_engine", "engine_from_settings", "get_session", "init_db", "is_unique_violation"]
