"""Classification of DB-API errors surfaced through SQLAlchemy."""
from sqlalchemy.exc import IntegrityError

# SQLSTATE for unique_violation (PostgreSQL and other standard backends)
UNIQUE_VIOLATION_SQLSTATE = "23505"
# SQLite extended result code SQLITE_CONSTRAINT_UNIQUE
SQLITE_CONSTRAINT_UNIQUE = 2067


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    Return True only when the driver reports a unique constraint violation.

    The decision is made from the driver's error codes, never from the
    message text, so other integrity failures (foreign keys, NOT NULL)
    are not mistaken for duplicates.
    """
    orig = getattr(exc, "orig", None)
    if orig is None:
        return False

    # psycopg (3) exposes .sqlstate, psycopg2 exposes .pgcode
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE

    return (
        getattr(orig, "sqlite_errorcode", None) == SQLITE_CONSTRAINT_UNIQUE
        or getattr(orig, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE"
    )
