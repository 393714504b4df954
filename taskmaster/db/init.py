"""Initialize database tables."""
import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

# Imported for their side effect of registering the tables on SQLModel.metadata
from taskmaster.models import Task, User  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(db_engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    logger.info("Creating database tables")
    SQLModel.metadata.create_all(db_engine)
    logger.info("Database tables ready")


if __name__ == "__main__":
    from taskmaster.config import get_settings
    from taskmaster.db.config import engine_from_settings

    init_db(engine_from_settings(get_settings()))
