import logging

from jobboard.core import config
from jobboard.db.session import engine
from jobboard.db.base import Base
import jobboard.db.models  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)


def init_db():
    """Bring the schema up to date: Alembic when RUN_MIGRATIONS=1, create_all otherwise."""
    if config.RUN_MIGRATIONS:
        from jobboard.db.migrate import run_migrations
        run_migrations()
        return

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
