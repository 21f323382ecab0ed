"""
Alembic runner used at startup when RUN_MIGRATIONS=1.

On Postgres an advisory lock serialises workers that boot at the same time;
other backends migrate without a lock.
"""
import logging
import os
from contextlib import contextmanager

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, text

logger = logging.getLogger(__name__)

ADVISORY_LOCK_ID = 741852963
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def alembic_config(database_url: str) -> Config:
    cfg = Config(os.path.join(PROJECT_ROOT, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(PROJECT_ROOT, "alembic"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    cfg.attributes["configure_logger"] = False
    return cfg


@contextmanager
def migration_lock(engine):
    """Hold pg_advisory_lock for the duration of the block (no-op elsewhere)."""
    if engine.dialect.name != "postgresql":
        yield
        return

    conn = engine.connect()
    try:
        conn.execute(text(f"SELECT pg_advisory_lock({ADVISORY_LOCK_ID})"))
        conn.commit()
        logger.info("Migration lock acquired")
        yield
    finally:
        try:
            conn.execute(text(f"SELECT pg_advisory_unlock({ADVISORY_LOCK_ID})"))
            conn.commit()
        except Exception as unlock_error:
            logger.warning(f"Could not release advisory lock: {unlock_error}")
        conn.close()


def current_revision(engine):
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def run_migrations():
    """Upgrade the schema to the head revision unless it is already there."""
    from jobboard.core import config as app_config

    if not app_config.DATABASE_URL:
        raise ValueError("DATABASE_URL is not set")

    cfg = alembic_config(app_config.DATABASE_URL)
    head = ScriptDirectory.from_config(cfg).get_current_head()
    engine = create_engine(app_config.DATABASE_URL, pool_pre_ping=True)

    try:
        with migration_lock(engine):
            current = current_revision(engine)
            if current == head:
                logger.info(f"Schema already at head ({head})")
                return

            logger.info(f"RUN_MIGRATIONS=1 -> upgrading schema {current or 'base'} -> {head}")
            command.upgrade(cfg, "head")
            logger.info("Migrations complete")
    except Exception:
        logger.exception("Migration failed")
        raise
    finally:
        engine.dispose()
