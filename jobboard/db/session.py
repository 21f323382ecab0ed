import logging

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from jobboard.core import config
from jobboard.core.errors import ConflictError
DATABASE_URL = config.DATABASE_URL

logger = logging.getLogger(__name__)


def build_engine(url: str, **kwargs):
    """Create an engine; SQLite gets cross-thread access and enforced foreign keys."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(url, pool_pre_ping=True, **kwargs)


def commit_unique(db: Session, conflict_message: str) -> None:
    """
    Commit, turning a unique-constraint violation into ConflictError.

    Concurrent writers can both pass a read-then-write duplicate check; the
    one the constraint rejects gets the same 409 as the pre-check would give.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Write rejected by constraint: {conflict_message} ({type(e.orig).__name__})")
        raise ConflictError(conflict_message)


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
