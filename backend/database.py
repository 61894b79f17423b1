"""Database setup and session management."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from config import settings

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def _enable_sqlite_foreign_keys(engine) -> None:
    """Register a ``connect`` listener that turns on SQLite FK enforcement.

    SQLite ignores ``ON DELETE CASCADE`` unless ``PRAGMA foreign_keys`` is
    set on every connection.
    """

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_engine(database_url: str):
    """Create an engine for ``database_url`` with per-dialect setup."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(database_url, connect_args=connect_args, echo=False)

    if database_url.startswith("sqlite"):
        _enable_sqlite_foreign_keys(engine)
    return engine


@lru_cache
def get_engine():
    """Get or create the database engine (cached)."""
    engine = create_db_engine(settings.DATABASE_URL)
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def get_session_local():
    """Get a sessionmaker bound to the engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def get_alembic_config(database_url: Optional[str] = None) -> Config:
    """Alembic config for the migrations shipped next to this module.

    Logging is left alone because the caller has already configured it.
    """
    alembic_config = Config(str(BACKEND_DIR / "alembic.ini"))
    alembic_config.attributes["configure_logging"] = False
    alembic_config.attributes["database_url"] = database_url or settings.DATABASE_URL
    return alembic_config


def init_db(database_url: Optional[str] = None) -> None:
    """Bring the schema up to the latest Alembic revision."""
    command.upgrade(get_alembic_config(database_url), "head")
    logger.info("Database schema is at the latest revision")


def get_db():
    """Dependency that provides a database session.

    Transaction conventions:
    - Services commit their own mutations
    - Snapshot writes after a ledger mutation commit separately so a
      snapshot failure never undoes the mutation.
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
