"""Alembic environment: migrates settings.DATABASE_URL against the ORM metadata."""

from alembic import context

import models  # noqa: F401  registers mappers on Base.metadata
from config import settings
from database import Base, create_db_engine
from logging_config import setup_logging

alembic_config = context.config

# init_db() runs migrations in-process after the app has set up logging.
if alembic_config.attributes.get("configure_logging", True):
    setup_logging()

target_metadata = Base.metadata


def _database_url() -> str:
    return (
        alembic_config.attributes.get("database_url")
        or alembic_config.get_main_option("sqlalchemy.url")
        or settings.DATABASE_URL
    )


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_db_engine(_database_url())
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                # SQLite can only ALTER through table copies.
                render_as_batch=True,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
