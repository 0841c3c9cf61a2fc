# migrations/env.py
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

import app.models  # noqa: F401  registers every table on Base.metadata
from app.models.base import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Alembic runs synchronously: swap async drivers for their sync counterparts
_SYNC_SCHEMES = (
    ("postgres://", "postgresql+psycopg://"),
    ("postgresql+asyncpg://", "postgresql+psycopg://"),
    ("postgresql+psycopg2://", "postgresql+psycopg://"),
    ("postgresql://", "postgresql+psycopg://"),
    ("sqlite+aiosqlite://", "sqlite://"),
)


def _get_sqlalchemy_url() -> str:
    # ALEMBIC_DATABASE_URL, then DATABASE_URL, else alembic.ini
    url = os.getenv("ALEMBIC_DATABASE_URL") or os.getenv("DATABASE_URL")
    if not url:
        return config.get_main_option("sqlalchemy.url")
    for prefix, replacement in _SYNC_SCHEMES:
        if url.startswith(prefix):
            return replacement + url[len(prefix) :]
    return url


target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(
        url=_get_sqlalchemy_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = _get_sqlalchemy_url()
    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
