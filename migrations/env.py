"""
Alembic Environment Configuration

Runs migrations against MIGRATION_DB_URI (a synchronous driver URL).
The sqlalchemy.url in alembic.ini is only a fallback.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlmodel import SQLModel

from config import ApplicationConfig

# Import all models so their tables are registered on metadata
from src.domain import AuditEntry, Charge, Customer, CustomerAccount, LedgerLine  # noqa: F401

config = context.config

if ApplicationConfig.MIGRATION_DB_URI:
    config.set_main_option("sqlalchemy.url", ApplicationConfig.MIGRATION_DB_URI)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (emit SQL to stdout)."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (connect to DB)."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
