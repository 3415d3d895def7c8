import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from portfolio_generator.app.core.config import get_settings
from portfolio_generator.app.database.database import configure_engine
from portfolio_generator.app.models import Base

log = logging.getLogger(__name__)

# Alembic Config object, provides access to values in alembic.ini
config = context.config

# The application settings decide which database is migrated.
database_url = get_settings().database_url
config.set_main_option("sqlalchemy.url", database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Metadata for '--autogenerate'
target_metadata = Base.metadata

# SQLite cannot ALTER most constraints in place.
is_sqlite = database_url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (no DB connection)."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=is_sqlite,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (with DB connection)."""
    connectable = configure_engine(
        engine_from_config(
            config.get_section(config.config_ini_section) or {},
            prefix="sqlalchemy.",
            poolclass=pool.NullPool,
        ),
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=is_sqlite,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
