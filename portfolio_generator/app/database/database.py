import logging
from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from portfolio_generator.app.core.config import get_settings

log = logging.getLogger(__name__)

# Global variables for engine and sessionmaker
_engine = None
_SessionLocal = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on foreign key enforcement so portfolio rows cascade with their user."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def configure_engine(engine: Engine) -> Engine:
    """Apply per-dialect connection settings to `engine`.

    Args:
        engine (Engine): The engine to configure.

    Returns:
        Engine: The same engine, for chaining.

    Notes:
        1. For SQLite, register a connect listener enabling foreign keys.
        2. Other dialects enforce foreign keys already and are returned unchanged.

    """
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_engine():
    """Get or create the database engine.

    Args:
        None

    Returns:
        Engine: The SQLAlchemy engine instance used to connect to the database.

    Notes:
        1. Create the engine only when first accessed to avoid premature connection.
        2. SQLite connections are shared with the request threadpool, so thread checks are disabled.
        3. Reuse the same engine instance on subsequent calls to ensure consistency.

    """
    global _engine
    if _engine is None:
        _msg = "Creating database engine"
        log.debug(_msg)
        settings = get_settings()
        database_url = str(settings.database_url)
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = configure_engine(
            create_engine(database_url, connect_args=connect_args),
        )
    return _engine


def get_session_local():
    """Get or create the session local factory.

    Args:
        None

    Returns:
        sessionmaker: The SQLAlchemy sessionmaker instance used to create database sessions.

    Notes:
        1. Create the sessionmaker only when first accessed to avoid premature configuration.
        2. Reuse the same sessionmaker instance on subsequent calls.

    """
    global _SessionLocal
    if _SessionLocal is None:
        _msg = "Creating session local factory"
        log.debug(_msg)
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Dependency to provide database sessions to route handlers.

    Args:
        None

    Returns:
        Generator[Session, None, None]: A generator that yields a database session for use in route handlers.

    Notes:
        1. Create a new database session using the sessionmaker factory.
        2. Yield the session to be used in route handlers.
        3. Ensure the session is closed after use to release resources.

    """
    _msg = "Creating database session"
    log.debug(_msg)

    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    finally:
        _msg = "Closing database session"
        log.debug(_msg)
        db.close()


def create_tables() -> None:
    """Create any missing tables directly from the model metadata.

    Notes:
        1. Import the models package so every table is registered on `Base.metadata`.
        2. Call `create_all` against the application engine; existing tables are left alone.
        3. Alembic migrations remain the way to evolve an existing schema.

    """
    from portfolio_generator.app.models import Base

    _msg = "Creating database tables"
    log.info(_msg)
    Base.metadata.create_all(bind=get_engine())
