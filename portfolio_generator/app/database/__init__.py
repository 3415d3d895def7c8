"""This module provides database configuration and session management for the application.

The module sets up the database engine and session factory, which are used to interact with the database.

Functions:
    get_engine: Returns the SQLAlchemy engine instance for the database.
    get_session_local: Returns the SQLAlchemy session factory for creating database sessions.

Notes:
    1. The engine URL comes from the application settings (`DATABASE_URL`).
    2. SQLite engines have foreign key enforcement switched on so that deleting
       a user also deletes their portfolio.

"""

from .database import get_engine, get_session_local

__all__ = ["get_engine", "get_session_local"]
