import logging
from datetime import datetime, timezone

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from portfolio_generator.app.api.routes.route_logic.portfolio_serialization import (
    portfolio_from_row,
    portfolio_to_columns,
)
from portfolio_generator.app.models.portfolio import Portfolio
from portfolio_generator.app.schemas.portfolio import PortfolioData, PortfolioResponse

log = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def get_portfolio_row(db: Session, user_id: int) -> Portfolio | None:
    """Retrieve the stored portfolio row of a user.

    Args:
        db (Session): The SQLAlchemy database session.
        user_id (int): The owning user's id.

    Returns:
        Portfolio | None: The row, or None if the user has not saved a portfolio yet.

    """
    return db.query(Portfolio).filter(Portfolio.user_id == user_id).first()


def get_portfolio_by_user(db: Session, user_id: int) -> PortfolioResponse | None:
    """Retrieve a user's portfolio with its list sections decoded.

    Args:
        db (Session): The SQLAlchemy database session.
        user_id (int): The owning user's id.

    Returns:
        PortfolioResponse | None: The decoded portfolio, or None if none exists.

    Notes:
        1. Query the Portfolio table for the row owned by user_id.
        2. Decode the JSON list columns; missing sections read as empty lists.
        3. This function performs a single database query.

    """
    portfolio = get_portfolio_row(db, user_id)
    if portfolio is None:
        return None
    return portfolio_from_row(portfolio)


def save_portfolio(db: Session, user_id: int, data: PortfolioData) -> bool:
    """Insert or update the portfolio of a user.

    Args:
        db (Session): The database session.
        user_id (int): The owning user's id.
        data (PortfolioData): The complete new portfolio content.

    Returns:
        bool: True if a new row was created, False if an existing row was updated.

    Notes:
        1. Encode the list sections to JSON text.
        2. Note whether a row exists, to choose the caller's response message.
        3. On PostgreSQL and SQLite, write with a single
           `INSERT ... ON CONFLICT (user_id) DO UPDATE` statement so concurrent
           saves for one user never produce two rows.
        4. On other dialects, lock the existing row and update it, or insert a
           new one, inside one transaction.
        5. Every save replaces all fields and bumps `updated_at`.
        6. Roll back and re-raise on any database error.
        7. This function performs a database write operation.

    """
    _msg = f"save_portfolio starting for user {user_id}"
    log.debug(_msg)

    values = portfolio_to_columns(data)
    now = datetime.now(timezone.utc)
    existed = (
        db.query(Portfolio.id).filter(Portfolio.user_id == user_id).first()
        is not None
    )

    try:
        insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
        if insert is not None:
            statement = insert(Portfolio.__table__).values(
                user_id=user_id,
                created_at=now,
                updated_at=now,
                **values,
            )
            statement = statement.on_conflict_do_update(
                index_elements=["user_id"],
                set_={**values, "updated_at": now},
            )
            db.execute(statement)
        else:
            portfolio = (
                db.query(Portfolio)
                .filter(Portfolio.user_id == user_id)
                .with_for_update()
                .first()
            )
            if portfolio is None:
                portfolio = Portfolio(user_id=user_id, created_at=now)
                db.add(portfolio)
            for column, value in values.items():
                setattr(portfolio, column, value)
            portfolio.updated_at = now
        db.commit()
    except Exception:
        db.rollback()
        _msg = f"Failed to save portfolio for user {user_id}"
        log.exception(_msg)
        raise

    _msg = f"save_portfolio returning, created={not existed}"
    log.debug(_msg)
    return not existed
