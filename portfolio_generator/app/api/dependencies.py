import logging
from pathlib import Path
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from portfolio_generator.app.api.routes.route_logic.portfolio_crud import (
    get_portfolio_by_user,
)
from portfolio_generator.app.core.auth import get_current_user_id
from portfolio_generator.app.core.config import Settings, get_settings
from portfolio_generator.app.core.exceptions import PortfolioNotFoundError
from portfolio_generator.app.database.database import get_db
from portfolio_generator.app.schemas.portfolio import PortfolioResponse

log = logging.getLogger(__name__)


def get_upload_dir(settings: Annotated[Settings, Depends(get_settings)]) -> Path:
    """Dependency returning the photo upload directory, creating it if needed."""
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def get_portfolio_for_user(
    db: Annotated[Session, Depends(get_db)],
    user_id: Annotated[int, Depends(get_current_user_id)],
) -> PortfolioResponse:
    """
    Dependency to get the portfolio of the current user.

    Args:
        db (Session): The database session dependency.
        user_id (int): The id of the current authenticated user.

    Returns:
        PortfolioResponse: The user's portfolio with list sections decoded.

    Raises:
        PortfolioNotFoundError: If the user has not saved a portfolio yet.

    """
    portfolio = get_portfolio_by_user(db, user_id)
    if portfolio is None:
        _msg = f"No portfolio found for user {user_id}"
        log.debug(_msg)
        raise PortfolioNotFoundError()
    return portfolio
