import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from portfolio_generator.app.api.routes.route_logic import user_crud
from portfolio_generator.app.core.auth import (
    end_session,
    get_optional_session,
    start_session,
)
from portfolio_generator.app.core.config import Settings, get_settings
from portfolio_generator.app.core.exceptions import ValidationError
from portfolio_generator.app.core.security import MAX_PASSWORD_BYTES, password_too_long
from portfolio_generator.app.core.sessions import (
    LoginSession,
    SessionStore,
    get_session_store,
)
from portfolio_generator.app.database.database import get_db
from portfolio_generator.app.schemas.user import (
    AuthStatusResponse,
    CredentialsRequest,
    MessageResponse,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _require_credentials(credentials: CredentialsRequest) -> tuple[str, str]:
    """Return the trimmed email and the password, or fail with a 400.

    Raises:
        ValidationError: If either field is missing or blank, or the password
            is longer than bcrypt can hash.

    """
    email = (credentials.email or "").strip()
    password = credentials.password or ""
    if not email or not password.strip():
        _msg = "Email and password are required"
        log.debug(_msg)
        raise ValidationError(_msg)
    if password_too_long(password):
        _msg = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
        log.debug(_msg)
        raise ValidationError(_msg)
    return email, password


@router.post("/register")
def register(
    credentials: CredentialsRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Register a new account and log it in.

    Args:
        credentials (CredentialsRequest): The email and password of the new account.
        response (Response): The outgoing response, which receives the session cookie.
        db (Session): The database session.
        store (SessionStore): The session store.
        settings (Settings): The application settings.

    Returns:
        MessageResponse: `{"success": true, "message": "Registration successful"}`.

    Raises:
        ValidationError: If the email or password is missing or blank, or the
            password is longer than 72 bytes (400).
        DuplicateEmailError: If the email is already registered (400).

    Notes:
        1. Require both fields.
        2. Create the account with a hashed password.
        3. Issue a session for the new account and set its cookie.

    """
    email, password = _require_credentials(credentials)
    _msg = f"register starting for email: {email}"
    log.debug(_msg)

    account = user_crud.create_user(db, email=email, password=password)
    start_session(response, store=store, settings=settings, user_id=account.id)

    _msg = f"Registered user {account.id}"
    log.info(_msg)
    return MessageResponse(message="Registration successful")


@router.post("/login")
def login(
    credentials: CredentialsRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Log in with email and password.

    Args:
        credentials (CredentialsRequest): The submitted email and password.
        response (Response): The outgoing response, which receives the session cookie.
        db (Session): The database session.
        store (SessionStore): The session store.
        settings (Settings): The application settings.

    Returns:
        MessageResponse: `{"success": true, "message": "Login successful"}`.

    Raises:
        ValidationError: If the email or password is missing or blank, or the
            password is longer than 72 bytes (400).
        InvalidCredentialsError: If the email is unknown or the password is wrong (401).

    """
    email, password = _require_credentials(credentials)
    _msg = "Login attempt for user"
    log.debug(_msg)

    account = user_crud.verify_credentials(db, email=email, password=password)
    start_session(response, store=store, settings=settings, user_id=account.id)
    return MessageResponse(message="Login successful")


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    store: Annotated[SessionStore, Depends(get_session_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Invalidate the current session immediately and clear its cookie."""
    end_session(request, response, store=store, settings=settings)
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/check-auth",
    response_model=AuthStatusResponse,
    response_model_exclude_none=True,
)
def check_auth(
    session: Annotated[LoginSession | None, Depends(get_optional_session)],
) -> AuthStatusResponse:
    """Report whether the caller holds a live session.

    Returns:
        AuthStatusResponse: `{"authenticated": true, "userId": ...}` or
            `{"authenticated": false}`.

    """
    if session is None:
        return AuthStatusResponse(authenticated=False)
    return AuthStatusResponse(authenticated=True, user_id=session.user_id)
