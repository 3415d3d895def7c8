import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status

from portfolio_generator.app.core.config import Settings, get_settings
from portfolio_generator.app.core.exceptions import UnauthorizedError
from portfolio_generator.app.core.sessions import (
    LoginSession,
    SessionStore,
    get_session_store,
)

log = logging.getLogger(__name__)


def get_optional_session(
    request: Request,
    store: Annotated[SessionStore, Depends(get_session_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> LoginSession | None:
    """Retrieve the login session referenced by the request cookie, if any.

    Args:
        request (Request): The incoming request, used to read the session cookie.
        store (SessionStore): The session store dependency.
        settings (Settings): The application settings, naming the session cookie.

    Returns:
        LoginSession | None: The live session, or None if the cookie is missing,
            unknown, or expired.

    Notes:
        1. Read the session id from the configured cookie.
        2. Look the id up in the session store; expired sessions come back as None.
        3. No database access in this function.

    """
    session_id = request.cookies.get(settings.session_cookie_name)
    if not session_id:
        return None
    return store.get(session_id)


def get_current_session(
    session: Annotated[LoginSession | None, Depends(get_optional_session)],
) -> LoginSession:
    """Require a live login session.

    Args:
        session (LoginSession | None): The session resolved from the request cookie.

    Returns:
        LoginSession: The live session.

    Raises:
        UnauthorizedError: If there is no session or it has expired.

    """
    if session is None:
        _msg = "Request without a valid session rejected"
        log.debug(_msg)
        raise UnauthorizedError()
    return session


def get_current_user_id(
    session: Annotated[LoginSession, Depends(get_current_session)],
) -> int:
    """Return the account id bound to the current session."""
    return session.user_id


def get_current_session_for_page(
    request: Request,
    session: Annotated[LoginSession | None, Depends(get_optional_session)],
) -> LoginSession:
    """Require a live session for an HTML page.

    Browsers are redirected to the login page; clients that ask for JSON get
    the same 401 failure as the API routes.

    Args:
        request (Request): The request object, used to inspect the Accept header.
        session (LoginSession | None): The session resolved from the request cookie.

    Returns:
        LoginSession: The live session.

    Raises:
        HTTPException: A 307 redirect to the login page for browser requests.
        UnauthorizedError: For requests that prefer JSON.

    Notes:
        1. If the session is live, return it.
        2. Determine whether the client prefers HTML by checking the 'Accept' header.
        3. Redirect browsers to '/login'; raise 401 for everything else.

    """
    if session is not None:
        return session

    accept_header = request.headers.get("Accept", "")
    prefers_html = "application/json" not in accept_header
    if prefers_html:
        login_url = request.url_for("login_page")
        raise HTTPException(
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
            headers={"Location": str(login_url)},
            detail="Not authenticated, redirecting to login.",
        )
    raise UnauthorizedError()


def start_session(
    response: Response,
    store: SessionStore,
    settings: Settings,
    user_id: int,
) -> LoginSession:
    """Issue a session for `user_id` and attach its cookie to `response`.

    Args:
        response (Response): The outgoing response that receives the cookie.
        store (SessionStore): The session store that records the session.
        settings (Settings): The application settings, naming and securing the cookie.
        user_id (int): The account the session is bound to.

    Returns:
        LoginSession: The newly issued session.

    """
    session = store.create(user_id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.session_id,
        max_age=settings.session_expire_hours * 60 * 60,
        httponly=True,
        samesite="lax",
        path="/",
        secure=settings.session_cookie_secure,
    )
    return session


def end_session(
    request: Request,
    response: Response,
    store: SessionStore,
    settings: Settings,
) -> None:
    """Invalidate the request's session, if any, and clear its cookie."""
    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        store.delete(session_id)
    response.delete_cookie(key=settings.session_cookie_name, path="/")
