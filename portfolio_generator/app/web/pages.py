import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from portfolio_generator.app.core.auth import get_current_session_for_page
from portfolio_generator.app.core.sessions import LoginSession

log = logging.getLogger(__name__)

router = APIRouter()

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse, name="index_page")
async def index_page(request: Request) -> HTMLResponse:
    """Serve the landing page."""
    _msg = "Index page requested"
    log.debug(_msg)
    return templates.TemplateResponse(request, "index.html")


@router.get("/login", response_class=HTMLResponse, name="login_page")
async def login_page(request: Request) -> HTMLResponse:
    """Serve the login page.

    Args:
        request: The HTTP request object.

    Returns:
        TemplateResponse: The rendered login template.

    """
    _msg = "Login page requested"
    log.debug(_msg)
    return templates.TemplateResponse(request, "login.html")


@router.get("/register", response_class=HTMLResponse, name="register_page")
async def register_page(request: Request) -> HTMLResponse:
    """Serve the registration page."""
    _msg = "Register page requested"
    log.debug(_msg)
    return templates.TemplateResponse(request, "register.html")


@router.get("/portfolio", response_class=HTMLResponse, name="portfolio_page")
async def portfolio_page(
    request: Request,
    session: Annotated[LoginSession, Depends(get_current_session_for_page)],
) -> HTMLResponse:
    """Serve the portfolio editor page.

    Args:
        request: The HTTP request object.
        session: The live login session; browsers without one are redirected to login.

    Returns:
        TemplateResponse: The rendered portfolio editor template.

    """
    _msg = f"Portfolio page requested by user {session.user_id}"
    log.debug(_msg)
    return templates.TemplateResponse(request, "portfolio.html")
