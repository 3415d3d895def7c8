import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from portfolio_generator.app.api.routes.auth import router as auth_router
from portfolio_generator.app.api.routes.portfolio import router as portfolio_router
from portfolio_generator.app.core.config import get_settings
from portfolio_generator.app.core.exceptions import register_exception_handlers
from portfolio_generator.app.database.database import create_tables
from portfolio_generator.app.web.pages import router as web_pages_router

log = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        None

    Returns:
        FastAPI: The configured FastAPI application instance.

    Notes:
        1. Initialize the FastAPI application with the title "Portfolio Generator".
        2. Register the handlers that turn application errors into `{"success": false, "error": ...}`.
        3. Define a health check endpoint at "/health" that returns a JSON object with status "ok".
        4. Mount static assets at "/static" and stored photos at "/uploads".
        5. Include the auth, portfolio and page routers.
        6. No disk, network, or database access happens here; the upload
           directory is created on first use.

    """
    _msg = "Creating FastAPI application"
    log.debug(_msg)

    settings = get_settings()
    app = FastAPI(title="Portfolio Generator")

    register_exception_handlers(app)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    # Mount static files
    STATIC_DIR = Path(__file__).resolve().parent / "static"
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    # Include routers
    app.include_router(auth_router)
    app.include_router(portfolio_router)
    app.include_router(web_pages_router)

    _msg = "FastAPI application created successfully"
    log.debug(_msg)
    return app


app = create_app()


def initialize_database() -> None:
    """Create any missing tables before serving.

    Notes:
        1. Calls `create_tables`, which leaves existing tables untouched.
        2. Schema changes to an existing database go through Alembic (`manage.py apply-migrations`).

    """
    _msg = "Initializing database tables"
    log.debug(_msg)
    create_tables()


def main() -> None:
    """Initialize the database and run the development server."""
    import uvicorn

    settings = get_settings()
    initialize_database()
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
