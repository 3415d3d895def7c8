"""Application error hierarchy.

Every error raised by the credential store, portfolio store, session layer,
upload handler and PDF exporter derives from `PortfolioGeneratorError` and
carries the HTTP status it maps to. `register_exception_handlers` installs
FastAPI handlers that turn any of them, and any request FastAPI cannot
parse, into a `{"success": false, "error": ...}` JSON body.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class PortfolioGeneratorError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortfolioGeneratorError):
    """Required fields are missing or request data is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateEmailError(PortfolioGeneratorError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already exists"


class InvalidCredentialsError(PortfolioGeneratorError):
    """Unknown email or wrong password. The message never says which."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class UnauthorizedError(PortfolioGeneratorError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class PortfolioNotFoundError(PortfolioGeneratorError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Portfolio not found"


class FileTypeRejectedError(PortfolioGeneratorError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Only .jpg, .jpeg, and .png files are allowed"


class FileTooLargeError(PortfolioGeneratorError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    default_message = "File too large"


class PdfGenerationError(PortfolioGeneratorError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to generate PDF"


async def portfolio_generator_error_handler(
    request: Request,
    exc: PortfolioGeneratorError,
) -> JSONResponse:
    """Render a `PortfolioGeneratorError` as a structured JSON failure.

    Args:
        request (Request): The request that raised the error.
        exc (PortfolioGeneratorError): The raised error.

    Returns:
        JSONResponse: `{"success": false, "error": message}` with the error's status code.

    """
    _msg = f"{request.method} {request.url.path} failed with {type(exc).__name__}: {exc.message}"
    log.debug(_msg)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report a request that FastAPI could not parse as a 400 ValidationError."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid request at {location}: {first.get('msg', 'invalid value')}"
    else:
        message = ValidationError.default_message
    _msg = f"{request.method} {request.url.path} rejected: {message}"
    log.warning(_msg)
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"success": False, "error": message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the application error handlers on `app`."""
    app.add_exception_handler(PortfolioGeneratorError, portfolio_generator_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
