import logging
import time
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from sqlalchemy.orm import Session

from portfolio_generator.app.api.dependencies import (
    get_portfolio_for_user,
    get_upload_dir,
)
from portfolio_generator.app.api.routes.route_logic.pdf_export import render_pdf
from portfolio_generator.app.api.routes.route_logic.portfolio_crud import (
    get_portfolio_by_user,
    get_portfolio_row,
    save_portfolio,
)
from portfolio_generator.app.api.routes.route_logic.portfolio_render import (
    render_portfolio_html,
)
from portfolio_generator.app.api.routes.route_logic.portfolio_serialization import (
    build_portfolio_data,
)
from portfolio_generator.app.api.routes.route_logic.uploads import (
    discard_photo,
    has_upload,
    photo_data_uri,
    store_photo,
)
from portfolio_generator.app.core.auth import get_current_user_id
from portfolio_generator.app.core.config import Settings, get_settings
from portfolio_generator.app.database.database import get_db
from portfolio_generator.app.schemas.portfolio import (
    PortfolioEnvelope,
    PortfolioResponse,
)
from portfolio_generator.app.schemas.user import MessageResponse

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


class PortfolioForm:
    """Form fields of a portfolio save. List sections arrive as JSON text."""

    def __init__(
        self,
        full_name: Annotated[str | None, Form(alias="fullName")] = None,
        contact_info: Annotated[str | None, Form(alias="contactInfo")] = None,
        bio: Annotated[str | None, Form()] = None,
        soft_skills: Annotated[str | None, Form(alias="softSkills")] = None,
        technical_skills: Annotated[str | None, Form(alias="technicalSkills")] = None,
        academic_background: Annotated[
            str | None,
            Form(alias="academicBackground"),
        ] = None,
        work_experience: Annotated[str | None, Form(alias="workExperience")] = None,
        projects_publications: Annotated[
            str | None,
            Form(alias="projectsPublications"),
        ] = None,
    ):
        self.fields = {
            "fullName": full_name,
            "contactInfo": contact_info,
            "bio": bio,
            "softSkills": soft_skills,
            "technicalSkills": technical_skills,
            "academicBackground": academic_background,
            "workExperience": work_experience,
            "projectsPublications": projects_publications,
        }


@router.get("")
def get_portfolio(
    db: Annotated[Session, Depends(get_db)],
    user_id: Annotated[int, Depends(get_current_user_id)],
) -> PortfolioEnvelope:
    """Return the current user's portfolio, or `null` if none has been saved."""
    return PortfolioEnvelope(portfolio=get_portfolio_by_user(db, user_id))


@router.post("")
@router.post("/save")
async def save_portfolio_route(
    form: Annotated[PortfolioForm, Depends()],
    db: Annotated[Session, Depends(get_db)],
    user_id: Annotated[int, Depends(get_current_user_id)],
    settings: Annotated[Settings, Depends(get_settings)],
    upload_dir: Annotated[Path, Depends(get_upload_dir)],
    photo: Annotated[UploadFile | None, File()] = None,
) -> MessageResponse:
    """Create or update the current user's portfolio.

    Args:
        form (PortfolioForm): The submitted form fields.
        db (Session): The database session.
        user_id (int): The id of the current authenticated user.
        settings (Settings): The application settings.
        upload_dir (Path): Directory where photos are stored.
        photo (UploadFile | None): Optional new profile photo.

    Returns:
        MessageResponse: "Portfolio saved successfully" on first save,
            "Portfolio updated successfully" afterwards.

    Raises:
        ValidationError: If a list section is malformed (400).
        FileTypeRejectedError: If the photo is not a JPEG or PNG (400).
        FileTooLargeError: If the photo exceeds the size limit (413).

    Notes:
        1. Validate the form fields before touching any file or row.
        2. If a photo was uploaded, validate and store it; otherwise keep the stored photo path.
        3. Upsert the portfolio row.
        4. If the save fails, remove the newly stored photo and re-raise.
        5. After a successful save that replaced a photo, remove the old file.

    """
    _msg = f"save_portfolio_route starting for user {user_id}"
    log.debug(_msg)

    existing = get_portfolio_row(db, user_id)
    previous_photo = existing.photo_path if existing is not None else None

    # Fails fast on malformed sections, before any upload is written.
    data = build_portfolio_data(form.fields, photo_path=previous_photo)

    new_photo: str | None = None
    if has_upload(photo):
        new_photo = await store_photo(
            photo,
            upload_dir=upload_dir,
            max_bytes=settings.max_upload_bytes,
        )
        data.photo_path = new_photo

    try:
        created = save_portfolio(db, user_id, data)
    except Exception:
        discard_photo(new_photo, upload_dir)
        raise

    if new_photo and previous_photo and previous_photo != new_photo:
        discard_photo(previous_photo, upload_dir)

    message = (
        "Portfolio saved successfully" if created else "Portfolio updated successfully"
    )
    _msg = f"save_portfolio_route returning for user {user_id}: {message}"
    log.debug(_msg)
    return MessageResponse(message=message)


@router.post("/generate-pdf")
async def generate_pdf(
    portfolio: Annotated[PortfolioResponse, Depends(get_portfolio_for_user)],
    settings: Annotated[Settings, Depends(get_settings)],
    upload_dir: Annotated[Path, Depends(get_upload_dir)],
) -> Response:
    """Render the current user's portfolio as a downloadable PDF.

    Args:
        portfolio (PortfolioResponse): The portfolio, injected by dependency.
        settings (Settings): The application settings.
        upload_dir (Path): Directory where photos are stored.

    Returns:
        Response: The PDF as an `application/pdf` attachment.

    Raises:
        PortfolioNotFoundError: If the user has no portfolio (404, raised by the dependency).
        PdfGenerationError: If the headless browser fails (500).

    Notes:
        1. Embed the stored photo as a data URI so the document is self-contained.
        2. Render the portfolio HTML.
        3. Print the HTML to PDF with the configured margins.
        4. Return the bytes with a timestamped attachment file name.

    """
    _msg = f"generate_pdf starting for portfolio {portfolio.id}"
    log.debug(_msg)

    html = render_portfolio_html(
        portfolio,
        photo_src=photo_data_uri(portfolio.photo_path, upload_dir),
    )
    pdf = await render_pdf(html, margin=settings.pdf_margin)

    filename = f"portfolio-{int(time.time() * 1000)}.pdf"
    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"',
    }
    return Response(content=pdf, media_type="application/pdf", headers=headers)
