"""Pydantic schemas for portfolio data.

Field names are snake_case in Python and camelCase on the wire, matching the
form field names the portfolio page submits (`fullName`, `softSkills`, ...).
Entry models accept and keep unknown keys so stored data round-trips
unchanged.
"""

import logging
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

log = logging.getLogger(__name__)

# Any JSON scalar a client may send for a free-text field.
Scalar = str | int | float


class PortfolioEntry(BaseModel):
    """Base class for one item of a repeated portfolio section."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class AcademicEntry(PortfolioEntry):
    """A degree or course of study.

    Attributes:
        institute (str | int | float | None): School or university name.
        degree (str | int | float | None): Degree or qualification earned.
        year (str | int | None): Year or range of years attended.
        grade (str | int | float | None): Final grade or GPA.

    """

    institute: Scalar | None = None
    degree: Scalar | None = None
    year: Scalar | None = None
    grade: Scalar | None = None


class WorkExperienceEntry(PortfolioEntry):
    """A past or current position.

    Attributes:
        company_name (str | int | float | None): Employer name, `companyName` on the wire.
        duration (str | int | float | None): Free-form period of employment.
        responsibilities (str | int | float | list | None): A single description or a list of bullet points.

    """

    company_name: Scalar | None = None
    duration: Scalar | None = None
    responsibilities: Scalar | list[Scalar] | None = None


class ProjectEntry(PortfolioEntry):
    """A project or publication."""

    title: Scalar | None = None
    description: Scalar | None = None


class PortfolioData(BaseModel):
    """The editable content of a portfolio.

    Attributes:
        full_name (str | None): Name shown in the header.
        contact_info (str | None): Contact line shown under the name.
        photo_path (str | None): Reference path of the stored profile photo.
        bio (str | None): Biography paragraph.
        soft_skills (list[str | int | float]): Ordered soft skill names.
        technical_skills (list[str | int | float]): Ordered technical skill names.
        academic_background (list[AcademicEntry]): Ordered academic entries.
        work_experience (list[WorkExperienceEntry]): Ordered work experience entries.
        projects_publications (list[ProjectEntry]): Ordered project/publication entries.

    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: str | None = None
    contact_info: str | None = None
    photo_path: str | None = None
    bio: str | None = None
    soft_skills: list[Scalar] = []
    technical_skills: list[Scalar] = []
    academic_background: list[AcademicEntry] = []
    work_experience: list[WorkExperienceEntry] = []
    projects_publications: list[ProjectEntry] = []


class PortfolioResponse(PortfolioData):
    """A stored portfolio as returned by the API."""

    id: int
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PortfolioEnvelope(BaseModel):
    """Response of `GET /api/portfolio`. `portfolio` is None until the first save."""

    success: bool = True
    portfolio: PortfolioResponse | None = None
