import logging
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from portfolio_generator.app.models import Base

log = logging.getLogger(__name__)


class Portfolio(Base):
    """Portfolio model holding the resume data of a single user.

    The five list-valued sections are stored as JSON text and decoded by
    `portfolio_serialization` when read.

    Attributes:
        id (int): Unique identifier for the portfolio.
        user_id (int): Foreign key to the owning User. Unique, so each user has at most one portfolio.
        full_name (str | None): The name shown in the portfolio header.
        contact_info (str | None): Free-form contact line.
        photo_path (str | None): Reference path of the uploaded photo, e.g. '/uploads/photo-<id>.png'.
        bio (str | None): Biography paragraph.
        soft_skills (str | None): JSON array of soft skill names.
        technical_skills (str | None): JSON array of technical skill names.
        academic_background (str | None): JSON array of academic entries.
        work_experience (str | None): JSON array of work experience entries.
        projects_publications (str | None): JSON array of project/publication entries.
        created_at (datetime): Timestamp when the portfolio was first saved.
        updated_at (datetime): Timestamp of the most recent save.

    """

    __tablename__ = "portfolios"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    full_name = Column(String, nullable=True)
    contact_info = Column(Text, nullable=True)
    photo_path = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    soft_skills = Column(Text, nullable=True)
    technical_skills = Column(Text, nullable=True)
    academic_background = Column(Text, nullable=True)
    work_experience = Column(Text, nullable=True)
    projects_publications = Column(Text, nullable=True)
    created_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationship to User
    user = relationship("User", back_populates="portfolio")
