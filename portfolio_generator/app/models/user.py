import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship, validates

from portfolio_generator.app.models import Base

log = logging.getLogger(__name__)


@dataclass
class UserData:
    """Dataclass to hold data for User initialization."""

    email: str
    hashed_password: str
    id: int | None = None


class User(Base):
    """
    User model for authentication and portfolio ownership.

    Attributes:
        id (int): Unique identifier for the user.
        email (str): Unique email address the user logs in with.
        hashed_password (str): Salted bcrypt hash of the user's password.
        created_at (datetime): Timestamp when the account was registered.
        portfolio (Portfolio | None): The user's portfolio, deleted together with the user.

    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationship to Portfolio
    portfolio = relationship(
        "Portfolio",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
    )

    def __init__(self, data: UserData):
        """
        Initialize a User instance.

        Args:
            data (UserData): The email, password hash and optional id of the new user.

        Returns:
            None

        Notes:
            1. Assign the id only when one is given, for testing purposes.
            2. Assign email and hashed_password; the validators below reject empty values.
            3. This operation does not involve network, disk, or database access.

        """
        _msg = f"Initializing User with email: {data.email}"
        log.debug(_msg)

        if data.id is not None:
            self.id = data.id
        self.email = data.email
        self.hashed_password = data.hashed_password

    @validates("email")
    def validate_email(self, key, email):
        """
        Validate the email field.

        Args:
            key (str): The field name being validated (should be 'email').
            email (str): The email value to validate. Must be a non-empty string.

        Returns:
            str: The validated email (stripped of leading/trailing whitespace).

        """
        if not isinstance(email, str):
            raise ValueError("Email must be a string")
        if not email.strip():
            raise ValueError("Email cannot be empty")
        return email.strip()

    @validates("hashed_password")
    def validate_hashed_password(self, key, hashed_password):
        """
        Validate the hashed_password field.

        Args:
            key (str): The field name being validated (should be 'hashed_password').
            hashed_password (str): The hashed password value to validate.

        Returns:
            str: The validated hashed password.

        """
        if not isinstance(hashed_password, str):
            raise ValueError("Hashed password must be a string")
        if not hashed_password.strip():
            raise ValueError("Hashed password cannot be empty")
        return hashed_password.strip()
