import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    This class defines all configuration values used by the application,
    including the database connection, session lifetime, and upload limits.
    Values are loaded from environment variables with fallback defaults.

    Attributes:
        database_url (str): SQLAlchemy connection URL for the application's database.
        session_expire_hours (int): Hours a login session stays valid after it is issued.
        session_cookie_name (str): Name of the cookie carrying the session id.
        session_cookie_secure (bool): Whether the session cookie is restricted to HTTPS.
        upload_dir (str): Directory where uploaded profile photos are stored.
        max_upload_bytes (int): Largest accepted photo upload, in bytes.
        pdf_margin (str): CSS length used for every page margin of exported PDFs.
        host (str): Interface the development server binds to.
        port (int): Port the development server listens on.

    """

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    # Database settings
    database_url: str = Field(
        default="sqlite:///./portfolio.db",
        validation_alias="DATABASE_URL",
    )

    # Session settings
    session_expire_hours: int = Field(
        default=24,
        validation_alias="SESSION_EXPIRE_HOURS",
    )
    session_cookie_name: str = Field(
        default="session_id",
        validation_alias="SESSION_COOKIE_NAME",
    )
    session_cookie_secure: bool = Field(
        default=False,
        validation_alias="SESSION_COOKIE_SECURE",
    )

    # Upload settings
    upload_dir: str = Field(default="uploads", validation_alias="UPLOAD_DIR")
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024,
        validation_alias="MAX_UPLOAD_BYTES",
    )

    # PDF export settings
    pdf_margin: str = Field(default="20px", validation_alias="PDF_MARGIN")

    # Server settings
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")


@lru_cache
def get_settings() -> Settings:
    """
    Get the global settings instance.

    Args:
        None: This function does not take any arguments.

    Returns:
        Settings: The global settings instance, containing all configuration values.

    Raises:
        ValidationError: If environment variables are present but invalid.

    Notes:
        1. Reads configuration from environment variables and the .env file.
        2. If environment variables are not set, default values are used.
        3. The function returns a cached instance to avoid repeated parsing of the .env file.
        4. This function performs disk access to read the .env file on first call.

    """
    return Settings()
