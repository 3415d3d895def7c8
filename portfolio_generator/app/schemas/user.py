import logging

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)


class CredentialsRequest(BaseModel):
    """Credentials submitted to register or log in.

    Both fields default to None so that a missing field is reported as a
    400 "Email and password are required" failure by the route rather than
    a schema error.

    Attributes:
        email (str | None): The account's email address.
        password (str | None): The plain text password.

    """

    email: str | None = None
    password: str | None = None


class AccountIdentity(BaseModel):
    """The public identity of an account. Never carries the password hash.

    Attributes:
        id (int): Unique identifier of the account.
        email (str): The account's email address.

    Notes:
        1. The model uses ConfigDict(from_attributes=True) to support ORM attribute mapping.

    """

    id: int
    email: str

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """Generic success envelope."""

    success: bool = True
    message: str


class AuthStatusResponse(BaseModel):
    """Whether the caller holds a live session, and for which account."""

    authenticated: bool
    user_id: int | None = Field(default=None, serialization_alias="userId")
