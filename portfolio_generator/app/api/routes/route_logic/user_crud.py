import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio_generator.app.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
)
from portfolio_generator.app.core.security import (
    burn_password_check,
    get_password_hash,
    verify_password,
)
from portfolio_generator.app.models.user import User, UserData
from portfolio_generator.app.schemas.user import AccountIdentity

log = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Retrieve a user from the database using their email address.

    Args:
        db (Session): Database session used to query the database.
        email (str): The email address to search for.

    Returns:
        User | None: The User object if found, otherwise None.

    Notes:
        1. Query the database for a user with the given email.
        2. Return the first match or None if no user is found.
        3. Database access: Performs a read operation on the User table.

    """
    _msg = f"Querying database for email: {email}"
    log.debug(_msg)
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, email: str, password: str) -> AccountIdentity:
    """Register a new account.

    Args:
        db (Session): Database session used to persist the new user.
        email (str): The email address, unique across accounts.
        password (str): The plain text password, stored only as a bcrypt hash.

    Returns:
        AccountIdentity: The id and email of the new account.

    Raises:
        DuplicateEmailError: If an account with this email already exists.

    Notes:
        1. Reject the email up front if it is already registered.
        2. Hash the password with a fresh salt.
        3. Add and commit the new user.
        4. If the commit hits the unique constraint (a concurrent registration),
           roll back and report the duplicate.
        5. Database access: Performs read and write operations on the User table.

    """
    email = email.strip()
    _msg = f"create_user starting for email: {email}"
    log.debug(_msg)

    if get_user_by_email(db, email) is not None:
        _msg = f"Email {email} already registered"
        log.warning(_msg)
        raise DuplicateEmailError()

    db_user = User(
        data=UserData(email=email, hashed_password=get_password_hash(password)),
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        _msg = f"Email {email} registered concurrently"
        log.warning(_msg)
        raise DuplicateEmailError()
    db.refresh(db_user)

    _msg = f"create_user returning user {db_user.id}"
    log.debug(_msg)
    return AccountIdentity.model_validate(db_user)


def verify_credentials(db: Session, email: str, password: str) -> AccountIdentity:
    """Authenticate a user by email and password.

    Args:
        db (Session): Database session used to query for user records.
        email (str): Email address to authenticate.
        password (str): Password to verify.

    Returns:
        AccountIdentity: The id and email of the authenticated account.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password does not match.
            Both cases raise the same error with the same message.

    Notes:
        1. Query the database for a user with the given email.
        2. If no user exists, still run a bcrypt check so timing does not reveal the miss.
        3. If the password does not match the stored hash, raise.
        4. Otherwise return the account identity, never the hash.

    """
    email = email.strip()
    _msg = f"Authenticating user: {email}"
    log.debug(_msg)

    user = get_user_by_email(db, email)
    if user is None:
        burn_password_check(password)
        raise InvalidCredentialsError()
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError()
    return AccountIdentity.model_validate(user)


def delete_user(db: Session, user: User) -> None:
    """Delete a user and, through the cascade, their portfolio.

    Args:
        db (Session): The database session.
        user (User): The user object to delete.

    Notes:
        1. Remove the user object from the database session.
        2. Commit the transaction to persist the deletion.
        3. Database access: Performs a write operation on the User and Portfolio tables.

    """
    _msg = f"Deleting user {user.id}"
    log.info(_msg)
    db.delete(user)
    db.commit()
