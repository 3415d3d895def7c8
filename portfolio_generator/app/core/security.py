import logging
from functools import lru_cache

import bcrypt

log = logging.getLogger(__name__)

# bcrypt only hashes the first 72 bytes and rejects longer input.
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    """True if the UTF-8 encoding of `password` exceeds what bcrypt accepts."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password.

    Args:
        plain_password (str): The plain text password to verify.
        hashed_password (str): The hashed password to compare against.

    Returns:
        bool: True if the password matches, False otherwise.

    Notes:
        1. Use bcrypt to verify the password.
        2. A password longer than `MAX_PASSWORD_BYTES` can never have been
           stored, so it is a mismatch without calling bcrypt.
        3. A malformed stored hash is treated as a mismatch.
        4. No database or network access in this function.

    """
    _msg = "Verifying password"
    log.debug(_msg)
    if password_too_long(plain_password):
        _msg = "Password longer than bcrypt accepts, treating as a mismatch"
        log.debug(_msg)
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        _msg = "Stored password hash is malformed"
        log.warning(_msg)
        return False


def get_password_hash(password: str) -> str:
    """Hash a plain password.

    Args:
        password (str): The plain text password to hash.

    Returns:
        str: The salted bcrypt hash.

    Raises:
        ValueError: If the password is longer than `MAX_PASSWORD_BYTES`.

    Notes:
        1. Use bcrypt with a freshly generated salt to hash the password.
        2. No database or network access in this function.

    """
    _msg = "Hashing password"
    log.debug(_msg)
    if password_too_long(password):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


@lru_cache
def _dummy_password_hash() -> str:
    return get_password_hash("dummy-password-for-unknown-accounts")


def burn_password_check(plain_password: str) -> None:
    """Spend the same bcrypt work as a real check when no account matches.

    Keeps the response time of an unknown-email login close to that of a
    wrong-password login.
    """
    verify_password(plain_password, _dummy_password_hash())
