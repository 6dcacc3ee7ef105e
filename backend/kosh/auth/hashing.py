"""Password hashing with Argon2id and read-only support for legacy bcrypt hashes."""
from typing import Tuple

import bcrypt
from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from kosh.core.logging import get_logger
from kosh.core.settings import settings

logger = get_logger(__name__)

ph = PasswordHasher(
    time_cost=settings.auth.ARGON2_TIME_COST,
    memory_cost=settings.auth.ARGON2_MEMORY_COST,
    parallelism=settings.auth.ARGON2_PARALLELISM,
)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """
    Hash password using Argon2id.

    Raises:
        RuntimeError: If hashing fails
    """
    try:
        return ph.hash(password)
    except HashingError as e:
        logger.error("Password hashing failed", exc_info=e)
        raise RuntimeError("Failed to hash password") from e


def verify_password(plain_password: str, hashed_password: str) -> Tuple[bool, bool]:
    """
    Verify a password against a stored hash.

    Returns (is_valid, needs_rehash). Valid bcrypt hashes always need a
    rehash so accounts migrate to Argon2 on their next login.
    """
    if hashed_password.startswith(BCRYPT_PREFIXES):
        try:
            is_valid = bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
        except ValueError:
            logger.warning("Malformed bcrypt hash")
            return False, False
        return is_valid, is_valid

    try:
        ph.verify(hashed_password, plain_password)
    except (VerificationError, InvalidHashError):
        return False, False
    return True, ph.check_needs_rehash(hashed_password)
