"""
Auth Service

Registration and login. New accounts get default savings settings and an
empty treasury in the same unit of work.
"""

from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.hashing import hash_password, verify_password
from kosh.auth.jwt import create_access_token
from kosh.core.exceptions import (
    EmailAlreadyRegisteredException,
    InvalidCredentialsException,
    PermissionDeniedException,
    ValidationException,
)
from kosh.core.logging import get_logger
from kosh.core.money import ZERO
from kosh.core.settings import settings
from kosh.models.treasury import Treasury
from kosh.models.user import User
from kosh.services.settings_service import default_settings
from kosh.services.user_service import UserService

logger = get_logger(__name__)


class AuthService:
    """Service for account registration and credential checks."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.users = UserService(db)

    async def register(
        self,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> User:
        """
        Create an account with default settings and an empty treasury.

        Raises:
            ValidationException: If email or password is missing
            EmailAlreadyRegisteredException: If the email is taken
        """
        if not email or not email.strip() or not password:
            raise ValidationException("email and password are required")

        if await self.users.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredException()

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name,
            phone_number=phone_number,
        )
        self.db.add(user)
        try:
            await self.db.flush()
            self.db.add(default_settings(user.id))
            self.db.add(Treasury(user_id=user.id, balance=ZERO))
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same email
            await self.db.rollback()
            raise EmailAlreadyRegisteredException() from e

        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def authenticate(self, email: Optional[str], password: Optional[str]) -> User:
        """
        Check credentials, upgrading legacy or outdated hashes on success.

        Raises:
            ValidationException: If email or password is missing
            InvalidCredentialsException: If the credentials do not match
        """
        if not email or not password:
            raise ValidationException("email and password are required")

        user = await self.users.get_by_email(email)
        if user is None:
            logger.warning("Login failed: unknown email")
            raise InvalidCredentialsException()

        is_valid, needs_rehash = verify_password(password, user.password_hash)
        if not is_valid:
            logger.warning("Login failed: wrong password", extra={"user_id": user.id})
            raise InvalidCredentialsException()

        if needs_rehash:
            user.password_hash = hash_password(password)
            await self.db.commit()
            logger.info("Password hash upgraded", extra={"user_id": user.id})

        return user

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[str, User]:
        """Authenticate and issue an access token."""
        user = await self.authenticate(email, password)
        logger.info("User logged in", extra={"user_id": user.id})
        return create_access_token(user.id), user

    async def seed_dev(self) -> Tuple[str, User]:
        """
        Ensure the development test account exists and log into it.

        Raises:
            PermissionDeniedException: In production
        """
        if settings.app.is_production:
            raise PermissionDeniedException("Seeding is disabled in production")

        email = settings.demo.SEED_EMAIL
        password = settings.demo.SEED_PASSWORD
        if await self.users.get_by_email(email) is None:
            await self.register(email, password, settings.demo.SEED_NAME)
        return await self.login(email, password)
