"""
User Service

Profile reads and updates.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.core.logging import get_logger
from kosh.models.user import User
from kosh.schemas.user import UserProfileUpdate

logger = get_logger(__name__)


class UserService:
    """Service for user profiles."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(User.id)))
        return result.scalar_one()

    async def update_profile(self, user: User, data: UserProfileUpdate) -> User:
        """Apply the fields present in the update to the user's profile."""
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(user, field, value)

        await self.db.commit()
        await self.db.refresh(user)

        logger.info(
            "Profile updated",
            extra={"user_id": user.id, "fields": sorted(changes)}
        )
        return user
