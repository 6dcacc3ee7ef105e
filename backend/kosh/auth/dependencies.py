"""FastAPI dependencies resolving the user a request acts for."""
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.exceptions import MissingTokenError, TokenValidationError
from kosh.auth.jwt import decode_access_token
from kosh.core.exceptions import ResourceNotFoundException
from kosh.core.logging import get_logger, user_id as user_id_ctx
from kosh.core.settings import settings
from kosh.db.session import get_db
from kosh.models.user import User

logger = get_logger(__name__)

# auto_error is off so anonymous demo requests reach get_acting_user
security = HTTPBearer(auto_error=False)


async def _user_from_token(token: str, db: AsyncSession) -> User:
    payload = decode_access_token(token)
    try:
        subject = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise TokenValidationError() from e
    user = await db.get(User, subject)
    if user is None:
        logger.warning("Token subject no longer exists", extra={"sub": payload["sub"]})
        raise TokenValidationError()
    user_id_ctx.set(str(user.id))
    return user


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get the user identified by the bearer token.

    Raises:
        MissingTokenError: If no Authorization header was sent
        TokenValidationError: If the token is invalid, expired or orphaned
    """
    if credentials is None:
        raise MissingTokenError()
    return await _user_from_token(credentials.credentials, db)


async def get_demo_user(db: AsyncSession) -> User:
    result = await db.execute(select(User).where(User.email == settings.demo.EMAIL.lower()))
    user = result.scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundException("Demo user not found")
    return user


async def get_acting_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get the user a business endpoint acts for.

    The bearer-token user when a token is sent, otherwise the demo user while
    anonymous demo access is enabled.
    """
    if credentials is not None:
        return await _user_from_token(credentials.credentials, db)
    if not settings.demo.ANONYMOUS_ACCESS:
        raise MissingTokenError()
    return await get_demo_user(db)


CurrentUser = Annotated[User, Depends(get_current_user)]
ActingUser = Annotated[User, Depends(get_acting_user)]
