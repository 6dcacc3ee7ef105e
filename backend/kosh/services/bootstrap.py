"""Idempotent demo data created on startup."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.core.logging import get_logger
from kosh.core.money import ZERO
from kosh.core.settings import settings
from kosh.models.investment import InvestmentNav, RiskLevel
from kosh.models.settings import UserSettings
from kosh.models.treasury import Treasury
from kosh.models.user import User
from kosh.services.settings_service import default_settings

logger = get_logger(__name__)

# Never a valid Argon2 or bcrypt hash, so the demo user cannot log in
DEMO_PASSWORD_HASH = "mock"


async def bootstrap_demo_data(db: AsyncSession) -> User:
    """
    Make sure the demo user, its settings, its treasury and both fund NAVs
    exist. Rows that already exist are left untouched.
    """
    email = settings.demo.EMAIL.strip().lower()
    user = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if user is None:
        user = User(email=email, password_hash=DEMO_PASSWORD_HASH, name=settings.demo.NAME)
        db.add(user)
        await db.flush()

    has_settings = (
        await db.execute(select(UserSettings.id).where(UserSettings.user_id == user.id))
    ).scalar_one_or_none()
    if has_settings is None:
        db.add(default_settings(user.id))

    has_treasury = (
        await db.execute(select(Treasury.id).where(Treasury.user_id == user.id))
    ).scalar_one_or_none()
    if has_treasury is None:
        db.add(Treasury(user_id=user.id, balance=ZERO))

    existing_navs = set((await db.execute(select(InvestmentNav.risk))).scalars().all())
    for risk in RiskLevel:
        if risk not in existing_navs:
            db.add(InvestmentNav(risk=risk, current_nav=settings.demo.SEED_NAV))

    await db.commit()
    logger.info("Demo data ready", extra={"demo_user_id": user.id})
    return user
