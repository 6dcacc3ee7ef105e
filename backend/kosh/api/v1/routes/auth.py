"""
Auth Router

Registration, login and the development seed account. `/register` and
`/login` are also served at the API root for older clients.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.db.session import get_db
from kosh.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    SeedCredentials,
    SeedDevResponse,
    UserPublic,
)
from kosh.core.settings import settings
from kosh.services.auth_service import AuthService

router = APIRouter()
legacy_router = APIRouter()


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
@legacy_router.post(
    "/register",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create an account with default savings settings and an empty treasury."""
    service = AuthService(db)
    return await service.register(data.email, data.password, data.full_name, data.mobile)


@router.post("/login", response_model=LoginResponse)
@legacy_router.post("/login", response_model=LoginResponse, include_in_schema=False)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange email (or identifier) and password for a bearer token."""
    service = AuthService(db)
    token, user = await service.login(data.login_email, data.password)
    return LoginResponse(token=token, user=UserPublic.model_validate(user))


@router.post("/seed-dev", response_model=SeedDevResponse)
async def seed_dev(db: AsyncSession = Depends(get_db)):
    """Create (if needed) and log into the development test account."""
    service = AuthService(db)
    token, user = await service.seed_dev()
    return SeedDevResponse(
        message="Seeded test user",
        credentials=SeedCredentials(
            email=settings.demo.SEED_EMAIL,
            password=settings.demo.SEED_PASSWORD,
        ),
        token=token,
        user=UserPublic.model_validate(user),
    )
