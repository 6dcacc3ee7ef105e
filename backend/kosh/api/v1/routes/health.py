"""Liveness endpoints at the API root; mounted directly on the app with the `/api` prefix."""
from fastapi import APIRouter

from kosh.core.settings import settings
from kosh.db.base import utcnow
from kosh.schemas.health import HealthOut

router = APIRouter()


@router.get("", response_model=HealthOut, response_model_exclude_none=True)
async def root():
    return HealthOut(service=settings.app.SERVICE_NAME)


@router.get("/health", response_model=HealthOut)
async def health():
    return HealthOut(service=settings.app.SERVICE_NAME, time=utcnow())
