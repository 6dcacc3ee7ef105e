"""
API Router

This module configures the FastAPI router with all endpoints.
"""

from fastapi import APIRouter

from kosh.api.v1.routes import (
    analytics,
    auth,
    bank,
    dashboard,
    investments,
    settings,
    transactions,
    treasury,
    users,
)

api_router = APIRouter()

# Include routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(auth.legacy_router, tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
api_router.include_router(treasury.router, prefix="/treasury", tags=["treasury"])
api_router.include_router(investments.router, prefix="/investments", tags=["investments"])
api_router.include_router(bank.router, prefix="/bank", tags=["bank"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
