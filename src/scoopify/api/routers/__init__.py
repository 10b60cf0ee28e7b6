"""Router registrations for the business intelligence service."""

from __future__ import annotations

from fastapi import APIRouter

from .cron import router as cron_router
from .health import router as health_router
from .reports import router as reports_router

api_router = APIRouter()
api_router.include_router(cron_router)
api_router.include_router(reports_router)

__all__ = ["api_router", "cron_router", "health_router", "reports_router"]
