"""
API v1 Router

All signal API endpoints.
"""

from fastapi import APIRouter

from perpsignal.api.v1.endpoints import signals

router = APIRouter()

router.include_router(signals.router, prefix="/signals", tags=["Signals"])
