# restobot/api/routes/health.py
"""Health check endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from restobot.api.dependencies import get_config, get_store
from restobot.config import Settings
from restobot.services.store import RestaurantStore

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    """Simple health check."""
    return {"status": "ok"}


@router.get("/ready")
async def readiness_check(
    settings: Annotated[Settings, Depends(get_config)],
    store: Annotated[RestaurantStore, Depends(get_store)],
):
    """Readiness check with dependency validation."""
    checks = {
        "config": bool(settings.OPENAI_API_KEY),
        "storage": settings.PERSISTENCE_BACKEND.lower() != "json"
        or settings.STORAGE_DIR.exists(),
    }

    if all(checks.values()):
        return {"status": "ready", "checks": checks, "restaurants": len(store.ids())}
    else:
        return {"status": "not ready", "checks": checks, "restaurants": len(store.ids())}
