"""
Health check route.
"""
from fastapi import APIRouter, Depends
from pastebin.models import HealthCheck
from pastebin.storage import PasteStorage, get_storage

router = APIRouter()


@router.get("/api/healthz", response_model=HealthCheck)
async def health_check(storage: PasteStorage = Depends(get_storage)) -> HealthCheck:
    """
    Health check endpoint.
    Returns ok=true if the active storage backend is reachable.
    """
    is_healthy = await storage.ping()
    return HealthCheck(ok=is_healthy, mode=storage.current_mode())
