from fastapi import APIRouter, Request

from ...core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/info")
def info(request: Request):
    """Return application name, version and when the service state was initialized."""
    services = getattr(request.app.state, "services", None)
    started_at = services.started_at.isoformat() if services and services.started_at else None
    return {"name": settings.app_name, "version": settings.version, "started_at": started_at}
