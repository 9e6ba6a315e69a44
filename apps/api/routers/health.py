"""Health check router: liveness probe."""

from fastapi import APIRouter

from apps.api.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_liveness():
    """Liveness probe: returns 200 if the API process is running.

    The import engine has no external dependencies, so there is no separate
    readiness check.
    """
    return {"status": "healthy", "service": "api", "version": settings.APP_VERSION}
