"""Health check routes."""

from fastapi import APIRouter
from pydantic import BaseModel

from gridboard.api.dependencies import Registry
from gridboard.api.schemas import HealthResponse
from gridboard.db.cache import RedisStore

router = APIRouter()


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    ready: bool
    checks: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check(registry: Registry):
    """Basic health check endpoint."""
    settings = registry.settings
    return HealthResponse(
        status="healthy",
        app=settings.app_name,
        version=settings.app_version,
        store="redis" if isinstance(registry.store, RedisStore) else "memory",
        boards=len(registry),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(registry: Registry):
    """Readiness check with store validation."""
    checks = {}

    # Check store
    if isinstance(registry.store, RedisStore):
        checks["store"] = await registry.store.ping()
    else:
        checks["store"] = True

    return ReadinessResponse(
        ready=all(checks.values()),
        checks=checks,
    )
