"""API routes for gridboard."""

from fastapi import APIRouter

from gridboard.api.routes.boards import router as boards_router
from gridboard.api.routes.health import router as health_router

# Main API router
api_router = APIRouter()

api_router.include_router(health_router, tags=["Health"])
api_router.include_router(boards_router, prefix="/boards", tags=["Boards"])

__all__ = ["api_router"]
