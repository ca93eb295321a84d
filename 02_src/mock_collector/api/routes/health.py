"""Health check routes."""

from fastapi import APIRouter
from pydantic import BaseModel

from ...config import HEALTHZ_PATH


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_health_router() -> APIRouter:
    """Create health router."""
    router = APIRouter(tags=["health"])

    @router.get(HEALTHZ_PATH, response_model=StatusResponse)
    async def healthz() -> dict:
        """Report that the listener is up."""
        return {"status": "ok"}

    return router
