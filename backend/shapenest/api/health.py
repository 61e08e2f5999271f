"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shapenest.config import Settings
from shapenest.dependencies import get_settings
from shapenest.engine.shapes import ShapeKind
from shapenest.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        environment=settings.shapenest_env,
        shape_kinds=len(ShapeKind),
    )
