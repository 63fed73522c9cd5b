"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from clipeditor import __version__
from clipeditor.config import Settings
from clipeditor.dependencies import get_settings
from clipeditor.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, env=settings.clipeditor_env)
