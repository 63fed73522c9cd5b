"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from clipeditor.api import export, health, projects

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(export.router)
api_router.include_router(projects.router)
