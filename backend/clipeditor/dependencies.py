"""FastAPI dependency injection."""

from __future__ import annotations

from functools import lru_cache

from clipeditor.config import Settings, settings
from clipeditor.storage.projects import ProjectStore


def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def get_project_store() -> ProjectStore:
    return ProjectStore(settings.projects_file)
