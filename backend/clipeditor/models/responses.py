"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from clipeditor.models.path import Point


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    env: str = "development"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExportResponse(_CamelModel):
    path_data: str = ""
    clip_path: str = "none"
    polygon: str = "none"
    css: str = ""
    svg: str = ""


class ImportResponse(_CamelModel):
    points: list[Point] = Field(default_factory=list)
    is_closed: bool = False


class ProjectSavedResponse(BaseModel):
    id: str


class DeletedResponse(BaseModel):
    status: str = "deleted"
    id: str
