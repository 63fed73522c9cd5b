"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from clipeditor.models.path import Point


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExportRequest(_CamelModel):
    points: list[Point] = Field(default_factory=list, description="Path vertices in image-percent space")
    width: float = Field(..., gt=0, description="Image width in pixels")
    height: float = Field(..., gt=0, description="Image height in pixels")
    is_closed: bool = False


class ImportRequest(_CamelModel):
    path_data: str = Field(..., description="SVG path data in absolute pixels")
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class ProjectRequest(_CamelModel):
    name: str = Field(..., min_length=1)
    image_data_url: str = Field("", description="Image data URL or opaque reference")
    image_width: float = Field(..., gt=0)
    image_height: float = Field(..., gt=0)
    points: list[Point] = Field(default_factory=list)
    is_closed: bool = False
