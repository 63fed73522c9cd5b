"""Saved project records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from clipeditor.models.path import Point, generate_id


class Project(BaseModel):
    """An image plus the clip path drawn over it.

    Timestamps are epoch milliseconds. Keys are camelCase on disk and on the wire.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    name: str
    image_data_url: str = ""
    image_width: float
    image_height: float
    points: list[Point] = Field(default_factory=list)
    is_closed: bool = False
    created_at: int = 0
    updated_at: int = 0


class ProjectSummary(BaseModel):
    """Listing entry; omits the (large) image payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    image_width: float
    image_height: float
    point_count: int = 0
    is_closed: bool = False
    created_at: int = 0
    updated_at: int = 0

    @classmethod
    def of(cls, project: Project) -> ProjectSummary:
        return cls(
            id=project.id,
            name=project.name,
            image_width=project.image_width,
            image_height=project.image_height,
            point_count=len(project.points),
            is_closed=project.is_closed,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )
