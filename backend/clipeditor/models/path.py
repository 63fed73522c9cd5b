"""Path data model: control points, handles and history snapshots."""

from __future__ import annotations

import enum
import math
import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def generate_id() -> str:
    """Short opaque id for a point or project."""
    return uuid.uuid4().hex[:8]


class HandleKind(str, enum.Enum):
    IN = "in"
    OUT = "out"

    @property
    def opposite(self) -> HandleKind:
        return HandleKind.OUT if self is HandleKind.IN else HandleKind.IN


class Vec2(BaseModel):
    """2D offset in image-percentage units."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0

    def __neg__(self) -> Vec2:
        return Vec2(x=-self.x, y=-self.y)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


class Point(BaseModel):
    """A control vertex. x/y are percentages of the image size (0-100).

    Handles are offsets relative to the vertex. Serialized with camelCase keys
    (handleIn, handleOut, isMirrored) to stay compatible with stored projects.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    x: float
    y: float
    handle_in: Vec2 = Field(default_factory=lambda: Vec2(x=-5.0, y=0.0))
    handle_out: Vec2 = Field(default_factory=lambda: Vec2(x=5.0, y=0.0))
    is_mirrored: bool = True

    def handle(self, kind: HandleKind) -> Vec2:
        if kind is HandleKind.IN:
            return self.handle_in
        return self.handle_out

    def with_handle(self, kind: HandleKind, value: Vec2) -> Point:
        if kind is HandleKind.IN:
            return self.model_copy(update={"handle_in": value})
        return self.model_copy(update={"handle_out": value})

    def control_in(self) -> tuple[float, float]:
        """Absolute position of the incoming control point (percent space)."""
        return (self.x + self.handle_in.x, self.y + self.handle_in.y)

    def control_out(self) -> tuple[float, float]:
        """Absolute position of the outgoing control point (percent space)."""
        return (self.x + self.handle_out.x, self.y + self.handle_out.y)

    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


class HandleFocus(BaseModel):
    """A specifically selected handle of a selected point."""

    model_config = ConfigDict(frozen=True)

    point_id: str
    kind: HandleKind


class PathSnapshot(BaseModel):
    """Immutable (points, closed) pair recorded by the history manager."""

    model_config = ConfigDict(frozen=True)

    points: tuple[Point, ...] = ()
    closed: bool = False
