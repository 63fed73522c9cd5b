"""EditorState: the immutable point/selection/closed state the mutation engine transforms."""

from __future__ import annotations

from dataclasses import dataclass, field

from clipeditor.models.path import HandleFocus, PathSnapshot, Point


@dataclass(frozen=True)
class EditorState:
    """Authoritative path + selection state. Replaced wholesale on every mutation."""

    points: tuple[Point, ...] = ()
    selected_ids: frozenset[str] = field(default_factory=frozenset)
    selected_handle: HandleFocus | None = None
    closed: bool = False

    @property
    def selected_points(self) -> list[Point]:
        return [p for p in self.points if p.id in self.selected_ids]

    def index_of(self, point_id: str) -> int:
        """Index of the point with this id, -1 if absent."""
        for i, p in enumerate(self.points):
            if p.id == point_id:
                return i
        return -1

    def get_point(self, point_id: str) -> Point | None:
        i = self.index_of(point_id)
        return self.points[i] if i >= 0 else None

    def snapshot(self) -> PathSnapshot:
        return PathSnapshot(points=self.points, closed=self.closed)
