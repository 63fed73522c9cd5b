"""EditorSession — the single owner of path, selection, viewport, tool and history state.

Every mutation goes through ``_commit``: the new state is adopted atomically,
history observes it (tagged with its origin), then subscribers are notified
once. Renderers only ever see frozen snapshots.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from clipeditor.engine import mutations
from clipeditor.engine.config import EditorConfig
from clipeditor.engine.history import EditOrigin, History
from clipeditor.engine.state import EditorState
from clipeditor.engine.viewport import Viewport
from clipeditor.models.path import HandleKind, PathSnapshot, Point, Vec2
from clipeditor.svg.path_data import to_css_clip_path, to_svg_path_data

logger = logging.getLogger(__name__)

Listener = Callable[["EditorSession"], None]


class Tool(str, enum.Enum):
    SELECT = "select"
    ADD = "add"
    PAN = "pan"


@dataclass(frozen=True)
class ImageInfo:
    """The loaded image: an opaque reference (data URL or handle) and its pixel size."""

    ref: str = ""
    width: float = 0.0
    height: float = 0.0

    @property
    def loaded(self) -> bool:
        return bool(self.width and self.height)


class EditorSession:
    """Mediator exposing every editor command. Not thread-safe; drive it from one thread."""

    def __init__(self, config: EditorConfig | None = None) -> None:
        self.config = config or EditorConfig()
        self._state = EditorState()
        self._viewport = Viewport.identity()
        self._tool = Tool.SELECT
        self._image = ImageInfo()
        self.history = History(self._state.snapshot(), limit=self.config.history_limit)
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def points(self) -> tuple[Point, ...]:
        return self._state.points

    @property
    def closed(self) -> bool:
        return self._state.closed

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def tool(self) -> Tool:
        return self._tool

    @property
    def image(self) -> ImageInfo:
        return self._image

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def path_snapshot(self) -> PathSnapshot:
        return self._state.snapshot()

    def svg_path_data(self) -> str:
        return to_svg_path_data(self.points, self._image.width, self._image.height, self.closed)

    def clip_path(self) -> str:
        return to_css_clip_path(self.points, self._image.width, self._image.height, self.closed)

    def selection_mirror_state(self) -> bool | None:
        return mutations.selection_mirror_state(self._state)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change callback. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _commit(self, new_state: EditorState, origin: EditOrigin = EditOrigin.USER_EDIT) -> bool:
        if new_state is self._state:
            return False
        self._state = new_state
        self.history.record(new_state.snapshot(), origin)
        self._notify()
        return True

    def _set_viewport(self, viewport: Viewport) -> None:
        if viewport == self._viewport:
            return
        self._viewport = viewport
        self._notify()

    # ------------------------------------------------------------------
    # Image / project lifecycle
    # ------------------------------------------------------------------

    def load_image(
        self,
        ref: str,
        width: float,
        height: float,
        container_size: tuple[float, float] | None = None,
    ) -> None:
        """Replace the image. Resets the path, selection, history and viewport."""
        self._reset(ImageInfo(ref=ref, width=width, height=height), EditorState(), container_size)
        logger.info("Loaded image %sx%s", width, height)
        self._notify()

    def _reset(
        self,
        image: ImageInfo,
        state: EditorState,
        container_size: tuple[float, float] | None,
    ) -> None:
        self._image = image
        self._state = state
        self.history.reset(state.snapshot())
        if container_size is not None:
            self._viewport = Viewport.fit(image.width, image.height, *container_size, config=self.config)
        else:
            self._viewport = Viewport.identity()

    def clear_image(self) -> None:
        self._reset(ImageInfo(), EditorState(), None)
        self._notify()

    def load_project(
        self,
        ref: str,
        width: float,
        height: float,
        points: Sequence[Point],
        closed: bool,
        container_size: tuple[float, float] | None = None,
    ) -> None:
        """Load an image together with a stored path; the loaded path starts a new timeline."""
        state = mutations.set_points(EditorState(), points, closed)
        self._reset(ImageInfo(ref=ref, width=width, height=height), state, container_size)
        logger.info("Loaded project path with %d points", len(state.points))
        self._notify()

    # ------------------------------------------------------------------
    # Tool
    # ------------------------------------------------------------------

    def set_tool(self, tool: Tool) -> None:
        """Switch tools. Selection is cleared."""
        self._tool = Tool(tool)
        if not self._commit(mutations.select_point(self._state, None)):
            self._notify()

    # ------------------------------------------------------------------
    # Point commands
    # ------------------------------------------------------------------

    def add_point(self, x: float, y: float) -> None:
        self._commit(mutations.add_point(self._state, x, y, self.config))

    def insert_point(
        self,
        index: int,
        x: float,
        y: float,
        handle_in: Vec2,
        handle_out: Vec2,
        prev_handle_out: Vec2,
        next_handle_in: Vec2,
    ) -> None:
        self._commit(
            mutations.insert_point(
                self._state, index, x, y, handle_in, handle_out, prev_handle_out, next_handle_in
            )
        )

    def split_segment(self, segment_index: int, t: float) -> None:
        self._commit(mutations.split_segment(self._state, segment_index, t))

    def select_point(
        self,
        point_id: str | None,
        handle: HandleKind | None = None,
        add_to_selection: bool = False,
    ) -> None:
        self._commit(mutations.select_point(self._state, point_id, handle, add_to_selection))

    def set_selected_ids(self, ids: Iterable[str]) -> None:
        self._commit(mutations.set_selected_ids(self._state, ids))

    def move_point(self, point_id: str, x: float, y: float) -> None:
        self._commit(mutations.move_point(self._state, point_id, x, y))

    def move_selected_points(self, dx: float, dy: float) -> None:
        self._commit(mutations.move_selected_points(self._state, dx, dy))

    def move_all_points(self, dx: float, dy: float) -> None:
        self._commit(mutations.move_all_points(self._state, dx, dy))

    def move_handle(
        self,
        point_id: str,
        kind: HandleKind,
        x: float,
        y: float,
        break_mirror: bool = False,
    ) -> None:
        self._commit(mutations.move_handle(self._state, point_id, kind, x, y, break_mirror))

    def delete_selected_points(self) -> None:
        self._commit(mutations.delete_selected_points(self._state))

    def delete_point(self, point_id: str) -> None:
        self._commit(mutations.delete_point(self._state, point_id))

    def toggle_handle_mirror(self) -> None:
        self._commit(mutations.toggle_handle_mirror(self._state, self.config))

    def close_shape(self) -> None:
        new_state = mutations.close_shape(self._state)
        if new_state is not self._state:
            self._tool = Tool.SELECT
        self._commit(new_state)

    def open_shape(self) -> None:
        self._commit(mutations.open_shape(self._state))

    def set_closed(self, closed: bool) -> None:
        self._commit(mutations.set_closed(self._state, closed))

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def start_drag(self) -> None:
        self.history.start_drag(self._state.snapshot())

    def end_drag(self) -> None:
        self.history.end_drag(self._state.snapshot())

    def _replay(self, snapshot: PathSnapshot | None) -> None:
        if snapshot is None:
            return
        # Selection may reference points the snapshot no longer has
        known = {p.id for p in snapshot.points}
        focus = self._state.selected_handle
        new_state = EditorState(
            points=snapshot.points,
            selected_ids=frozenset(i for i in self._state.selected_ids if i in known),
            selected_handle=focus if focus is not None and focus.point_id in known else None,
            closed=snapshot.closed,
        )
        self._commit(new_state, EditOrigin.HISTORY_REPLAY)

    def undo(self) -> None:
        self._replay(self.history.undo())

    def redo(self) -> None:
        self._replay(self.history.redo())

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------

    def set_viewport(self, viewport: Viewport) -> None:
        self._set_viewport(viewport)

    def zoom_in(self) -> None:
        self._set_viewport(self._viewport.zoom_in(self.config))

    def zoom_out(self) -> None:
        self._set_viewport(self._viewport.zoom_out(self.config))

    def zoom_reset(self) -> None:
        self._set_viewport(Viewport.identity())

    def zoom_to_cursor(self, cursor_x: float, cursor_y: float, factor: float) -> None:
        self._set_viewport(self._viewport.zoom_to_cursor(cursor_x, cursor_y, factor, self.config))

    def fit_to_view(self, container_w: float, container_h: float) -> None:
        self._set_viewport(
            Viewport.fit(self._image.width, self._image.height, container_w, container_h, self.config)
        )
