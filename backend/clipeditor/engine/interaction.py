"""Interaction controller — turns pointer, wheel and keyboard events into session commands.

A single-threaded state machine over ``DragMode``. Pointer coordinates are
screen pixels; the controller maps them through the session viewport into
image-percent space for mutations and into image pixels for geometry tests.
Hit targets for points and handles are tested in screen space, since they are
drawn at a constant on-screen size regardless of zoom.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass

from clipeditor.engine.session import EditorSession, Tool
from clipeditor.engine.viewport import ContainerRect
from clipeditor.models.path import HandleFocus, HandleKind, Point
from clipeditor.utils.geometry import SegmentHit, find_hit_segment, point_in_closed_path

logger = logging.getLogger(__name__)


class DragMode(enum.Enum):
    NONE = "none"
    PAN = "pan"
    POINT = "point"
    HANDLE = "handle"
    MARQUEE = "marquee"
    SHAPE = "shape"


class MouseButton(enum.IntEnum):
    LEFT = 0
    MIDDLE = 1
    RIGHT = 2


class Cursor(str, enum.Enum):
    DEFAULT = "default"
    CROSSHAIR = "crosshair"
    COPY = "copy"
    MOVE = "move"
    GRAB = "grab"
    GRABBING = "grabbing"


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    button: int = MouseButton.LEFT
    shift: bool = False
    alt: bool = False
    ctrl: bool = False
    meta: bool = False


@dataclass(frozen=True)
class WheelEvent:
    x: float
    y: float
    delta_y: float


@dataclass(frozen=True)
class KeyEvent:
    key: str
    code: str = ""
    shift: bool = False
    alt: bool = False
    ctrl: bool = False
    meta: bool = False
    repeat: bool = False


@dataclass(frozen=True)
class Marquee:
    """Screen-space drag rectangle, anchored at the press position."""

    start_x: float
    start_y: float
    end_x: float
    end_y: float

    @property
    def left(self) -> float:
        return min(self.start_x, self.end_x)

    @property
    def top(self) -> float:
        return min(self.start_y, self.end_y)

    @property
    def width(self) -> float:
        return abs(self.end_x - self.start_x)

    @property
    def height(self) -> float:
        return abs(self.end_y - self.start_y)

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.left + self.width and self.top <= y <= self.top + self.height


class InteractionController:
    """Pointer/keyboard front end for one ``EditorSession`` drawn inside ``rect``."""

    def __init__(self, session: EditorSession, rect: ContainerRect | None = None) -> None:
        self.session = session
        self.rect = rect or ContainerRect()
        self.config = session.config

        self.drag_mode = DragMode.NONE
        self.space_held = False

        # Marquee preview
        self.marquee: Marquee | None = None
        self.preview_ids: frozenset[str] = frozenset()
        self._marquee_base: frozenset[str] = frozenset()

        # Hover feedback
        self.hover_inside_shape = False
        self.hover_on_path = False
        self.cursor_position: tuple[float, float] | None = None

        self._last_pos: tuple[float, float] | None = None
        self._pan_anchor: tuple[float, float] = (0.0, 0.0)
        self._drag_handle: HandleFocus | None = None

    # ------------------------------------------------------------------
    # Coordinate helpers
    # ------------------------------------------------------------------

    def set_rect(self, rect: ContainerRect) -> None:
        self.rect = rect

    def _image_pos(self, x: float, y: float) -> tuple[float, float] | None:
        image = self.session.image
        return self.session.viewport.screen_to_image_percent(x, y, self.rect, image.width, image.height)

    def _to_pixels(self, pos: tuple[float, float]) -> tuple[float, float]:
        image = self.session.image
        return (pos[0] / 100.0 * image.width, pos[1] / 100.0 * image.height)

    def _to_screen(self, x: float, y: float) -> tuple[float, float]:
        image = self.session.image
        return self.session.viewport.image_percent_to_screen(x, y, self.rect, image.width, image.height)

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------

    def handles_visible(self) -> bool:
        """Handles are drawn only for a single selected point on a path of 2+ points."""
        state = self.session.state
        return len(state.points) > 1 and len(state.selected_ids) == 1

    def hit_handle(self, x: float, y: float) -> HandleFocus | None:
        if not self.handles_visible():
            return None
        state = self.session.state
        radius = self.config.handle_hit_radius
        for p in state.selected_points:
            for kind in (HandleKind.IN, HandleKind.OUT):
                cx, cy = p.control_in() if kind is HandleKind.IN else p.control_out()
                sx, sy = self._to_screen(cx, cy)
                if math.hypot(sx - x, sy - y) <= radius:
                    return HandleFocus(point_id=p.id, kind=kind)
        return None

    def hit_point(self, x: float, y: float) -> Point | None:
        """Topmost point whose hit circle contains the screen position."""
        radius = self.config.point_hit_radius
        for p in reversed(self.session.points):
            sx, sy = self._to_screen(p.x, p.y)
            if math.hypot(sx - x, sy - y) <= radius:
                return p
        return None

    def _inside_shape(self, pos: tuple[float, float]) -> bool:
        image = self.session.image
        px, py = self._to_pixels(pos)
        return point_in_closed_path(px, py, self.session.points, image.width, image.height, self.session.closed)

    def _segment_threshold(self) -> float:
        """Click tolerance in image pixels; constant on screen regardless of zoom."""
        return self.config.segment_hit_threshold / self.session.viewport.scale

    def _hit_segment(self, pos: tuple[float, float]) -> SegmentHit | None:
        image = self.session.image
        px, py = self._to_pixels(pos)
        return find_hit_segment(
            px,
            py,
            self.session.points,
            image.width,
            image.height,
            self.session.closed,
            self._segment_threshold(),
        )

    @property
    def can_close(self) -> bool:
        """The add tool closes the shape when its first point is pressed."""
        return (
            self.session.tool is Tool.ADD
            and not self.session.closed
            and len(self.session.points) >= 3
        )

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, ev: PointerEvent) -> None:
        session = self.session

        if ev.button == MouseButton.MIDDLE or self.space_held or session.tool is Tool.PAN:
            self._begin_pan(ev)
            return
        if ev.button != MouseButton.LEFT or not session.image.loaded:
            return

        pos = self._image_pos(ev.x, ev.y)
        if pos is None:
            return

        handle = self.hit_handle(ev.x, ev.y)
        if handle is not None:
            session.select_point(handle.point_id, handle.kind)
            session.start_drag()
            self._drag_handle = handle
            self.drag_mode = DragMode.HANDLE
            return

        point = self.hit_point(ev.x, ev.y)
        if point is not None:
            if self.can_close and point.id == session.points[0].id:
                logger.debug("Closing shape from first point")
                session.close_shape()
                return
            if ev.shift:
                session.select_point(point.id, add_to_selection=True)
            elif point.id not in session.state.selected_ids:
                session.select_point(point.id)
            session.start_drag()
            self._last_pos = pos
            self.drag_mode = DragMode.POINT
            return

        if session.tool is Tool.SELECT:
            if self._inside_shape(pos):
                session.select_point(None)
                session.start_drag()
                self._last_pos = pos
                self.drag_mode = DragMode.SHAPE
                return
            self._marquee_base = session.state.selected_ids if ev.shift else frozenset()
            self.marquee = Marquee(ev.x, ev.y, ev.x, ev.y)
            self.preview_ids = frozenset()
            self.drag_mode = DragMode.MARQUEE
            return

        if session.tool is Tool.ADD:
            self._add_click(pos)

    def _begin_pan(self, ev: PointerEvent) -> None:
        vp = self.session.viewport
        self._pan_anchor = (ev.x - vp.pan_x, ev.y - vp.pan_y)
        self.drag_mode = DragMode.PAN

    def _add_click(self, pos: tuple[float, float]) -> None:
        x, y = pos
        if not (0.0 <= x <= 100.0 and 0.0 <= y <= 100.0):
            return
        hit = self._hit_segment(pos)
        if hit is not None:
            logger.debug("Splitting segment %d at t=%.2f", hit.segment_index, hit.t)
            self.session.split_segment(hit.segment_index, hit.t)
            return
        if not self.session.closed:
            self.session.add_point(x, y)

    def pointer_move(self, ev: PointerEvent) -> None:
        session = self.session
        mode = self.drag_mode

        if mode is DragMode.PAN:
            ax, ay = self._pan_anchor
            session.set_viewport(session.viewport.panned_to(ev.x - ax, ev.y - ay))
            return

        pos = self._image_pos(ev.x, ev.y)
        image = session.image
        self.cursor_position = session.viewport.locate(ev.x, ev.y, self.rect, image.width, image.height)
        if pos is None:
            return

        if mode is DragMode.POINT or mode is DragMode.SHAPE:
            lx, ly = self._last_pos or pos
            dx, dy = pos[0] - lx, pos[1] - ly
            self._last_pos = pos
            if mode is DragMode.POINT:
                session.move_selected_points(dx, dy)
            else:
                session.move_all_points(dx, dy)
        elif mode is DragMode.HANDLE:
            focus = self._drag_handle
            point = session.state.get_point(focus.point_id) if focus is not None else None
            if point is not None:
                session.move_handle(point.id, focus.kind, pos[0] - point.x, pos[1] - point.y, ev.alt)
        elif mode is DragMode.MARQUEE:
            m = self.marquee
            self.marquee = Marquee(m.start_x, m.start_y, ev.x, ev.y)
            self.preview_ids = self._marquee_hits(self.marquee)
        else:
            self._update_hover(pos)

    def pointer_up(self, ev: PointerEvent | None = None) -> None:
        session = self.session
        mode = self.drag_mode

        if mode in (DragMode.POINT, DragMode.HANDLE, DragMode.SHAPE):
            session.end_drag()
        elif mode is DragMode.MARQUEE:
            self._finish_marquee(ev)

        self.drag_mode = DragMode.NONE
        self._last_pos = None
        self._drag_handle = None

    def cancel(self) -> None:
        """Pointer left the canvas: end the gesture as a release."""
        self.pointer_up(None)

    def _marquee_hits(self, marquee: Marquee) -> frozenset[str]:
        hits = set()
        for p in self.session.points:
            sx, sy = self._to_screen(p.x, p.y)
            if marquee.contains(sx, sy):
                hits.add(p.id)
        return frozenset(hits)

    def _finish_marquee(self, ev: PointerEvent | None) -> None:
        m = self.marquee
        if m is not None and ev is not None:
            m = Marquee(m.start_x, m.start_y, ev.x, ev.y)
        min_size = self.config.marquee_min_size
        if m is not None and (m.width > min_size or m.height > min_size):
            self.session.set_selected_ids(self._marquee_base | self._marquee_hits(m))
        elif not self._marquee_base:
            self.session.select_point(None)
        self.marquee = None
        self.preview_ids = frozenset()
        self._marquee_base = frozenset()

    def _update_hover(self, pos: tuple[float, float]) -> None:
        tool = self.session.tool
        self.hover_inside_shape = tool is Tool.SELECT and self._inside_shape(pos)
        self.hover_on_path = tool is Tool.ADD and self._hit_segment(pos) is not None

    # ------------------------------------------------------------------
    # Wheel / keyboard
    # ------------------------------------------------------------------

    def wheel(self, ev: WheelEvent) -> None:
        """Zoom toward the cursor."""
        factor = self.config.wheel_zoom_out if ev.delta_y > 0 else self.config.wheel_zoom_in
        cx, cy = self.rect.center
        self.session.zoom_to_cursor(ev.x - cx, ev.y - cy, factor)

    def key_down(self, ev: KeyEvent) -> bool:
        """Dispatch an editor shortcut. Returns True if the key was handled."""
        session = self.session
        key = ev.key
        modifier = ev.ctrl or ev.meta
        # History and structural edits wait until the gesture is released
        editing = self.drag_mode is DragMode.NONE

        if ev.code == "Space" or key == " ":
            if not ev.repeat:
                self.space_held = True
            return True
        if modifier and key.lower() == "z":
            if not editing:
                return False
            if ev.shift:
                session.redo()
            else:
                session.undo()
            return True
        if modifier:
            return False

        lowered = key.lower()
        if not editing and (lowered in ("v", "p", "h", "r") or key in ("Delete", "Backspace")):
            return False
        if lowered == "v":
            session.set_tool(Tool.SELECT)
        elif lowered == "p":
            session.set_tool(Tool.ADD)
        elif lowered == "h":
            session.set_tool(Tool.PAN)
        elif lowered == "r" and session.state.selected_ids:
            session.toggle_handle_mirror()
        elif key in ("=", "+"):
            session.zoom_in()
        elif key == "-":
            session.zoom_out()
        elif key == "0":
            session.fit_to_view(self.rect.width, self.rect.height)
        elif key in ("Delete", "Backspace") and session.state.selected_ids:
            session.delete_selected_points()
        elif key == "Escape":
            session.select_point(None)
        else:
            return False
        return True

    def key_up(self, ev: KeyEvent) -> None:
        if ev.code == "Space" or ev.key == " ":
            self.space_held = False

    # ------------------------------------------------------------------
    # Affordance
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> Cursor:
        mode = self.drag_mode
        if mode is DragMode.PAN:
            return Cursor.GRABBING
        if self.space_held or self.session.tool is Tool.PAN:
            return Cursor.GRAB
        if mode in (DragMode.POINT, DragMode.HANDLE, DragMode.SHAPE):
            return Cursor.MOVE
        if self.session.tool is Tool.SELECT and self.hover_inside_shape:
            return Cursor.MOVE
        if self.session.tool is Tool.ADD:
            return Cursor.COPY if self.hover_on_path else Cursor.CROSSHAIR
        return Cursor.DEFAULT
