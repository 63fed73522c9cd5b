"""Selection & mutation engine.

Every operation is a pure function ``(state, ...) -> state``. Returning the
same object means nothing changed; callers rely on that identity to skip
notifications. Unknown point ids are silently ignored.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import replace

from clipeditor.engine.config import EditorConfig
from clipeditor.engine.state import EditorState
from clipeditor.models.path import HandleFocus, HandleKind, Point, Vec2
from clipeditor.utils.geometry import split_cubic_bezier

logger = logging.getLogger(__name__)

_DEFAULTS = EditorConfig()

MIN_CLOSED_POINTS = 3


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def _moved(p: Point, x: float, y: float) -> Point:
    return p.model_copy(update={"x": _clamp(x), "y": _clamp(y)})


def _replace_point(state: EditorState, index: int, point: Point) -> tuple[Point, ...]:
    pts = list(state.points)
    pts[index] = point
    return tuple(pts)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


def add_point(state: EditorState, x: float, y: float, config: EditorConfig = _DEFAULTS) -> EditorState:
    """Append a point, aiming its handles (and the previous point's handle_out) along the stroke."""
    length = config.handle_length
    handle_in = Vec2(x=-length, y=0.0)
    handle_out = Vec2(x=length, y=0.0)
    pts = list(state.points)

    if pts:
        prev = pts[-1]
        dx = x - prev.x
        dy = y - prev.y
        dist = math.hypot(dx, dy)
        if dist > config.min_direction_distance:
            nx = dx / dist * length
            ny = dy / dist * length
            handle_in = Vec2(x=-nx, y=-ny)
            handle_out = Vec2(x=nx, y=ny)
            pts[-1] = prev.model_copy(update={"handle_out": Vec2(x=nx, y=ny)})

    new_point = Point(x=x, y=y, handle_in=handle_in, handle_out=handle_out, is_mirrored=True)
    pts.append(new_point)
    logger.debug("add_point %s at (%.2f, %.2f)", new_point.id, x, y)
    return replace(
        state,
        points=tuple(pts),
        selected_ids=frozenset({new_point.id}),
        selected_handle=None,
    )


def insert_point(
    state: EditorState,
    index: int,
    x: float,
    y: float,
    handle_in: Vec2,
    handle_out: Vec2,
    prev_handle_out: Vec2,
    next_handle_in: Vec2,
) -> EditorState:
    """Splice a new point after ``index``, rewriting the neighbouring handles.

    The neighbours lose their mirror flag since a split breaks symmetry.
    """
    n = len(state.points)
    if n == 0 or not 0 <= index < n:
        return state

    pts = list(state.points)
    next_index = (index + 1) % n
    pts[index] = pts[index].model_copy(update={"handle_out": prev_handle_out, "is_mirrored": False})
    pts[next_index] = pts[next_index].model_copy(update={"handle_in": next_handle_in, "is_mirrored": False})

    new_point = Point(x=x, y=y, handle_in=handle_in, handle_out=handle_out, is_mirrored=False)
    pts.insert(index + 1, new_point)
    logger.debug("insert_point %s after index %d", new_point.id, index)
    return replace(
        state,
        points=tuple(pts),
        selected_ids=frozenset({new_point.id}),
        selected_handle=None,
    )


def split_segment(state: EditorState, segment_index: int, t: float) -> EditorState:
    """Insert a point on segment ``segment_index`` at parameter t, preserving the curve shape."""
    n = len(state.points)
    if n < 2 or not 0 <= segment_index < n:
        return state
    if segment_index == n - 1 and not state.closed:
        return state

    a = state.points[segment_index]
    b = state.points[(segment_index + 1) % n]
    # Affine invariance: splitting in percent space equals splitting in pixels
    left, right = split_cubic_bezier(a.position(), a.control_out(), b.control_in(), b.position(), t)
    mx, my = left.p3

    return insert_point(
        state,
        segment_index,
        mx,
        my,
        handle_in=Vec2(x=left.p2[0] - mx, y=left.p2[1] - my),
        handle_out=Vec2(x=right.p1[0] - mx, y=right.p1[1] - my),
        prev_handle_out=Vec2(x=left.p1[0] - a.x, y=left.p1[1] - a.y),
        next_handle_in=Vec2(x=right.p2[0] - b.x, y=right.p2[1] - b.y),
    )


def set_points(state: EditorState, points: Sequence[Point], closed: bool) -> EditorState:
    """Replace the whole path (project load). Selection is cleared."""
    pts = tuple(points)
    return EditorState(points=pts, closed=closed and len(pts) >= MIN_CLOSED_POINTS)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def select_point(
    state: EditorState,
    point_id: str | None,
    handle: HandleKind | None = None,
    add_to_selection: bool = False,
) -> EditorState:
    """Select a point. None clears; add_to_selection toggles membership (shift-click)."""
    if point_id is None:
        if not state.selected_ids and state.selected_handle is None:
            return state
        return replace(state, selected_ids=frozenset(), selected_handle=None)

    if state.index_of(point_id) < 0:
        return state

    if add_to_selection:
        if point_id in state.selected_ids:
            ids = state.selected_ids - {point_id}
        else:
            ids = state.selected_ids | {point_id}
    else:
        ids = frozenset({point_id})

    focus = HandleFocus(point_id=point_id, kind=handle) if handle is not None and point_id in ids else None
    return replace(state, selected_ids=ids, selected_handle=focus)


def set_selected_ids(state: EditorState, ids: Iterable[str]) -> EditorState:
    """Bulk-replace the selection (marquee result). Clears handle focus."""
    known = {p.id for p in state.points}
    return replace(state, selected_ids=frozenset(i for i in ids if i in known), selected_handle=None)


# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------


def move_point(state: EditorState, point_id: str, x: float, y: float) -> EditorState:
    i = state.index_of(point_id)
    if i < 0:
        return state
    return replace(state, points=_replace_point(state, i, _moved(state.points[i], x, y)))


def move_selected_points(state: EditorState, dx: float, dy: float) -> EditorState:
    """Apply the same delta to every selected point (group drag)."""
    if not state.selected_ids:
        return state
    pts = tuple(
        _moved(p, p.x + dx, p.y + dy) if p.id in state.selected_ids else p for p in state.points
    )
    return replace(state, points=pts)


def move_all_points(state: EditorState, dx: float, dy: float) -> EditorState:
    """Apply the delta to every point regardless of selection (whole-shape drag)."""
    if not state.points:
        return state
    return replace(state, points=tuple(_moved(p, p.x + dx, p.y + dy) for p in state.points))


def move_handle(
    state: EditorState,
    point_id: str,
    kind: HandleKind,
    x: float,
    y: float,
    break_mirror: bool = False,
) -> EditorState:
    """Set a handle (relative to its vertex).

    A mirrored point keeps its opposite handle at (-x, -y) unless break_mirror,
    which drops the mirror flag and leaves the opposite handle alone.
    """
    i = state.index_of(point_id)
    if i < 0:
        return state

    p = state.points[i]
    value = Vec2(x=x, y=y)
    updated = p.with_handle(kind, value)
    if p.is_mirrored and not break_mirror:
        updated = updated.with_handle(kind.opposite, -value)
    elif break_mirror:
        updated = updated.model_copy(update={"is_mirrored": False})
    return replace(state, points=_replace_point(state, i, updated))


# ---------------------------------------------------------------------------
# Deletion
# ---------------------------------------------------------------------------


def delete_selected_points(state: EditorState) -> EditorState:
    """Remove every selected point. A shape left with fewer than 3 points is reopened."""
    if not state.selected_ids:
        return state
    pts = tuple(p for p in state.points if p.id not in state.selected_ids)
    logger.debug("delete_selected_points removed %d", len(state.points) - len(pts))
    return EditorState(
        points=pts,
        closed=state.closed if len(pts) >= MIN_CLOSED_POINTS else False,
    )


def delete_point(state: EditorState, point_id: str) -> EditorState:
    """Remove a single point by id, purging it from the selection."""
    if state.index_of(point_id) < 0:
        return state
    pts = tuple(p for p in state.points if p.id != point_id)
    focus = state.selected_handle
    if focus is not None and focus.point_id == point_id:
        focus = None
    return EditorState(
        points=pts,
        selected_ids=state.selected_ids - {point_id},
        selected_handle=focus,
        closed=state.closed if len(pts) >= MIN_CLOSED_POINTS else False,
    )


# ---------------------------------------------------------------------------
# Handle mirroring
# ---------------------------------------------------------------------------


def _locked(p: Point, config: EditorConfig) -> Point:
    """Symmetric handles: average length along the existing handle_out direction."""
    avg = (p.handle_in.length() + p.handle_out.length()) / 2.0
    dir_len = p.handle_out.length()
    if dir_len > config.degenerate_handle_length:
        dx = p.handle_out.x / dir_len * avg
        dy = p.handle_out.y / dir_len * avg
    else:
        dx = avg if avg > 0 else config.handle_length
        dy = 0.0
    return p.model_copy(
        update={
            "handle_in": Vec2(x=-dx, y=-dy),
            "handle_out": Vec2(x=dx, y=dy),
            "is_mirrored": True,
        }
    )


def toggle_handle_mirror(state: EditorState, config: EditorConfig = _DEFAULTS) -> EditorState:
    """Lock the selection's handles if any point is unmirrored, otherwise unlock them all."""
    selected = state.selected_points
    if not selected:
        return state

    lock = any(not p.is_mirrored for p in selected)
    pts = []
    for p in state.points:
        if p.id not in state.selected_ids:
            pts.append(p)
        elif lock:
            pts.append(_locked(p, config))
        else:
            pts.append(p.model_copy(update={"is_mirrored": False}))
    logger.debug("toggle_handle_mirror %s %d points", "lock" if lock else "unlock", len(selected))
    return replace(state, points=tuple(pts))


def selection_mirror_state(state: EditorState) -> bool | None:
    """True if every selected point is mirrored, False if none are, None if mixed or empty."""
    selected = state.selected_points
    if not selected:
        return None
    if all(p.is_mirrored for p in selected):
        return True
    if not any(p.is_mirrored for p in selected):
        return False
    return None


# ---------------------------------------------------------------------------
# Open / closed
# ---------------------------------------------------------------------------


def close_shape(state: EditorState) -> EditorState:
    """Close the loop and return focus to the whole shape."""
    if len(state.points) < MIN_CLOSED_POINTS:
        return state
    return replace(state, closed=True, selected_ids=frozenset(), selected_handle=None)


def open_shape(state: EditorState) -> EditorState:
    if not state.closed:
        return state
    return replace(state, closed=False)


def set_closed(state: EditorState, closed: bool) -> EditorState:
    if closed and len(state.points) < MIN_CLOSED_POINTS:
        return state
    if state.closed == closed:
        return state
    return replace(state, closed=closed)
