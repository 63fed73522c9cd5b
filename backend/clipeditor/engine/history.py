"""Undo/redo history over (points, closed) snapshots.

Two regimes feed the timeline:

- implicit: every committed user edit is compared to ``present`` and pushed
  when different;
- drag bracketing: ``start_drag``/``end_drag`` collapse a whole gesture into
  one entry holding the gesture's start state.

Changes replayed from undo/redo are tagged ``EditOrigin.HISTORY_REPLAY`` so
they are never re-recorded.
"""

from __future__ import annotations

import enum
import logging

from clipeditor.models.path import PathSnapshot

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


class EditOrigin(enum.Enum):
    USER_EDIT = "user_edit"
    HISTORY_REPLAY = "history_replay"


class History:
    """Linear undo stack: past (oldest -> newest), present, future (next -> ...)."""

    def __init__(self, initial: PathSnapshot | None = None, limit: int = DEFAULT_LIMIT) -> None:
        self.limit = limit
        self.past: list[PathSnapshot] = []
        self.present: PathSnapshot = initial or PathSnapshot()
        self.future: list[PathSnapshot] = []
        self._drag_start: PathSnapshot | None = None

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    @property
    def is_dragging(self) -> bool:
        return self._drag_start is not None

    @property
    def depth(self) -> int:
        return len(self.past)

    def reset(self, snapshot: PathSnapshot) -> None:
        """Start a fresh timeline at ``snapshot`` (new image or loaded project)."""
        self.past.clear()
        self.future.clear()
        self.present = snapshot
        self._drag_start = None

    def _push(self, previous: PathSnapshot, current: PathSnapshot) -> None:
        self.past.append(previous)
        if len(self.past) > self.limit:
            del self.past[: len(self.past) - self.limit]
        self.present = current
        self.future.clear()
        logger.debug("History push (depth=%d)", len(self.past))

    def record(self, snapshot: PathSnapshot, origin: EditOrigin = EditOrigin.USER_EDIT) -> bool:
        """Observe a committed state. Returns True if a new entry was pushed."""
        if origin is EditOrigin.HISTORY_REPLAY or self.is_dragging:
            return False
        if snapshot == self.present:
            return False
        self._push(self.present, snapshot)
        return True

    def start_drag(self, snapshot: PathSnapshot) -> None:
        self._drag_start = snapshot

    def end_drag(self, snapshot: PathSnapshot) -> bool:
        """Close a gesture. One entry (the start state) if anything changed, none otherwise."""
        start = self._drag_start
        self._drag_start = None
        if start is None or start == snapshot:
            return False
        self._push(start, snapshot)
        return True

    def undo(self) -> PathSnapshot | None:
        """Step back. Returns the snapshot the model must adopt, or None if nothing to undo or a drag is open."""
        if self.is_dragging or not self.past:
            return None
        previous = self.past.pop()
        self.future.insert(0, self.present)
        self.present = previous
        logger.debug("Undo (past=%d, future=%d)", len(self.past), len(self.future))
        return previous

    def redo(self) -> PathSnapshot | None:
        """Step forward. Returns the snapshot to adopt, or None if nothing to redo or a drag is open."""
        if self.is_dragging or not self.future:
            return None
        following = self.future.pop(0)
        self.past.append(self.present)
        self.present = following
        logger.debug("Redo (past=%d, future=%d)", len(self.past), len(self.future))
        return following
