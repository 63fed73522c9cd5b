"""Tests for the undo/redo history manager."""

from __future__ import annotations

from clipeditor.engine.history import EditOrigin, History
from clipeditor.models.path import PathSnapshot, Point


def _snap(*xs: float, closed: bool = False) -> PathSnapshot:
    return PathSnapshot(points=tuple(Point(id=f"p{i}", x=x, y=0) for i, x in enumerate(xs)), closed=closed)


class TestRecord:
    def test_distinct_edits_push(self):
        h = History(_snap())
        assert h.record(_snap(1))
        assert h.record(_snap(1, 2))
        assert h.depth == 2
        assert h.can_undo
        assert not h.can_redo

    def test_equal_snapshot_is_ignored(self):
        h = History(_snap(1))
        assert not h.record(_snap(1))
        assert h.depth == 0

    def test_replay_origin_is_ignored(self):
        h = History(_snap())
        assert not h.record(_snap(1), EditOrigin.HISTORY_REPLAY)
        assert h.present == _snap()

    def test_closed_flag_is_part_of_the_state(self):
        h = History(_snap(1, 2, 3))
        assert h.record(_snap(1, 2, 3, closed=True))

    def test_limit(self):
        h = History(_snap(), limit=5)
        for i in range(1, 10):
            h.record(_snap(i))
        assert h.depth == 5
        assert h.past[0] == _snap(4)


class TestUndoRedo:
    def test_n_edits_n_undos_restore_initial(self):
        h = History(_snap())
        for i in range(1, 5):
            h.record(_snap(*range(i)))
        for _ in range(4):
            assert h.undo() is not None
        assert h.present == _snap()
        assert h.undo() is None

    def test_undo_then_redo(self):
        h = History(_snap())
        h.record(_snap(1))
        h.record(_snap(1, 2))
        assert h.undo() == _snap(1)
        assert h.redo() == _snap(1, 2)
        assert h.present == _snap(1, 2)
        assert h.redo() is None

    def test_new_edit_clears_future(self):
        h = History(_snap())
        h.record(_snap(1))
        h.undo()
        assert h.can_redo
        h.record(_snap(7))
        assert not h.can_redo

    def test_reset(self):
        h = History(_snap())
        h.record(_snap(1))
        h.reset(_snap(9))
        assert not h.can_undo
        assert not h.can_redo
        assert h.present == _snap(9)


class TestDrag:
    def test_gesture_is_one_entry(self):
        h = History(_snap(0))
        h.start_drag(_snap(0))
        for x in range(1, 6):
            assert not h.record(_snap(x))
        assert h.end_drag(_snap(5))
        assert h.depth == 1
        assert h.undo() == _snap(0)

    def test_unchanged_gesture_adds_nothing(self):
        h = History(_snap(0))
        h.start_drag(_snap(0))
        assert not h.end_drag(_snap(0))
        assert h.depth == 0
        assert not h.is_dragging

    def test_end_without_start_is_noop(self):
        h = History(_snap(0))
        assert not h.end_drag(_snap(3))
        assert h.depth == 0

    def test_undo_redo_refused_mid_gesture(self):
        h = History(_snap(0))
        h.record(_snap(1))
        h.record(_snap(2))
        assert h.undo() == _snap(1)
        h.start_drag(_snap(1))
        h.record(_snap(7))
        assert h.undo() is None
        assert h.redo() is None
        assert h.end_drag(_snap(7))
        assert h.depth == 2
        assert not h.can_redo
        assert h.undo() == _snap(1)
