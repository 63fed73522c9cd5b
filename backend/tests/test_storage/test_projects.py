"""Tests for the JSON-file project store."""

from __future__ import annotations

import json

from clipeditor.models.path import Point, Vec2
from clipeditor.storage.projects import STORAGE_KEY, ProjectStore


def _points() -> list[Point]:
    return [
        Point(id="a", x=12.5, y=20, handle_in=Vec2(x=-3, y=1), handle_out=Vec2(x=3, y=-1)),
        Point(id="b", x=80, y=20.25, is_mirrored=False),
        Point(id="c", x=50, y=80),
    ]


class TestSaveLoad:
    def test_round_trip_is_exact(self, store):
        pid = store.save("Portrait", "data:image/png;base64,AAAA", 640, 480, _points(), True)
        project = store.load(pid)
        assert project is not None
        assert project.name == "Portrait"
        assert project.points == _points()
        assert project.is_closed
        assert project.image_width == 640
        assert project.created_at == project.updated_at

    def test_file_uses_camel_case(self, store):
        store.save("p", "ref", 10, 10, _points(), False)
        raw = json.loads(store.path.read_text(encoding="utf-8"))
        record = raw[STORAGE_KEY][0]
        assert "imageDataUrl" in record
        assert "handleIn" in record["points"][0]
        assert "isMirrored" in record["points"][0]

    def test_new_projects_first(self, store):
        first = store.save("one", "ref", 10, 10, [], False)
        second = store.save("two", "ref", 10, 10, [], False)
        assert [s.id for s in store.list()] == [second, first]

    def test_update_keeps_created_at(self, store):
        pid = store.save("one", "ref", 10, 10, [], False)
        created = store.load(pid).created_at
        other = store.save("two", "ref", 10, 10, [], False)
        same = store.save("renamed", "ref2", 20, 20, _points(), True, existing_id=pid)
        assert same == pid
        project = store.load(pid)
        assert project.name == "renamed"
        assert project.created_at == created
        assert project.updated_at >= created
        assert len(project.points) == 3
        # Updates do not reorder
        assert [s.id for s in store.list()] == [other, pid]

    def test_load_unknown(self, store):
        assert store.load("missing") is None


class TestListDelete:
    def test_summary(self, store):
        store.save("one", "ref", 64, 32, _points(), True)
        (summary,) = store.list()
        assert summary.point_count == 3
        assert summary.is_closed
        assert summary.image_width == 64

    def test_delete(self, store):
        pid = store.save("one", "ref", 10, 10, [], False)
        assert store.delete(pid)
        assert store.list() == []
        assert not store.delete(pid)


class TestFailures:
    def test_missing_file_reads_empty(self, tmp_path):
        assert ProjectStore(tmp_path / "nope" / "projects.json").list() == []

    def test_corrupt_file_reads_empty(self, store):
        store.path.write_text("{not json", encoding="utf-8")
        assert store.list() == []
        assert store.load("x") is None

    def test_corrupt_file_recovers_on_save(self, store):
        store.path.write_text("[1, 2", encoding="utf-8")
        pid = store.save("fresh", "ref", 10, 10, [], False)
        assert [s.id for s in store.list()] == [pid]

    def test_invalid_records_are_skipped(self, store):
        good = store.save("good", "ref", 10, 10, [], False)
        raw = json.loads(store.path.read_text(encoding="utf-8"))
        raw[STORAGE_KEY].append({"id": "bad", "name": "bad"})
        store.path.write_text(json.dumps(raw), encoding="utf-8")
        assert [s.id for s in store.list()] == [good]

    def test_unexpected_shape(self, store):
        store.path.write_text(json.dumps({STORAGE_KEY: "oops"}), encoding="utf-8")
        assert store.list() == []

    def test_creates_parent_directory(self, tmp_path):
        store = ProjectStore(tmp_path / "deep" / "dir" / "projects.json")
        pid = store.save("p", "ref", 10, 10, [], False)
        assert store.load(pid) is not None
