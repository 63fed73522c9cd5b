"""Project store — a JSON file holding every saved project, newest first.

Read failures (missing file, corrupt JSON, invalid records) are logged and
read as "no projects"; write failures are logged and the operation still
reports its result.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from clipeditor.models.path import Point
from clipeditor.models.project import Project, ProjectSummary

logger = logging.getLogger(__name__)

STORAGE_KEY = "clip-path-editor-projects"


def _now_ms() -> int:
    return int(time.time() * 1000)


class ProjectStore:
    """File-backed project store. Safe to share between request threads."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Raw file access
    # ------------------------------------------------------------------

    def _read(self) -> list[Project]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read project store %s: %s", self.path, e)
            return []

        records = raw.get(STORAGE_KEY, []) if isinstance(raw, dict) else raw
        if not isinstance(records, list):
            logger.warning("Project store %s has unexpected shape", self.path)
            return []

        projects: list[Project] = []
        for record in records:
            try:
                projects.append(Project.model_validate(record))
            except ValidationError as e:
                logger.warning("Skipping invalid project record: %s", e)
        return projects

    def _write(self, projects: list[Project]) -> bool:
        payload = {STORAGE_KEY: [p.model_dump(by_alias=True) for p in projects]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write project store %s: %s", self.path, e)
            return False
        return True

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def save(
        self,
        name: str,
        image_ref: str,
        width: float,
        height: float,
        points: Sequence[Point],
        closed: bool,
        existing_id: str | None = None,
    ) -> str:
        """Create or overwrite a project. Returns its id.

        An unknown ``existing_id`` is treated as a new project saved under that id.
        """
        with self._lock:
            projects = self._read()
            now = _now_ms()

            index = next((i for i, p in enumerate(projects) if p.id == existing_id), -1)
            if index >= 0:
                current = projects[index]
                projects[index] = current.model_copy(
                    update={
                        "name": name,
                        "image_data_url": image_ref,
                        "image_width": width,
                        "image_height": height,
                        "points": list(points),
                        "is_closed": closed,
                        "updated_at": now,
                    }
                )
                project_id = current.id
            else:
                fields = dict(
                    name=name,
                    image_data_url=image_ref,
                    image_width=width,
                    image_height=height,
                    points=list(points),
                    is_closed=closed,
                    created_at=now,
                    updated_at=now,
                )
                project = Project(id=existing_id, **fields) if existing_id else Project(**fields)
                projects.insert(0, project)
                project_id = project.id

            self._write(projects)
        logger.info("Saved project %s (%d points)", project_id, len(points))
        return project_id

    def load(self, project_id: str) -> Project | None:
        with self._lock:
            projects = self._read()
        return next((p for p in projects if p.id == project_id), None)

    def delete(self, project_id: str) -> bool:
        """Remove a project. Returns False if no project had that id."""
        with self._lock:
            projects = self._read()
            remaining = [p for p in projects if p.id != project_id]
            if len(remaining) == len(projects):
                return False
            self._write(remaining)
        logger.info("Deleted project %s", project_id)
        return True

    def list(self) -> list[ProjectSummary]:
        with self._lock:
            projects = self._read()
        return [ProjectSummary.of(p) for p in projects]
