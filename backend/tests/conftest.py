"""Shared test fixtures."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from clipeditor.dependencies import get_project_store
from clipeditor.engine.config import EditorConfig
from clipeditor.engine.interaction import InteractionController
from clipeditor.engine.session import EditorSession
from clipeditor.engine.viewport import ContainerRect
from clipeditor.main import app
from clipeditor.models.path import Point, Vec2
from clipeditor.storage.projects import ProjectStore


# A 100x100 image in a 100x100 container at identity transform: screen pixels,
# image pixels and image percentages all coincide.
IMAGE_SIZE = 100.0

TRIANGLE = [(20.0, 20.0), (80.0, 20.0), (50.0, 80.0)]

DIAGONAL = [(10.0, 10.0), (50.0, 50.0), (90.0, 90.0)]


def _straight(coords: list[tuple[float, float]]) -> list[Point]:
    """Points with zero-length handles, so every segment is a straight line."""
    return [
        Point(id=f"p{i}", x=x, y=y, handle_in=Vec2(), handle_out=Vec2(), is_mirrored=False)
        for i, (x, y) in enumerate(coords)
    ]


@pytest.fixture
def config() -> EditorConfig:
    return EditorConfig()


@pytest.fixture
def rect() -> ContainerRect:
    return ContainerRect(left=0.0, top=0.0, width=IMAGE_SIZE, height=IMAGE_SIZE)


@pytest.fixture
def triangle_points() -> list[Point]:
    return _straight(TRIANGLE)


@pytest.fixture
def diagonal_points() -> list[Point]:
    return _straight(DIAGONAL)


@pytest.fixture
def session() -> EditorSession:
    s = EditorSession()
    s.load_image("data:image/png;base64,AAAA", IMAGE_SIZE, IMAGE_SIZE)
    return s


@pytest.fixture
def triangle_session(session: EditorSession, triangle_points: list[Point]) -> EditorSession:
    session.load_project("data:image/png;base64,AAAA", IMAGE_SIZE, IMAGE_SIZE, triangle_points, closed=True)
    return session


@pytest.fixture
def controller(session: EditorSession, rect: ContainerRect) -> InteractionController:
    return InteractionController(session, rect)


@pytest.fixture
def store(tmp_path) -> ProjectStore:
    return ProjectStore(tmp_path / "projects.json")


@pytest.fixture
def client(store: ProjectStore):
    app.dependency_overrides[get_project_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
