"""Clip-path editor engine: path state, mutations, history, viewport and interaction."""

from clipeditor.engine.config import EditorConfig
from clipeditor.engine.state import EditorState
from clipeditor.engine.history import EditOrigin, History
from clipeditor.engine.viewport import ContainerRect, Viewport
from clipeditor.engine.session import EditorSession, ImageInfo, Tool
from clipeditor.engine.interaction import (
    DragMode,
    InteractionController,
    KeyEvent,
    PointerEvent,
    WheelEvent,
)

__all__ = [
    "EditorConfig",
    "EditorState",
    "EditOrigin",
    "History",
    "ContainerRect",
    "Viewport",
    "EditorSession",
    "ImageInfo",
    "Tool",
    "DragMode",
    "InteractionController",
    "KeyEvent",
    "PointerEvent",
    "WheelEvent",
]
