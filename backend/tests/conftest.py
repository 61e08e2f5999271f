"""Shared test fixtures."""

from __future__ import annotations

import pytest

from shapenest.engine.config import EditorConfig
from shapenest.engine.editor import EditorSession
from shapenest.engine.primitives import Point, Transform
from shapenest.engine.shapes import ShapeKind
from shapenest.engine.tree import ShapeNode, ShapeTree

# 640x480 canvas centred at (320, 240), as in the default settings
CANVAS_W = 640.0
CANVAS_H = 480.0


def at(x: float = 0.0, y: float = 0.0, rotation: float = 0.0, sx: float = 1.0, sy: float = 1.0) -> Transform:
    return Transform(Point(x, y), rotation, Point(sx, sy))


@pytest.fixture
def config() -> EditorConfig:
    return EditorConfig(canvas_width=CANVAS_W, canvas_height=CANVAS_H)


@pytest.fixture
def tree(config: EditorConfig) -> ShapeTree:
    return ShapeTree(config)


@pytest.fixture
def session(config: EditorConfig) -> EditorSession:
    return EditorSession(config)


@pytest.fixture
def add_rect(tree: ShapeTree):
    """Attach a rectangle under ``parent`` (default: canvas), committed unless ``commit=False``.

    Committing here skips the stability check so tests can build illegal
    layouts on purpose.
    """

    def _add(
        width: float,
        height: float,
        x: float = 0.0,
        y: float = 0.0,
        rotation: float = 0.0,
        parent: str | None = None,
        commit: bool = True,
    ) -> ShapeNode:
        node = tree.create_child(
            parent or tree.root_id,
            ShapeKind.RECTANGLE,
            {"width": width, "height": height},
            at(x, y, rotation),
        )
        if commit:
            node.provisional = False
        return node

    return _add
