"""ShapeNest geometry engine for nested polygons."""

from shapenest.engine.config import EditorConfig
from shapenest.engine.editor import EditorSession
from shapenest.engine.primitives import Point, Transform
from shapenest.engine.resolver import resolve_points, resolve_tree
from shapenest.engine.shapes import ShapeKind, get_params
from shapenest.engine.stability import check_stability, is_stable
from shapenest.engine.tree import ShapeNode, ShapeTree

__all__ = [
    "EditorConfig",
    "EditorSession",
    "Point",
    "Transform",
    "resolve_points",
    "resolve_tree",
    "ShapeKind",
    "get_params",
    "check_stability",
    "is_stable",
    "ShapeNode",
    "ShapeTree",
]
