"""Absolute point resolution. Walks the transform chain from the canvas down.

Nothing here is cached on the nodes: every call recomputes from the current
transforms, so results are always fresh.

For a node with local points P and transform T, placed in the frame handed
down by its parent (centre C, accumulated rotation R, accumulated scale S):

    anchor   = C + T.position
    absolute = anchor + P * (S * T.scale)
    absolute = rotate(absolute, about=anchor, by=T.rotation)
    absolute = rotate(absolute, about=C, by=R)

The frame handed to the node's own children is centred on the node's vertex
centroid (not its transform position), with rotation R + T.rotation and
scale S * T.scale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import Polygon

from shapenest.engine.tree import ShapeNode, ShapeTree
from shapenest.utils.geometry import bbox, centroid, rotate_points

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    """Coordinate frame a parent hands down to its children."""

    center: tuple[float, float] = (0.0, 0.0)
    rotation: float = 0.0
    scale: tuple[float, float] = (1.0, 1.0)


# The canvas is placed in an identity frame at the origin
ROOT_FRAME = Frame()


@dataclass(frozen=True)
class ResolvedShape:
    """A node's boundary in canvas coordinates."""

    node_id: str
    points: NDArray[np.float64]

    @property
    def centroid(self) -> tuple[float, float]:
        return centroid(self.points)

    @property
    def bbox(self) -> tuple[float, float, float, float]:
        return bbox(self.points)

    @cached_property
    def polygon(self) -> Polygon:
        return Polygon(self.points)

    @property
    def area(self) -> float:
        poly = self.polygon
        if poly.is_empty:
            return 0.0
        return float(poly.area)


def place(node: ShapeNode, frame: Frame) -> NDArray[np.float64]:
    """Absolute points of ``node`` inside ``frame``."""
    t = node.transform
    anchor = (frame.center[0] + t.position.x, frame.center[1] + t.position.y)
    scale = np.array([frame.scale[0] * t.scale.x, frame.scale[1] * t.scale.y])

    points = np.asarray(anchor) + node.local_points * scale
    points = rotate_points(points, anchor, t.rotation)
    return rotate_points(points, frame.center, frame.rotation)


def child_frame(node: ShapeNode, frame: Frame, points: NDArray[np.float64]) -> Frame:
    """Frame ``node`` hands down to its children."""
    t = node.transform
    return Frame(
        center=centroid(points),
        rotation=frame.rotation + t.rotation,
        scale=(frame.scale[0] * t.scale.x, frame.scale[1] * t.scale.y),
    )


def _resolve_path(tree: ShapeTree, node_id: str) -> tuple[NDArray[np.float64], Frame]:
    """Points of ``node_id`` and the frame it was placed in."""
    frame = ROOT_FRAME
    path = tree.path_to(node_id)
    for node in path[:-1]:
        frame = child_frame(node, frame, place(node, frame))
    return place(path[-1], frame), frame


def resolve_points(tree: ShapeTree, node_id: str) -> NDArray[np.float64]:
    """Absolute drawable boundary of ``node_id``."""
    points, _ = _resolve_path(tree, node_id)
    return points


def resolve_family(tree: ShapeTree, node_id: str) -> dict[str, NDArray[np.float64]]:
    """Absolute points of ``node_id``, its parent and all its siblings.

    This is exactly what a stability check reads. The parent chain is
    walked once and shared by the whole sibling group.
    """
    node = tree.get(node_id)
    if node.parent_id is None:
        return {node_id: place(node, ROOT_FRAME)}

    parent_points, parent_frame = _resolve_path(tree, node.parent_id)
    parent = tree.get(node.parent_id)
    frame = child_frame(parent, parent_frame, parent_points)

    resolved = {parent.id: parent_points}
    for child in tree.children_of(parent.id):
        resolved[child.id] = place(child, frame)
    return resolved


def resolve_tree(tree: ShapeTree, node_id: str | None = None) -> dict[str, ResolvedShape]:
    """Resolve every node of the subtree at ``node_id`` (default: whole tree), top-down."""
    start = tree.get(node_id or tree.root_id)
    if start.parent_id is None:
        start_frame = ROOT_FRAME
    else:
        parent_points, parent_frame = _resolve_path(tree, start.parent_id)
        start_frame = child_frame(tree.get(start.parent_id), parent_frame, parent_points)

    resolved: dict[str, ResolvedShape] = {}
    stack: list[tuple[ShapeNode, Frame]] = [(start, start_frame)]
    while stack:
        node, frame = stack.pop()
        points = place(node, frame)
        resolved[node.id] = ResolvedShape(node.id, points)
        inner = child_frame(node, frame, points)
        stack.extend((child, inner) for child in reversed(tree.children_of(node.id)))

    logger.debug("Resolved %d shapes from %s", len(resolved), start.id)
    return resolved
