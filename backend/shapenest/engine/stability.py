"""Stability: the containment and non-overlap rule for placed shapes.

A node is stable when every one of its points lies inside its parent and,
for every sibling, neither shape has a point inside the other and no edges
cross. The canvas is always stable.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from shapenest.engine.errors import InvalidOperandError
from shapenest.engine.resolver import ResolvedShape, resolve_family
from shapenest.engine.tree import ShapeTree
from shapenest.utils.geometry import points_in_polygon, polygons_intersect

logger = logging.getLogger(__name__)


class Violation(str, enum.Enum):
    OUTSIDE_PARENT = "outside_parent"
    INSIDE_SIBLING = "inside_sibling"
    CONTAINS_SIBLING = "contains_sibling"
    EDGES_CROSS = "edges_cross"


@dataclass(frozen=True)
class StabilityReport:
    node_id: str
    violation: Violation | None = None
    # Sibling involved in the violation, if any
    other_id: str | None = None

    @property
    def stable(self) -> bool:
        return self.violation is None

    def __bool__(self) -> bool:
        return self.stable

    @property
    def message(self) -> str:
        if self.violation is None:
            return "ok"
        if self.violation is Violation.OUTSIDE_PARENT:
            return f"{self.node_id} is not fully inside its parent"
        if self.violation is Violation.INSIDE_SIBLING:
            return f"{self.node_id} has points inside {self.other_id}"
        if self.violation is Violation.CONTAINS_SIBLING:
            return f"{self.other_id} has points inside {self.node_id}"
        return f"{self.node_id} crosses the edges of {self.other_id}"


def as_polygon(shape: Any) -> NDArray[np.float64]:
    """Absolute point loop of ``shape``; raises InvalidOperandError for anything else."""
    if isinstance(shape, ResolvedShape):
        return shape.points
    if isinstance(shape, np.ndarray) and shape.ndim == 2 and shape.shape[1] == 2 and len(shape) >= 3:
        return shape
    raise InvalidOperandError(f"Expected a polygon, got {type(shape).__name__}")


def shapes_intersect(a: Any, b: Any, collinear: bool = True) -> bool:
    """Edge intersection between two polygon shapes."""
    return polygons_intersect(as_polygon(a), as_polygon(b), collinear=collinear)


def check_stability(
    tree: ShapeTree,
    node_id: str,
    resolved: Mapping[str, NDArray[np.float64]] | None = None,
) -> StabilityReport:
    """Evaluate the stability rule for ``node_id``.

    ``resolved`` may supply already-resolved absolute points (node id ->
    Nx2 array) for the node, its parent and its siblings; otherwise they are
    resolved from the current transforms.
    """
    node = tree.get(node_id)
    if node.is_canvas:
        return StabilityReport(node_id)

    if resolved is None:
        resolved = resolve_family(tree, node_id)
    collinear = tree.config.detect_collinear_overlap

    points = as_polygon(resolved[node_id])
    parent_points = as_polygon(resolved[node.parent_id])
    if not points_in_polygon(points, parent_points).all():
        return StabilityReport(node_id, Violation.OUTSIDE_PARENT)

    for sibling in tree.siblings_of(node_id):
        sibling_points = as_polygon(resolved[sibling.id])
        if points_in_polygon(points, sibling_points).any():
            return StabilityReport(node_id, Violation.INSIDE_SIBLING, sibling.id)
        if points_in_polygon(sibling_points, points).any():
            return StabilityReport(node_id, Violation.CONTAINS_SIBLING, sibling.id)
        if polygons_intersect(points, sibling_points, collinear=collinear):
            return StabilityReport(node_id, Violation.EDGES_CROSS, sibling.id)

    return StabilityReport(node_id)


def is_stable(tree: ShapeTree, node_id: str) -> bool:
    return check_stability(tree, node_id).stable
