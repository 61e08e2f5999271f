"""ShapeTree, the arena holding every shape node.

Nodes refer to each other by id: a node owns the ordered list of its
children's ids and keeps a non-owning ``parent_id`` back-reference. The root
is always exactly one Canvas without a parent.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from shapenest.engine.config import EditorConfig
from shapenest.engine.errors import NodeNotFoundError, TreeInvariantError
from shapenest.engine.primitives import Point, Transform
from shapenest.engine.shapes import (
    CREATABLE_KINDS,
    RectangleParams,
    ShapeKind,
    ShapeParams,
    build_params,
    local_points,
)

logger = logging.getLogger(__name__)


@dataclass
class ShapeNode:
    """A single polygon placed in the tree."""

    id: str
    kind: ShapeKind
    params: ShapeParams
    # Nx2 read-only points in the shape's own frame, fixed at construction
    local_points: NDArray[np.float64]
    # Placement relative to the parent's frame
    transform: Transform = field(default_factory=Transform.default)
    # Non-owning back-reference; None only for the canvas
    parent_id: str | None = None
    # Owned, ordered child ids
    children: list[str] = field(default_factory=list)
    # UI flag, no geometric meaning
    selected: bool = False
    # Inserted for preview, not yet committed
    provisional: bool = False

    @property
    def is_canvas(self) -> bool:
        return self.kind is ShapeKind.CANVAS

    @property
    def display_name(self) -> str:
        return self.kind.display_name


class ShapeTree:
    """Shape hierarchy rooted at a fixed canvas."""

    def __init__(self, config: EditorConfig | None = None) -> None:
        self.config = config or EditorConfig()
        self._nodes: dict[str, ShapeNode] = {}
        self._ids = itertools.count()

        params = RectangleParams(width=self.config.canvas_width, height=self.config.canvas_height)
        canvas = ShapeNode(
            id=self._next_id(),
            kind=ShapeKind.CANVAS,
            params=params,
            local_points=local_points(params),
            transform=Transform(
                Point(self.config.canvas_width / 2, self.config.canvas_height / 2),
                0.0,
                Point(1.0, 1.0),
            ),
        )
        self._nodes[canvas.id] = canvas
        self.root_id = canvas.id

    def _next_id(self) -> str:
        return f"S{next(self._ids)}"

    # --- Lookup ---

    @property
    def root(self) -> ShapeNode:
        return self._nodes[self.root_id]

    def get(self, node_id: str) -> ShapeNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def parent_of(self, node_id: str) -> ShapeNode | None:
        node = self.get(node_id)
        return self._nodes[node.parent_id] if node.parent_id is not None else None

    def children_of(self, node_id: str) -> list[ShapeNode]:
        return [self._nodes[cid] for cid in self.get(node_id).children]

    def siblings_of(self, node_id: str) -> list[ShapeNode]:
        """Other children of the same parent, in child order."""
        parent = self.parent_of(node_id)
        if parent is None:
            return []
        return [self._nodes[cid] for cid in parent.children if cid != node_id]

    def path_to(self, node_id: str) -> list[ShapeNode]:
        """Nodes from the canvas down to ``node_id`` inclusive."""
        path = [self.get(node_id)]
        while path[-1].parent_id is not None:
            path.append(self._nodes[path[-1].parent_id])
        path.reverse()
        return path

    def walk(self, node_id: str | None = None) -> Iterator[ShapeNode]:
        """Pre-order traversal of the subtree at ``node_id`` (default: whole tree)."""
        stack = [self.get(node_id or self.root_id)]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(self._nodes[cid] for cid in reversed(node.children))

    # --- Structural edits ---

    def create_child(
        self,
        parent_id: str,
        kind: ShapeKind,
        params: Mapping[str, Any] | ShapeParams,
        transform: Transform | None = None,
    ) -> ShapeNode:
        """Build a shape and attach it under ``parent_id`` as a provisional node.

        The caller decides between ``commit`` and ``discard``; stability is
        not checked here. Raises ShapeParamsError for bad parameters.
        """
        parent = self.get(parent_id)
        if kind not in CREATABLE_KINDS:
            raise TreeInvariantError(f"{kind.display_name} cannot be added as a child")
        if parent.provisional:
            raise TreeInvariantError(f"Parent {parent_id} is not committed yet")

        record = build_params(kind, params)
        node = ShapeNode(
            id=self._next_id(),
            kind=kind,
            params=record,
            local_points=local_points(record, self.config.circle_points),
            transform=transform or Transform.default(),
            parent_id=parent_id,
            provisional=True,
        )
        self._nodes[node.id] = node
        parent.children.append(node.id)
        logger.debug("Created provisional %s %s under %s", kind.display_name, node.id, parent_id)
        return node

    def remove_child(self, parent_id: str, child_id: str) -> bool:
        """Detach ``child_id`` and its subtree. No-op if it is not a child of ``parent_id``."""
        parent = self.get(parent_id)
        if child_id not in parent.children:
            logger.warning("remove_child: %s is not a child of %s, skipping", child_id, parent_id)
            return False
        doomed = [n.id for n in self.walk(child_id)]
        parent.children = [cid for cid in parent.children if cid != child_id]
        for nid in doomed:
            del self._nodes[nid]
        return True

    def commit(self, node_id: str) -> bool:
        """Finalise a provisional node if it is stable.

        Returns False, leaving the node provisional, when the placement is
        illegal.
        """
        from shapenest.engine.stability import is_stable

        node = self.get(node_id)
        if not node.provisional:
            raise TreeInvariantError(f"{node_id} is already committed")
        if not is_stable(self, node_id):
            logger.warning("Rejected %s %s: unstable placement", node.display_name, node_id)
            return False
        node.provisional = False
        logger.info("Committed %s %s under %s", node.display_name, node_id, node.parent_id)
        return True

    def discard(self, node_id: str) -> None:
        """Remove a provisional node from its parent."""
        node = self.get(node_id)
        if not node.provisional:
            raise TreeInvariantError(f"{node_id} is committed; use remove()")
        self.remove_child(node.parent_id, node_id)
        logger.debug("Discarded provisional %s", node_id)

    def remove(self, node_id: str) -> None:
        """Delete a committed node and its subtree."""
        node = self.get(node_id)
        if node.is_canvas:
            raise TreeInvariantError("The canvas cannot be removed")
        self.remove_child(node.parent_id, node_id)
        logger.info("Removed %s %s", node.display_name, node_id)

    def set_transform(self, node_id: str, transform: Transform) -> bool:
        """Move/resize ``node_id``; keep the change only if the edited subtree stays stable.

        Descendants follow the node's frame, so every committed descendant is
        re-checked too. Provisional descendants do not block the move.
        """
        from shapenest.engine.resolver import resolve_tree
        from shapenest.engine.stability import check_stability

        node = self.get(node_id)
        if node.is_canvas:
            logger.warning("set_transform: the canvas cannot be moved")
            return False

        previous = node.transform
        node.transform = transform
        report = check_stability(self, node_id)
        if report.stable and node.children:
            points = {nid: shape.points for nid, shape in resolve_tree(self, node_id).items()}
            for descendant in self.walk(node_id):
                if descendant.id == node_id or descendant.provisional:
                    continue
                report = check_stability(self, descendant.id, points)
                if not report.stable:
                    break

        if report.stable:
            logger.info("Moved %s %s", node.display_name, node_id)
            return True

        node.transform = previous
        logger.warning(
            "Reverted move of %s %s: %s", node.display_name, node_id, report.message
        )
        return False
