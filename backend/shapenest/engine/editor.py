"""EditorSession: selection, preview and move flows on top of a ShapeTree.

One session is one user editing one tree. Everything is synchronous: each
call resolves what it needs from the current transforms and returns.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from shapenest.engine.config import EditorConfig
from shapenest.engine.errors import EditorBusyError, TreeInvariantError
from shapenest.engine.primitives import Point, Transform
from shapenest.engine.resolver import ResolvedShape, resolve_tree
from shapenest.engine.shapes import ShapeKind, ShapeParams
from shapenest.engine.stability import StabilityReport, check_stability
from shapenest.engine.tree import ShapeNode, ShapeTree
from shapenest.utils.geometry import point_in_polygon

logger = logging.getLogger(__name__)

STABLE_STROKE = "black"
UNSTABLE_STROKE = "red"


@dataclass
class RenderItem:
    """Everything needed to draw one node."""

    node_id: str
    kind: ShapeKind
    parent_id: str | None
    points: NDArray[np.float64]
    stable: bool
    selected: bool = False
    provisional: bool = False

    @property
    def stroke(self) -> str:
        return STABLE_STROKE if self.stable else UNSTABLE_STROKE


@dataclass
class HierarchyEntry:
    item: RenderItem
    shape: ResolvedShape
    children: list[HierarchyEntry] = field(default_factory=list)


@dataclass(frozen=True)
class PreviewResult:
    node: ShapeNode
    report: StabilityReport


class EditorSession:
    """Interactive editing state: the tree, the selection and any edit in progress."""

    def __init__(self, config: EditorConfig | None = None) -> None:
        self.tree = ShapeTree(config)
        self.selected_id = self.tree.root_id
        self.tree.root.selected = True
        self.preview_id: str | None = None
        # A move/resize of the selected node is being previewed
        self.editing = False

    @property
    def config(self) -> EditorConfig:
        return self.tree.config

    @property
    def selected(self) -> ShapeNode:
        return self.tree.get(self.selected_id)

    @property
    def busy(self) -> bool:
        return self.preview_id is not None or self.editing

    # --- Selection ---

    def select(self, node_id: str) -> ShapeNode:
        if self.busy:
            raise EditorBusyError("Please finish editing first")
        node = self.tree.get(node_id)
        self.selected.selected = False
        node.selected = True
        self.selected_id = node.id
        return node

    def node_at(self, point: Point) -> ShapeNode:
        """Deepest node under ``point``: descend into the first child containing it."""
        resolved = resolve_tree(self.tree)
        current = self.tree.root
        descended = True
        while descended:
            descended = False
            for child in self.tree.children_of(current.id):
                if point_in_polygon(point.as_tuple(), resolved[child.id].points):
                    current = child
                    descended = True
                    break
        return current

    def select_at_point(self, point: Point) -> ShapeNode:
        return self.select(self.node_at(point).id)

    # --- New shape flow ---

    def preview(
        self,
        kind: ShapeKind,
        params: Mapping[str, Any] | ShapeParams,
        transform: Transform | None = None,
    ) -> PreviewResult:
        """Replace any pending preview with a provisional child of the selected node."""
        if self.editing:
            raise EditorBusyError("Finish the current move first")
        self._drop_preview()
        node = self.tree.create_child(self.selected_id, kind, params, transform)
        self.preview_id = node.id
        return PreviewResult(node, check_stability(self.tree, node.id))

    def commit(self) -> StabilityReport:
        """Keep the pending preview if it is stable; otherwise leave it pending."""
        if self.preview_id is None:
            raise TreeInvariantError("Nothing to commit")
        report = check_stability(self.tree, self.preview_id)
        if report.stable:
            self.tree.commit(self.preview_id)
            self.preview_id = None
        return report

    def cancel(self) -> None:
        """Abandon whatever edit is in progress."""
        self._drop_preview()
        self.editing = False

    def _drop_preview(self) -> None:
        if self.preview_id is not None:
            self.tree.discard(self.preview_id)
            self.preview_id = None

    # --- Move flow ---

    def preview_translate(self, delta: Transform) -> list[RenderItem]:
        """Render the scene as if ``delta`` were applied to the selected node."""
        if self.preview_id is not None:
            raise EditorBusyError("Finish the current preview first")
        self.editing = True
        node = self.selected
        if node.is_canvas:
            return self.render()

        previous = node.transform
        node.transform = previous.add(delta)
        try:
            return self.render()
        finally:
            node.transform = previous

    def translate(self, delta: Transform) -> bool:
        """Apply ``delta`` to the selected node if the result is stable."""
        if self.preview_id is not None:
            raise EditorBusyError("Finish the current preview first")
        node = self.selected
        if node.is_canvas:
            return False
        moved = self.tree.set_transform(node.id, node.transform.add(delta))
        if moved:
            self.editing = False
        return moved

    # --- Hierarchy edits ---

    def remove(self, node_id: str) -> None:
        """Delete a committed node and its subtree."""
        if self.busy:
            raise EditorBusyError("Please finish editing first")
        selected = self.selected
        doomed = {n.id for n in self.tree.walk(node_id)}
        self.tree.remove(node_id)
        if selected.id in doomed:
            selected.selected = False
            self.tree.root.selected = True
            self.selected_id = self.tree.root_id

    # --- Read side ---

    def render(self) -> list[RenderItem]:
        """Resolve the whole tree and colour each node by stability, in pre-order."""
        return self._render(resolve_tree(self.tree))

    def _render(self, resolved: Mapping[str, ResolvedShape]) -> list[RenderItem]:
        points = {nid: shape.points for nid, shape in resolved.items()}
        items = []
        for node in self.tree.walk():
            report = check_stability(self.tree, node.id, points)
            items.append(
                RenderItem(
                    node_id=node.id,
                    kind=node.kind,
                    parent_id=node.parent_id,
                    points=points[node.id],
                    stable=report.stable,
                    selected=node.selected,
                    provisional=node.provisional,
                )
            )
        return items

    def hierarchy(self) -> HierarchyEntry:
        resolved = resolve_tree(self.tree)
        entries = {
            item.node_id: HierarchyEntry(item, resolved[item.node_id]) for item in self._render(resolved)
        }
        for entry in entries.values():
            if entry.item.parent_id is not None:
                entries[entry.item.parent_id].children.append(entry)
        return entries[self.tree.root_id]

    def render_svg(self) -> str:
        from shapenest.svg.serializer import serialize_scene

        return serialize_scene(self.render(), self.config.canvas_width, self.config.canvas_height)
