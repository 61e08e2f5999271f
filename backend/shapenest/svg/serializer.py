"""Write SVG output for a rendered scene."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shapenest.engine.editor import RenderItem


def serialize_svg(
    elements: list[dict[str, Any]],
    canvas_w: float = 640.0,
    canvas_h: float = 480.0,
    title: str = "",
    description: str = "",
    styles: dict[str, str] | None = None,
) -> str:
    """Generate SVG markup from element definitions."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg viewBox="0 0 {canvas_w:g} {canvas_h:g}" width="{canvas_w:g}" height="{canvas_h:g}"'
        f' xmlns="http://www.w3.org/2000/svg" role="img">',
    ]

    if title:
        lines.append(f"  <title>{title}</title>")
    if description:
        lines.append(f"  <desc>{description}</desc>")

    if styles:
        lines.append("  <style>")
        for selector, props in styles.items():
            lines.append(f"    {selector} {{ {props} }}")
        lines.append("  </style>")

    for elem in elements:
        tag = elem.get("tag", "polygon")
        attrs = {k: v for k, v in elem.items() if k != "tag"}
        attr_str = " ".join(f'{k}="{v}"' for k, v in attrs.items())
        lines.append(f"  <{tag} {attr_str} />")

    lines.append("</svg>")
    return "\n".join(lines)


def _points_attr(points) -> str:
    return " ".join(f"{x:.2f},{y:.2f}" for x, y in points)


def serialize_scene(items: Iterable[RenderItem], canvas_w: float, canvas_h: float) -> str:
    """One closed outline per node, stroked by stability, in tree order."""
    elements = []
    for item in items:
        elem: dict[str, Any] = {
            "tag": "polygon",
            "id": item.node_id,
            "class": item.kind.value,
            "points": _points_attr(item.points),
            "fill": "none",
            "stroke": item.stroke,
            "stroke-width": 2 if item.selected else 1,
        }
        if item.provisional:
            elem["stroke-dasharray"] = "4 2"
        elements.append(elem)
    return serialize_svg(elements, canvas_w, canvas_h, title="ShapeNest scene")
