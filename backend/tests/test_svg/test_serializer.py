"""Tests for SVG output."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import numpy as np

from shapenest.engine.editor import RenderItem
from shapenest.engine.shapes import ShapeKind
from shapenest.svg.serializer import serialize_scene, serialize_svg

SVG_NS = "{http://www.w3.org/2000/svg}"


def _item(node_id: str, stable: bool = True, selected: bool = False, provisional: bool = False) -> RenderItem:
    return RenderItem(
        node_id=node_id,
        kind=ShapeKind.TRIANGLE,
        parent_id="S0",
        points=np.array([(0.0, 0.0), (10.0, 0.0), (5.0, 8.125)]),
        stable=stable,
        selected=selected,
        provisional=provisional,
    )


def test_serialize_svg_is_well_formed():
    svg = serialize_svg(
        [{"tag": "circle", "cx": 5, "cy": 5, "r": 2}],
        canvas_w=100,
        canvas_h=50,
        title="t",
        description="d",
        styles={".a": "fill: red"},
    )
    root = ET.fromstring(svg.encode())
    assert root.tag == f"{SVG_NS}svg"
    assert root.get("viewBox") == "0 0 100 50"
    assert root.find(f"{SVG_NS}title").text == "t"
    assert root.find(f"{SVG_NS}desc").text == "d"
    assert root.find(f"{SVG_NS}circle").get("r") == "2"


def test_serialize_scene_strokes():
    svg = serialize_scene(
        [_item("S1"), _item("S2", stable=False), _item("S3", selected=True, provisional=True)],
        640,
        480,
    )
    polys = {p.get("id"): p for p in ET.fromstring(svg.encode()).iter(f"{SVG_NS}polygon")}
    assert list(polys) == ["S1", "S2", "S3"]

    assert polys["S1"].get("stroke") == "black"
    assert polys["S1"].get("fill") == "none"
    assert polys["S1"].get("stroke-width") == "1"
    assert polys["S1"].get("stroke-dasharray") is None
    assert polys["S1"].get("points") == "0.00,0.00 10.00,0.00 5.00,8.12"
    assert polys["S1"].get("class") == "triangle"

    assert polys["S2"].get("stroke") == "red"
    assert polys["S3"].get("stroke-width") == "2"
    assert polys["S3"].get("stroke-dasharray") == "4 2"


def test_serialize_empty_scene():
    root = ET.fromstring(serialize_scene([], 640, 480).encode())
    assert root.get("width") == "640"
    assert list(root.iter(f"{SVG_NS}polygon")) == []
