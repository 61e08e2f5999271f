"""Leaf-node geometry helpers. No engine imports.

Polygons are Nx2 float arrays of absolute points, implicitly closed
(an edge joins the last point back to the first).
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


def rotate_about(
    x: float,
    y: float,
    center: tuple[float, float],
    angle_deg: float,
) -> tuple[float, float]:
    """Rotate (x, y) about ``center`` by ``angle_deg``.

    Clockwise-positive in screen space: the sine term enters the y component
    with inverted sign. Angles are not normalised.
    """
    radians = math.radians(angle_deg)
    cos = math.cos(radians)
    sin = math.sin(radians)
    cx, cy = center
    nx = cos * (x - cx) + sin * (y - cy) + cx
    ny = cos * (y - cy) - sin * (x - cx) + cy
    return nx, ny


def rotate_points(
    points: NDArray[np.float64],
    center: tuple[float, float],
    angle_deg: float,
) -> NDArray[np.float64]:
    """Array form of ``rotate_about``. Returns a new array."""
    radians = math.radians(angle_deg)
    cos = math.cos(radians)
    sin = math.sin(radians)
    cx, cy = center
    dx = points[:, 0] - cx
    dy = points[:, 1] - cy
    return np.column_stack((cos * dx + sin * dy + cx, cos * dy - sin * dx + cy))


def centroid(points: NDArray[np.float64]) -> tuple[float, float]:
    """Mean of the vertices (not the area centroid)."""
    if len(points) == 0:
        return (0.0, 0.0)
    return (float(np.mean(points[:, 0])), float(np.mean(points[:, 1])))


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


# ---------------------------------------------------------------------------
# Point-in-polygon (crossing number)


def points_in_polygon(
    points: NDArray[np.float64],
    polygon: NDArray[np.float64],
) -> NDArray[np.bool_]:
    """Crossing-number test for many query points at once.

    For every edge (i, j = i - 1) a horizontal ray from the query point
    toggles the inside flag when ``(yi > y) != (yj > y)`` and
    ``x < (xj - xi) * (y - yi) / (yj - yi) + xi``. Boundary hits get
    whatever the formula gives.
    """
    if len(points) == 0 or len(polygon) == 0:
        return np.zeros(len(points), dtype=bool)

    xi = polygon[:, 0]
    yi = polygon[:, 1]
    xj = np.roll(xi, 1)
    yj = np.roll(yi, 1)

    x = points[:, 0][:, None]
    y = points[:, 1][:, None]

    straddles = (yi > y) != (yj > y)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
    crossings = straddles & (x < x_cross)
    return np.count_nonzero(crossings, axis=1) % 2 == 1


def point_in_polygon(point: tuple[float, float], polygon: NDArray[np.float64]) -> bool:
    """Single-point form of ``points_in_polygon``."""
    query = np.array([point], dtype=float)
    return bool(points_in_polygon(query, polygon)[0])


# ---------------------------------------------------------------------------
# Segment / polygon intersection


def _collinear_overlap(
    p1: tuple[float, float],
    r: tuple[float, float],
    q1: tuple[float, float],
    s: tuple[float, float],
) -> bool:
    rr = r[0] * r[0] + r[1] * r[1]
    ss = s[0] * s[0] + s[1] * s[1]
    if rr == 0.0 or ss == 0.0:
        return False
    qp = (q1[0] - p1[0], q1[1] - p1[1])
    if r[0] * qp[1] - r[1] * qp[0] != 0.0:
        return False
    t0 = (qp[0] * r[0] + qp[1] * r[1]) / rr
    t1 = ((qp[0] + s[0]) * r[0] + (qp[1] + s[1]) * r[1]) / rr
    return max(t0, t1) >= 0.0 and min(t0, t1) <= 1.0


def segments_intersect(
    p1: tuple[float, float],
    p2: tuple[float, float],
    q1: tuple[float, float],
    q2: tuple[float, float],
    collinear: bool = True,
) -> bool:
    """True when segment p1-p2 meets segment q1-q2.

    Solves for the parameters s, t along both segments; both must fall in
    [0, 1]. Parallel segments have no solution and report False, except
    that with ``collinear`` set, segments lying on the same line are
    checked for overlap of their projections. Zero-length segments never
    intersect anything.
    """
    r = (p2[0] - p1[0], p2[1] - p1[1])
    sv = (q2[0] - q1[0], q2[1] - q1[1])
    den = -sv[0] * r[1] + r[0] * sv[1]
    if den == 0.0:
        return collinear and _collinear_overlap(p1, r, q1, sv)

    dx = p1[0] - q1[0]
    dy = p1[1] - q1[1]
    s = (-r[1] * dx + r[0] * dy) / den
    t = (sv[0] * dy - sv[1] * dx) / den
    return 0.0 <= s <= 1.0 and 0.0 <= t <= 1.0


def edges(polygon: NDArray[np.float64]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Return (starts, directions) of the closed loop's edges."""
    return polygon, np.roll(polygon, -1, axis=0) - polygon


def polygons_intersect(
    a: NDArray[np.float64],
    b: NDArray[np.float64],
    collinear: bool = True,
) -> bool:
    """True when any edge of closed loop ``a`` meets any edge of ``b``.

    Pairwise over all |a| x |b| edge pairs, with the same parametrisation
    and parallel-edge handling as ``segments_intersect``.
    """
    if len(a) == 0 or len(b) == 0:
        return False

    p, r = edges(a)
    q, s = edges(b)

    rx = r[:, 0][:, None]
    ry = r[:, 1][:, None]
    sx = s[:, 0][None, :]
    sy = s[:, 1][None, :]
    dx = p[:, 0][:, None] - q[:, 0][None, :]
    dy = p[:, 1][:, None] - q[:, 1][None, :]

    den = -sx * ry + rx * sy
    with np.errstate(divide="ignore", invalid="ignore"):
        sp = (-ry * dx + rx * dy) / den
        tp = (sx * dy - sy * dx) / den
    hits = (sp >= 0.0) & (sp <= 1.0) & (tp >= 0.0) & (tp <= 1.0)
    if hits.any():
        return True

    if not collinear:
        return False

    parallel = den == 0.0
    if not parallel.any():
        return False

    rr = rx * rx + ry * ry
    ss = sx * sx + sy * sy
    # q - p, as seen from edge of a
    qpx = -dx
    qpy = -dy
    on_line = (rx * qpy - ry * qpx) == 0.0
    candidates = parallel & on_line & (rr > 0.0) & (ss > 0.0)
    if not candidates.any():
        return False

    with np.errstate(divide="ignore", invalid="ignore"):
        t0 = (qpx * rx + qpy * ry) / rr
        t1 = ((qpx + sx) * rx + (qpy + sy) * ry) / rr
    overlap = (np.maximum(t0, t1) >= 0.0) & (np.minimum(t0, t1) <= 1.0)
    return bool((candidates & overlap).any())
