"""Shape kinds, their construction parameters and local point sets.

The set of kinds is closed. Each kind has one parameter record; the record's
fields double as the form description returned by ``get_params``.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shapenest.engine.errors import ShapeParamsError


class ShapeKind(str, enum.Enum):
    CANVAS = "canvas"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    TRIANGLE = "triangle"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    ShapeKind.CANVAS: "Canvas",
    ShapeKind.RECTANGLE: "Rectangle",
    ShapeKind.CIRCLE: "Circle",
    ShapeKind.TRIANGLE: "Triangle",
}

# Kinds a user may add under an existing node
CREATABLE_KINDS = (ShapeKind.RECTANGLE, ShapeKind.TRIANGLE, ShapeKind.CIRCLE)


@dataclass(frozen=True)
class ParamSpec:
    """One named numeric input a shape kind needs."""

    id: str
    name: str


class _Params(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


class RectangleParams(_Params):
    width: float = Field(..., gt=0, title="Width")
    height: float = Field(..., gt=0, title="Height")


class CircleParams(_Params):
    radius: float = Field(..., gt=0, title="Radius")


class TriangleParams(_Params):
    point1_x: float = Field(..., title="X1")
    point1_y: float = Field(..., title="Y1")
    point2_x: float = Field(..., title="X2")
    point2_y: float = Field(..., title="Y2")
    point3_x: float = Field(..., title="X3")
    point3_y: float = Field(..., title="Y3")


ShapeParams = Union[RectangleParams, CircleParams, TriangleParams]

_PARAM_MODELS: dict[ShapeKind, type[_Params]] = {
    ShapeKind.CANVAS: RectangleParams,
    ShapeKind.RECTANGLE: RectangleParams,
    ShapeKind.CIRCLE: CircleParams,
    ShapeKind.TRIANGLE: TriangleParams,
}


def get_params(kind: ShapeKind) -> list[ParamSpec]:
    """Named fields required to build ``kind``, in form order."""
    model = _PARAM_MODELS[kind]
    return [ParamSpec(id=name, name=info.title or name) for name, info in model.model_fields.items()]


def build_params(kind: ShapeKind, raw: Mapping[str, Any] | ShapeParams) -> ShapeParams:
    """Validate ``raw`` into the parameter record for ``kind``.

    Accepts numbers or numeric strings. Raises ShapeParamsError naming every
    missing or unparsable field.
    """
    model = _PARAM_MODELS[kind]
    if isinstance(raw, model):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    try:
        return model.model_validate(dict(raw))
    except ValidationError as e:
        fields = {
            ".".join(str(part) for part in err["loc"]) or "params": err["msg"]
            for err in e.errors()
        }
        raise ShapeParamsError(kind.display_name, fields) from e


def local_points(params: ShapeParams, circle_points: int = 100) -> NDArray[np.float64]:
    """Point set in the shape's own frame, centred on the local origin.

    The returned array is read-only.
    """
    if isinstance(params, RectangleParams):
        hw = params.width / 2
        hh = params.height / 2
        pts = np.array([(-hw, hh), (hw, hh), (hw, -hh), (-hw, -hh)], dtype=float)
    elif isinstance(params, CircleParams):
        step = math.pi * 2 / circle_points
        angles = np.arange(circle_points) * step
        pts = np.column_stack((np.cos(angles) * params.radius, np.sin(angles) * params.radius))
    elif isinstance(params, TriangleParams):
        pts = np.array(
            [
                (params.point1_x, params.point1_y),
                (params.point2_x, params.point2_y),
                (params.point3_x, params.point3_y),
            ],
            dtype=float,
        )
    else:
        raise TypeError(f"Unsupported shape parameters: {type(params).__name__}")

    pts.flags.writeable = False
    return pts
