"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shapenest.engine.primitives import Point, Transform
from shapenest.engine.shapes import ShapeKind


class TransformModel(BaseModel):
    x: float = Field(default=0.0, description="Offset from the parent's centre")
    y: float = Field(default=0.0, description="Offset from the parent's centre")
    rotation: float = Field(default=0.0, description="Degrees, clockwise")
    scale_x: float = Field(default=1.0)
    scale_y: float = Field(default=1.0)

    def to_transform(self) -> Transform:
        return Transform(Point(self.x, self.y), self.rotation, Point(self.scale_x, self.scale_y))


class SelectRequest(BaseModel):
    node_id: str = Field(..., description="Id of the node to select")


class SelectAtRequest(BaseModel):
    x: float = Field(..., description="Canvas x coordinate")
    y: float = Field(..., description="Canvas y coordinate")


class PreviewRequest(BaseModel):
    kind: ShapeKind = Field(..., description="Shape to add under the selected node")
    params: dict[str, float | str] = Field(
        default_factory=dict,
        description="Kind-specific fields, see GET /api/shapes/{kind}/params",
    )
    transform: TransformModel = Field(default_factory=TransformModel)


class TranslateRequest(BaseModel):
    transform: TransformModel = Field(
        default_factory=TransformModel,
        description="Delta added to the selected node's transform",
    )
