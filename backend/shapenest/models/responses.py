"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    environment: str = "development"
    shape_kinds: int = 0


class ParamSpecModel(BaseModel):
    id: str
    name: str


class ShapeKindInfo(BaseModel):
    kind: str
    name: str
    params: list[ParamSpecModel] = Field(default_factory=list)


class RenderItemModel(BaseModel):
    node_id: str
    kind: str
    parent_id: str | None = None
    points: list[tuple[float, float]] = Field(default_factory=list)
    stroke: str = "black"
    stable: bool = True
    selected: bool = False
    provisional: bool = False


class HierarchyNodeModel(BaseModel):
    node_id: str
    kind: str
    name: str
    selected: bool = False
    provisional: bool = False
    stable: bool = True
    area: float = 0.0
    centroid: tuple[float, float] = (0.0, 0.0)
    bbox: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    children: list[HierarchyNodeModel] = Field(default_factory=list)


class SceneResponse(BaseModel):
    selected_id: str
    preview_id: str | None = None
    editing: bool = False
    hierarchy: HierarchyNodeModel
    shapes: list[RenderItemModel] = Field(default_factory=list)


class PreviewResponse(BaseModel):
    node_id: str
    stable: bool
    message: str = "ok"
    scene: SceneResponse


class CommitResponse(BaseModel):
    committed: bool
    node_id: str
    message: str = "ok"
    scene: SceneResponse


class TranslateResponse(BaseModel):
    applied: bool
    message: str = "ok"
    scene: SceneResponse
