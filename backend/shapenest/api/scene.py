"""/api/scene/* endpoints for the editing session."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from shapenest.dependencies import get_editor
from shapenest.engine.editor import EditorSession, HierarchyEntry, RenderItem
from shapenest.engine.errors import (
    EditorBusyError,
    NodeNotFoundError,
    ShapeNestError,
    ShapeParamsError,
    TreeInvariantError,
)
from shapenest.engine.primitives import Point
from shapenest.models.requests import (
    PreviewRequest,
    SelectAtRequest,
    SelectRequest,
    TranslateRequest,
)
from shapenest.models.responses import (
    CommitResponse,
    HierarchyNodeModel,
    PreviewResponse,
    RenderItemModel,
    SceneResponse,
    TranslateResponse,
)

router = APIRouter(prefix="/scene")
logger = logging.getLogger(__name__)


def _http_error(e: ShapeNestError) -> HTTPException:
    if isinstance(e, ShapeParamsError):
        return HTTPException(status_code=422, detail={"message": str(e), "fields": e.fields})
    if isinstance(e, NodeNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (EditorBusyError, TreeInvariantError)):
        return HTTPException(status_code=409, detail=str(e))
    logger.warning("Unmapped engine error: %s", e)
    return HTTPException(status_code=400, detail=str(e))


def _item_model(item: RenderItem) -> RenderItemModel:
    return RenderItemModel(
        node_id=item.node_id,
        kind=item.kind.value,
        parent_id=item.parent_id,
        points=[(float(x), float(y)) for x, y in item.points],
        stroke=item.stroke,
        stable=item.stable,
        selected=item.selected,
        provisional=item.provisional,
    )


def _hierarchy_model(entry: HierarchyEntry) -> HierarchyNodeModel:
    item = entry.item
    return HierarchyNodeModel(
        node_id=item.node_id,
        kind=item.kind.value,
        name=item.kind.display_name,
        selected=item.selected,
        provisional=item.provisional,
        stable=item.stable,
        area=round(entry.shape.area, 2),
        centroid=entry.shape.centroid,
        bbox=entry.shape.bbox,
        children=[_hierarchy_model(child) for child in entry.children],
    )


def _scene(session: EditorSession, items: list[RenderItem] | None = None) -> SceneResponse:
    if items is None:
        items = session.render()
    return SceneResponse(
        selected_id=session.selected_id,
        preview_id=session.preview_id,
        editing=session.editing,
        hierarchy=_hierarchy_model(session.hierarchy()),
        shapes=[_item_model(item) for item in items],
    )


@router.get("", response_model=SceneResponse)
async def get_scene(session: EditorSession = Depends(get_editor)) -> SceneResponse:
    return _scene(session)


@router.get("/svg")
async def get_scene_svg(session: EditorSession = Depends(get_editor)) -> Response:
    return Response(content=session.render_svg(), media_type="image/svg+xml")


@router.post("/select", response_model=SceneResponse)
async def select(req: SelectRequest, session: EditorSession = Depends(get_editor)) -> SceneResponse:
    try:
        session.select(req.node_id)
    except ShapeNestError as e:
        raise _http_error(e) from e
    return _scene(session)


@router.post("/select-at", response_model=SceneResponse)
async def select_at(req: SelectAtRequest, session: EditorSession = Depends(get_editor)) -> SceneResponse:
    try:
        session.select_at_point(Point(req.x, req.y))
    except ShapeNestError as e:
        raise _http_error(e) from e
    return _scene(session)


@router.post("/preview", response_model=PreviewResponse)
async def preview(req: PreviewRequest, session: EditorSession = Depends(get_editor)) -> PreviewResponse:
    try:
        result = session.preview(req.kind, req.params, req.transform.to_transform())
    except ShapeNestError as e:
        raise _http_error(e) from e
    return PreviewResponse(
        node_id=result.node.id,
        stable=result.report.stable,
        message=result.report.message,
        scene=_scene(session),
    )


@router.post("/commit", response_model=CommitResponse)
async def commit(session: EditorSession = Depends(get_editor)) -> CommitResponse:
    node_id = session.preview_id
    try:
        report = session.commit()
    except ShapeNestError as e:
        raise _http_error(e) from e
    message = "ok" if report.stable else f"New shape can't be placed here: {report.message}"
    return CommitResponse(
        committed=report.stable,
        node_id=node_id,
        message=message,
        scene=_scene(session),
    )


@router.post("/cancel", response_model=SceneResponse)
async def cancel(session: EditorSession = Depends(get_editor)) -> SceneResponse:
    session.cancel()
    return _scene(session)


@router.post("/translate/preview", response_model=SceneResponse)
async def translate_preview(
    req: TranslateRequest,
    session: EditorSession = Depends(get_editor),
) -> SceneResponse:
    try:
        items = session.preview_translate(req.transform.to_transform())
    except ShapeNestError as e:
        raise _http_error(e) from e
    return _scene(session, items)


@router.post("/translate", response_model=TranslateResponse)
async def translate(req: TranslateRequest, session: EditorSession = Depends(get_editor)) -> TranslateResponse:
    try:
        applied = session.translate(req.transform.to_transform())
    except ShapeNestError as e:
        raise _http_error(e) from e
    return TranslateResponse(
        applied=applied,
        message="ok" if applied else "Shape can't be placed here",
        scene=_scene(session),
    )


@router.delete("/nodes/{node_id}", response_model=SceneResponse)
async def remove_node(node_id: str, session: EditorSession = Depends(get_editor)) -> SceneResponse:
    try:
        session.remove(node_id)
    except ShapeNestError as e:
        raise _http_error(e) from e
    return _scene(session)
