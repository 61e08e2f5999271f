"""GET /api/shapes — shape kinds and the fields needed to build them."""

from __future__ import annotations

from fastapi import APIRouter

from shapenest.engine.shapes import CREATABLE_KINDS, ShapeKind, get_params
from shapenest.models.responses import ParamSpecModel, ShapeKindInfo

router = APIRouter(prefix="/shapes")


def _params(kind: ShapeKind) -> list[ParamSpecModel]:
    return [ParamSpecModel(id=p.id, name=p.name) for p in get_params(kind)]


@router.get("", response_model=list[ShapeKindInfo])
async def list_shapes() -> list[ShapeKindInfo]:
    return [
        ShapeKindInfo(kind=kind.value, name=kind.display_name, params=_params(kind))
        for kind in CREATABLE_KINDS
    ]


@router.get("/{kind}/params", response_model=list[ParamSpecModel])
async def shape_params(kind: ShapeKind) -> list[ParamSpecModel]:
    return _params(kind)
