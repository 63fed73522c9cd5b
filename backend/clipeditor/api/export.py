"""POST /api/export and /api/import — path <-> CSS/SVG conversion."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import APIRouter

from clipeditor.models.path import Point
from clipeditor.models.requests import ExportRequest, ImportRequest
from clipeditor.models.responses import ExportResponse, ImportResponse
from clipeditor.svg.path_data import (
    EXPORT_PRECISION,
    export_css,
    export_svg,
    parse_svg_path_data,
    to_css_clip_path,
    to_polygon_fallback,
    to_svg_path_data,
)

router = APIRouter()


def build_export(points: Sequence[Point], width: float, height: float, is_closed: bool) -> ExportResponse:
    """Every export artifact for one path."""
    return ExportResponse(
        path_data=to_svg_path_data(points, width, height, is_closed, precision=EXPORT_PRECISION),
        clip_path=to_css_clip_path(points, width, height, is_closed),
        polygon=to_polygon_fallback(points, precision=EXPORT_PRECISION),
        css=export_css(points, width, height, is_closed),
        svg=export_svg(points, width, height, is_closed),
    )


@router.post("/export", response_model=ExportResponse)
def export(req: ExportRequest) -> ExportResponse:
    return build_export(req.points, req.width, req.height, req.is_closed)


@router.post("/import", response_model=ImportResponse)
def import_path(req: ImportRequest) -> ImportResponse:
    """Convert SVG path data back into editable points."""
    points, closed = parse_svg_path_data(req.path_data, req.width, req.height)
    return ImportResponse(points=list(points), is_closed=closed)
