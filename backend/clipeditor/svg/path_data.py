"""Path model serializers: SVG path data, CSS clip-path, polygon fallback, export documents.

Also the reverse direction: an SVG ``d`` string back into editor points, as a
facade over svgpathtools.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

from clipeditor.models.path import Point, Vec2
from clipeditor.utils.geometry import path_segments, segment_control_points

logger = logging.getLogger(__name__)

# Decimal places used in exported artifacts
EXPORT_PRECISION = 2

# Handles this close to point-symmetric are treated as mirrored on import
_MIRROR_EPS = 1e-6
# Endpoint match tolerance (pixels) when detecting the closing segment
_CLOSE_EPS = 1e-6


def _fmt(value: float, precision: int | None = None) -> str:
    """Format a coordinate. None = shortest round-trip repr without a trailing '.0'."""
    value = float(value)
    if value == 0:
        value = 0.0  # drop the sign of -0.0
    if precision is not None:
        return f"{value:.{precision}f}"
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


def to_svg_path_data(
    points: Sequence[Point],
    width: float,
    height: float,
    is_closed: bool,
    precision: int | None = None,
) -> str:
    """Build ``M ... C ... [Z]`` in absolute pixels. Empty for fewer than 2 points."""
    if len(points) < 2:
        return ""

    def f(v: float) -> str:
        return _fmt(v, precision)

    first = segment_control_points(points[0], points[1], width, height).p0
    parts = [f"M {f(first[0])} {f(first[1])}"]
    for _, a, b in path_segments(points, is_closed):
        seg = segment_control_points(a, b, width, height)
        parts.append(
            f"C {f(seg.p1[0])} {f(seg.p1[1])}, "
            f"{f(seg.p2[0])} {f(seg.p2[1])}, "
            f"{f(seg.p3[0])} {f(seg.p3[1])}"
        )
    if is_closed:
        parts.append("Z")
    return " ".join(parts)


def to_css_clip_path(points: Sequence[Point], width: float, height: float, is_closed: bool) -> str:
    """CSS ``path('...')`` value in pixels. "none" for degenerate or open shapes."""
    if len(points) < 2 or not is_closed:
        return "none"
    d = to_svg_path_data(points, width, height, is_closed, precision=EXPORT_PRECISION)
    return f"path('{d}')"


def to_polygon_fallback(points: Sequence[Point], precision: int | None = None) -> str:
    """Straight-line ``polygon(x% y%, ...)`` ignoring handles. "none" below 3 points."""
    if len(points) < 3:
        return "none"
    coords = ", ".join(f"{_fmt(p.x, precision)}% {_fmt(p.y, precision)}%" for p in points)
    return f"polygon({coords})"


def export_css(points: Sequence[Point], width: float, height: float, is_closed: bool) -> str:
    """CSS rule for a ``width`` x ``height`` element, with the polygon fallback commented out."""
    clip_path = to_css_clip_path(points, width, height, is_closed)
    polygon = to_polygon_fallback(points, precision=EXPORT_PRECISION)
    return (
        ".clipped-element {\n"
        f"  /* For {_fmt(width)}x{_fmt(height)}px elements */\n"
        f"  clip-path: {clip_path};\n"
        "\n"
        "  /* Alternative polygon (no curves, for older browsers) */\n"
        f"  /* clip-path: {polygon}; */\n"
        "}"
    )


def export_svg(points: Sequence[Point], width: float, height: float, is_closed: bool) -> str:
    """Standalone SVG document. Open or degenerate shapes get a placeholder comment."""
    w, h = _fmt(width), _fmt(height)
    header = f'<svg width="{w}" height="{h}" viewBox="0 0 {w} {h}" xmlns="http://www.w3.org/2000/svg">'
    if len(points) < 2:
        body = "  <!-- Add at least 2 points to generate a path -->"
    elif not is_closed:
        body = "  <!-- Close the shape to generate a path -->"
    else:
        d = to_svg_path_data(points, width, height, is_closed, precision=EXPORT_PRECISION)
        body = f'  <path d="{d}" fill="currentColor" />'
    return f"{header}\n{body}\n</svg>"


def _as_cubic(seg: CubicBezier | QuadraticBezier | Line | Arc) -> tuple[complex, complex, complex, complex]:
    if isinstance(seg, CubicBezier):
        return (seg.start, seg.control1, seg.control2, seg.end)
    if isinstance(seg, QuadraticBezier):
        # Degree elevation
        c1 = seg.start + 2.0 / 3.0 * (seg.control - seg.start)
        c2 = seg.end + 2.0 / 3.0 * (seg.control - seg.end)
        return (seg.start, c1, c2, seg.end)
    if isinstance(seg, Line):
        return (seg.start, seg.start, seg.end, seg.end)
    # Arcs are approximated by their chord
    logger.debug("Approximating %s by a straight segment", type(seg).__name__)
    return (seg.start, seg.start, seg.end, seg.end)


def parse_svg_path_data(d: str, width: float, height: float) -> tuple[tuple[Point, ...], bool]:
    """Convert an SVG path string (pixel coordinates) into editor points.

    Only the first subpath is imported. Returns ``((), False)`` for input that
    cannot be parsed or has no segments.
    """
    if not d.strip() or width <= 0 or height <= 0:
        return (), False
    try:
        path = parse_path(d)
    except Exception as e:
        logger.warning("Failed to parse path data: %s", e)
        return (), False
    if len(path) == 0:
        return (), False

    cubics: list[tuple[complex, complex, complex, complex]] = []
    for seg in path:
        if cubics and abs(seg.start - cubics[-1][3]) > _CLOSE_EPS:
            logger.warning("Path has multiple subpaths; importing the first only")
            break
        if isinstance(seg, Line) and abs(seg.end - seg.start) <= _CLOSE_EPS:
            continue
        cubics.append(_as_cubic(seg))
    if not cubics:
        return (), False

    # Z must terminate the imported subpath, not a later one
    first = re.split(r"[Mm]", d.strip()[1:], maxsplit=1)[0]
    closed = "z" in first.lower() and abs(cubics[-1][3] - cubics[0][0]) <= _CLOSE_EPS

    def pct(z: complex) -> tuple[float, float]:
        return (z.real / width * 100.0, z.imag / height * 100.0)

    # Vertex i starts segment i; open paths add the final end vertex
    vertices = [c[0] for c in cubics]
    if not closed:
        vertices.append(cubics[-1][3])
    n = len(vertices)

    handles_in: list[Vec2 | None] = [None] * n
    handles_out: list[Vec2 | None] = [None] * n
    for i, (start, c1, c2, end) in enumerate(cubics):
        j = (i + 1) % n
        sx, sy = pct(start)
        ex, ey = pct(vertices[j])
        c1x, c1y = pct(c1)
        c2x, c2y = pct(c2)
        handles_out[i] = Vec2(x=c1x - sx, y=c1y - sy)
        handles_in[j] = Vec2(x=c2x - ex, y=c2y - ey)

    points: list[Point] = []
    for i, z in enumerate(vertices):
        x, y = pct(z)
        h_in = handles_in[i]
        h_out = handles_out[i]
        # Endpoints of an open path carry one free handle; mirror it
        if h_in is None and h_out is not None:
            h_in = -h_out
        if h_out is None and h_in is not None:
            h_out = -h_in
        h_in = h_in or Vec2()
        h_out = h_out or Vec2()
        mirrored = (
            abs(h_in.x + h_out.x) <= _MIRROR_EPS
            and abs(h_in.y + h_out.y) <= _MIRROR_EPS
            and h_out.length() > _MIRROR_EPS
        )
        points.append(Point(x=x, y=y, handle_in=h_in, handle_out=h_out, is_mirrored=mirrored))

    logger.debug("Imported %d points from path data (closed=%s)", len(points), closed)
    return tuple(points), closed and len(points) >= 3
