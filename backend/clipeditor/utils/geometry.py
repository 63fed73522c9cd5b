"""Leaf-node bezier geometry: evaluation, flattening, hit-testing, splitting. No engine imports.

All curve functions take control points as (x, y) pairs. Path-level helpers take
percent-space ``Point`` models plus the image size and work in absolute pixels.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from clipeditor.models.path import Point

XY = tuple[float, float]

# Sample counts per cubic segment
_FLATTEN_SEGMENTS = 10
_INTERIOR_SEGMENTS = 20
_NEAREST_SAMPLES = 50


@dataclass(frozen=True)
class CubicSegment:
    p0: XY
    p1: XY
    p2: XY
    p3: XY

    def as_tuple(self) -> tuple[XY, XY, XY, XY]:
        return (self.p0, self.p1, self.p2, self.p3)


@dataclass(frozen=True)
class CurveHit:
    """Closest sample on a single curve."""

    t: float
    distance: float
    point: XY


@dataclass(frozen=True)
class SegmentHit:
    """Closest hit across all segments of a path."""

    segment_index: int
    t: float
    point: XY


def evaluate_cubic_bezier(p0: XY, p1: XY, p2: XY, p3: XY, t: float) -> XY:
    """Bernstein-form evaluation at parameter t (0-1)."""
    mt = 1.0 - t
    mt2 = mt * mt
    t2 = t * t
    a = mt2 * mt
    b = 3.0 * mt2 * t
    c = 3.0 * mt * t2
    d = t2 * t
    return (
        a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
        a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
    )


def flatten(p0: XY, p1: XY, p2: XY, p3: XY, segments: int = _FLATTEN_SEGMENTS) -> NDArray[np.float64]:
    """Sample the curve at segments+1 uniform parameters, endpoints included. Returns Nx2."""
    t = np.linspace(0.0, 1.0, segments + 1)[:, None]
    mt = 1.0 - t
    ctrl = np.asarray([p0, p1, p2, p3], dtype=np.float64)
    pts = (
        (mt**3) * ctrl[0]
        + (3.0 * mt**2 * t) * ctrl[1]
        + (3.0 * mt * t**2) * ctrl[2]
        + (t**3) * ctrl[3]
    )
    # Pin endpoints so t=0 / t=1 are exact
    pts[0] = ctrl[0]
    pts[-1] = ctrl[3]
    return pts


def point_in_polygon(x: float, y: float, polygon: NDArray[np.float64] | Sequence[XY]) -> bool:
    """Even-odd ray casting. The polygon is implicitly closed."""
    poly = np.asarray(polygon, dtype=np.float64)
    n = len(poly)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = poly[i]
        xj, yj = poly[j]
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def path_segments(points: Sequence[Point], is_closed: bool) -> Iterator[tuple[int, Point, Point]]:
    """Yield (index, start, end) for each segment; the closing segment only when closed."""
    n = len(points)
    if n < 2:
        return
    count = n if is_closed else n - 1
    for i in range(count):
        yield i, points[i], points[(i + 1) % n]


def segment_control_points(a: Point, b: Point, width: float, height: float) -> CubicSegment:
    """Absolute pixel control points of the segment from point a to point b."""
    sx = width / 100.0
    sy = height / 100.0
    cx1, cy1 = a.control_out()
    cx2, cy2 = b.control_in()
    return CubicSegment(
        p0=(a.x * sx, a.y * sy),
        p1=(cx1 * sx, cy1 * sy),
        p2=(cx2 * sx, cy2 * sy),
        p3=(b.x * sx, b.y * sy),
    )


def point_in_closed_path(
    x: float,
    y: float,
    points: Sequence[Point],
    width: float,
    height: float,
    is_closed: bool,
    segments: int = _INTERIOR_SEGMENTS,
) -> bool:
    """Test whether pixel (x, y) lies inside the filled closed path."""
    if not is_closed or len(points) < 3:
        return False

    chunks: list[NDArray[np.float64]] = []
    for i, a, b in path_segments(points, True):
        flat = flatten(*segment_control_points(a, b, width, height).as_tuple(), segments=segments)
        # Shared endpoint already emitted by the previous segment
        chunks.append(flat if i == 0 else flat[1:])
    polygon = np.concatenate(chunks)
    return point_in_polygon(x, y, polygon)


def nearest_point_on_curve(
    x: float,
    y: float,
    p0: XY,
    p1: XY,
    p2: XY,
    p3: XY,
    threshold: float,
) -> CurveHit | None:
    """Coarse global search over uniform samples. None if the best sample is beyond threshold."""
    samples = flatten(p0, p1, p2, p3, segments=_NEAREST_SAMPLES)
    dists = np.hypot(samples[:, 0] - x, samples[:, 1] - y)
    # argmin keeps the first of equal minima
    best = int(np.argmin(dists))
    min_dist = float(dists[best])
    if min_dist > threshold:
        return None
    return CurveHit(
        t=best / _NEAREST_SAMPLES,
        distance=min_dist,
        point=(float(samples[best, 0]), float(samples[best, 1])),
    )


def find_hit_segment(
    x: float,
    y: float,
    points: Sequence[Point],
    width: float,
    height: float,
    is_closed: bool,
    threshold: float,
) -> SegmentHit | None:
    """Find the segment closest to pixel (x, y) within threshold, lowest index on ties."""
    best: SegmentHit | None = None
    best_dist = float("inf")
    for i, a, b in path_segments(points, is_closed):
        seg = segment_control_points(a, b, width, height)
        hit = nearest_point_on_curve(x, y, *seg.as_tuple(), threshold=threshold)
        if hit is not None and hit.distance < best_dist:
            best_dist = hit.distance
            best = SegmentHit(segment_index=i, t=hit.t, point=hit.point)
    return best


def _lerp(a: XY, b: XY, t: float) -> XY:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def split_cubic_bezier(p0: XY, p1: XY, p2: XY, p3: XY, t: float) -> tuple[CubicSegment, CubicSegment]:
    """De Casteljau subdivision at t. Returns (left, right) sharing the split point."""
    p01 = _lerp(p0, p1, t)
    p12 = _lerp(p1, p2, t)
    p23 = _lerp(p2, p3, t)
    p012 = _lerp(p01, p12, t)
    p123 = _lerp(p12, p23, t)
    mid = _lerp(p012, p123, t)
    return (
        CubicSegment(p0=p0, p1=p01, p2=p012, p3=mid),
        CubicSegment(p0=mid, p1=p123, p2=p23, p3=p3),
    )
