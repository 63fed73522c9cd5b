"""Tests for path serialization, export documents and SVG path import."""

from __future__ import annotations

import pytest

from clipeditor.models.path import Point, Vec2
from clipeditor.svg.path_data import (
    export_css,
    export_svg,
    parse_svg_path_data,
    to_css_clip_path,
    to_polygon_fallback,
    to_svg_path_data,
)


def _curvy() -> list[Point]:
    return [
        Point(id="a", x=25, y=25, handle_in=Vec2(x=-5, y=0), handle_out=Vec2(x=5, y=0)),
        Point(id="b", x=75, y=25, handle_in=Vec2(x=0, y=-5), handle_out=Vec2(x=0, y=5), is_mirrored=True),
        Point(id="c", x=50, y=75, handle_in=Vec2(x=10, y=0), handle_out=Vec2(x=-2.5, y=-10), is_mirrored=False),
    ]


# ---------------------------------------------------------------------------
# SVG path data
# ---------------------------------------------------------------------------

class TestSvgPathData:
    def test_open_two_points(self):
        pts = [
            Point(x=10, y=20, handle_out=Vec2(x=5, y=0)),
            Point(x=50, y=20, handle_in=Vec2(x=-5, y=0)),
        ]
        assert to_svg_path_data(pts, 100, 100, False) == "M 10 20 C 15 20, 45 20, 50 20"

    def test_closed_adds_closing_segment(self, triangle_points):
        d = to_svg_path_data(triangle_points, 100, 100, True)
        assert d == "M 20 20 C 20 20, 80 20, 80 20 C 80 20, 50 80, 50 80 C 50 80, 20 20, 20 20 Z"

    def test_scales_to_pixels(self, triangle_points):
        d = to_svg_path_data(triangle_points, 200, 50, False)
        assert d.startswith("M 40 10 C 40 10, 160 10, 160 10")

    def test_fewer_than_two_points(self):
        assert to_svg_path_data([], 100, 100, False) == ""
        assert to_svg_path_data([Point(x=1, y=1)], 100, 100, True) == ""

    def test_fixed_precision(self):
        pts = [Point(x=10 / 3, y=0, handle_in=Vec2(), handle_out=Vec2()), Point(x=50, y=50)]
        d = to_svg_path_data(pts, 100, 100, False, precision=2)
        assert d.startswith("M 3.33 0.00 C 3.33 0.00")

    def test_segment_count(self):
        pts = _curvy()
        assert to_svg_path_data(pts, 100, 100, False).count("C ") == 2
        assert to_svg_path_data(pts, 100, 100, True).count("C ") == 3


# ---------------------------------------------------------------------------
# CSS / polygon
# ---------------------------------------------------------------------------

class TestClipPath:
    def test_closed_shape(self, triangle_points):
        css = to_css_clip_path(triangle_points, 100, 100, True)
        assert css.startswith("path('M 20.00 20.00 C")
        assert css.endswith(" Z')")

    def test_open_shape_is_none(self, triangle_points):
        assert to_css_clip_path(triangle_points, 100, 100, False) == "none"

    def test_degenerate_is_none(self):
        assert to_css_clip_path([Point(x=1, y=1)], 100, 100, True) == "none"

    def test_polygon_fallback(self, triangle_points):
        assert to_polygon_fallback(triangle_points) == "polygon(20% 20%, 80% 20%, 50% 80%)"
        assert to_polygon_fallback(triangle_points, precision=2) == (
            "polygon(20.00% 20.00%, 80.00% 20.00%, 50.00% 80.00%)"
        )

    def test_polygon_needs_three_points(self, triangle_points):
        assert to_polygon_fallback(triangle_points[:2]) == "none"


class TestExportDocuments:
    def test_css_rule(self, triangle_points):
        css = export_css(triangle_points, 400, 300, True)
        assert css.startswith(".clipped-element {\n")
        assert "/* For 400x300px elements */" in css
        assert "  clip-path: path('M 80.00 60.00 C" in css
        assert "/* clip-path: polygon(20.00% 20.00%, 80.00% 20.00%, 50.00% 80.00%); */" in css
        assert css.endswith("}")

    def test_css_open_shape(self, triangle_points):
        assert "  clip-path: none;" in export_css(triangle_points, 400, 300, False)

    def test_svg_document(self, triangle_points):
        svg = export_svg(triangle_points, 400, 300, True)
        lines = svg.splitlines()
        assert lines[0] == '<svg width="400" height="300" viewBox="0 0 400 300" xmlns="http://www.w3.org/2000/svg">'
        assert lines[1].startswith('  <path d="M 80.00 60.00 C')
        assert lines[1].endswith(' Z" fill="currentColor" />')
        assert lines[2] == "</svg>"

    def test_svg_open_shape_placeholder(self, triangle_points):
        svg = export_svg(triangle_points, 400, 300, False)
        assert "<path" not in svg
        assert "<!-- Close the shape to generate a path -->" in svg

    def test_svg_degenerate_placeholder(self):
        svg = export_svg([], 400, 300, False)
        assert "<!-- Add at least 2 points to generate a path -->" in svg


# ---------------------------------------------------------------------------
# Import (svgpathtools)
# ---------------------------------------------------------------------------

class TestParse:
    def test_closed_round_trip_regenerates_same_data(self):
        pts = _curvy()
        d = to_svg_path_data(pts, 100, 100, True, precision=2)
        parsed, closed = parse_svg_path_data(d, 100, 100)
        assert closed
        assert len(parsed) == 3
        assert to_svg_path_data(parsed, 100, 100, closed, precision=2) == d

    def test_open_round_trip_regenerates_same_data(self):
        pts = _curvy()
        d = to_svg_path_data(pts, 200, 100, False, precision=2)
        parsed, closed = parse_svg_path_data(d, 200, 100)
        assert not closed
        assert len(parsed) == 3
        assert to_svg_path_data(parsed, 200, 100, closed, precision=2) == d

    def test_positions_and_mirror_flags(self):
        parsed, _ = parse_svg_path_data(to_svg_path_data(_curvy(), 100, 100, True), 100, 100)
        assert [c for p in parsed for c in (p.x, p.y)] == pytest.approx([25, 25, 75, 25, 50, 75])
        assert [p.is_mirrored for p in parsed] == [True, True, False]
        # Fresh ids on import
        assert {p.id for p in parsed}.isdisjoint({"a", "b", "c"})

    def test_lines_become_zero_handles(self):
        parsed, closed = parse_svg_path_data("M 0 0 L 50 0 L 50 50 Z", 100, 100)
        assert closed
        assert [c for p in parsed for c in (p.x, p.y)] == pytest.approx([0, 0, 50, 0, 50, 50])
        assert all(p.handle_in.length() == 0 and p.handle_out.length() == 0 for p in parsed)

    def test_quadratic_is_elevated(self):
        parsed, _ = parse_svg_path_data("M 0 0 Q 50 100 100 0", 100, 100)
        assert len(parsed) == 2
        assert parsed[0].handle_out.x == pytest.approx(100 / 3)
        assert parsed[0].handle_out.y == pytest.approx(200 / 3)

    def test_first_subpath_only(self):
        parsed, _ = parse_svg_path_data("M 0 0 L 10 0 L 10 10 Z M 50 50 L 60 50", 100, 100)
        assert len(parsed) == 3

    def test_close_in_later_subpath_leaves_first_open(self):
        parsed, closed = parse_svg_path_data("M 0 0 L 10 0 L 10 10 L 0 0 M 20 20 L 30 30 Z", 100, 100)
        assert not closed
        assert len(parsed) == 4

    def test_closed_first_subpath_survives_later_subpaths(self):
        _, closed = parse_svg_path_data("M 0 0 L 10 0 L 10 10 Z M 50 50 L 60 50", 100, 100)
        assert closed

    @pytest.mark.parametrize("d", ["", "   ", "not a path", "M 10"])
    def test_invalid_input(self, d):
        assert parse_svg_path_data(d, 100, 100) == ((), False)
