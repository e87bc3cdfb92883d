"""Tests for the PNG debug preview."""

import pytest
from PIL import Image

from anchorroute.board import Board
from anchorroute.debug import (
    ELLIPSE_SEGMENTS,
    RoutePreviewRenderer,
    render_routes_png,
    shape_outline,
)
from anchorroute.models import (
    BOX,
    ELLIPSE,
    STAR,
    Point,
    Shape,
    ShapeGeometry,
)
from anchorroute.runtime import RouteCache, compute_board_routes


class TestShapeOutline:
    """Tests for shape_outline."""

    def test_box_corners(self):
        outline = shape_outline(Shape("a", ShapeGeometry(0, 0, 100, 50), BOX))
        assert outline == [Point(0, 0), Point(100, 0), Point(100, 50), Point(0, 50)]

    def test_ellipse_sampled(self):
        outline = shape_outline(Shape("e", ShapeGeometry(0, 0, 100, 50), ELLIPSE))
        assert len(outline) == ELLIPSE_SEGMENTS

    def test_star_vertices(self):
        outline = shape_outline(Shape("s", ShapeGeometry(0, 0, 100, 100), STAR))
        assert len(outline) == 10

    def test_rotated_box_stays_around_center(self):
        outline = shape_outline(Shape("a", ShapeGeometry(0, 0, 100, 50, 90), BOX))
        xs = [p.x for p in outline]
        assert min(xs) == pytest.approx(25)
        assert max(xs) == pytest.approx(75)


class TestRoutePreviewRenderer:
    """Tests for RoutePreviewRenderer."""

    def test_render_returns_image(self, simple_board):
        routes = compute_board_routes(simple_board, RouteCache()).routes
        img = RoutePreviewRenderer(scale=1).render(simple_board, routes)
        assert isinstance(img, Image.Image)
        assert img.width > 0 and img.height > 0

    def test_scale_multiplies_size(self, two_box_board):
        routes = compute_board_routes(two_box_board, RouteCache()).routes
        small = RoutePreviewRenderer(scale=1).render(two_box_board, routes)
        large = RoutePreviewRenderer(scale=2).render(two_box_board, routes)
        assert large.width == 2 * small.width

    def test_route_pixels_drawn(self, two_box_board):
        renderer = RoutePreviewRenderer(scale=1, show_obstacles=False)
        routes = compute_board_routes(two_box_board, RouteCache()).routes
        img = renderer.render(two_box_board, routes)
        colors = {color for _, color in img.getcolors(maxcolors=1 << 16)}
        assert renderer.route_color in colors

    def test_empty_board(self):
        img = RoutePreviewRenderer().render(Board(), {})
        assert img.width > 0

    def test_render_routes_png_writes_file(self, tmp_path, simple_board):
        routes = compute_board_routes(simple_board, RouteCache()).routes
        out = tmp_path / "routes.png"
        assert render_routes_png(simple_board, routes, str(out)) == str(out)
        assert out.exists()
        with Image.open(out) as img:
            assert img.format == "PNG"
