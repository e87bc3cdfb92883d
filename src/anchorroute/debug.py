"""
Debug utilities for anchorroute.

Renders a board and its computed routes to a PNG so routing decisions can be
inspected visually: shapes are drawn in their rotated outline, obstacle
boxes in light gray, routes as polylines with arrowheads, anchors as dots
and route midpoints as small rings.

Usage:
    >>> board = parse_scene(text).to_board()
    >>> routes = compute_board_routes(board, RouteCache()).routes
    >>> render_routes_png(board, routes, "routes.png")
"""

import math
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from PIL import Image, ImageDraw

from .board import Board
from .geometry import point_sequence_bounds, rotate_point
from .models import (
    Bounds,
    Ellipse,
    Point,
    Polygon,
    RouteResult,
    Shape,
)
from .obstacles import build_routing_obstacles

# Number of outline samples for ellipses
ELLIPSE_SEGMENTS = 48


def shape_outline(shape: Shape) -> List[Point]:
    """Closed outline of a shape in board coordinates (first point not repeated)."""
    geometry = shape.geometry
    center = geometry.center
    hw = geometry.width / 2
    hh = geometry.height / 2

    if isinstance(shape.kind, Ellipse):
        local = [
            Point(
                center.x + hw * math.cos(2 * math.pi * i / ELLIPSE_SEGMENTS),
                center.y + hh * math.sin(2 * math.pi * i / ELLIPSE_SEGMENTS),
            )
            for i in range(ELLIPSE_SEGMENTS)
        ]
    elif isinstance(shape.kind, Polygon) and len(shape.kind.vertices) >= 3:
        local = [
            Point(geometry.x + u * geometry.width, geometry.y + v * geometry.height)
            for u, v in shape.kind.vertices
        ]
    else:
        local = [
            Point(center.x - hw, center.y - hh),
            Point(center.x + hw, center.y - hh),
            Point(center.x + hw, center.y + hh),
            Point(center.x - hw, center.y + hh),
        ]

    return [rotate_point(p, center, geometry.rotation_deg) for p in local]


class RoutePreviewRenderer:
    """Renders boards and routes as PNG images for debugging."""

    def __init__(self, scale: int = 2, margin: int = 40, show_obstacles: bool = True):
        """
        Initialize the renderer.

        Args:
            scale: Pixels per board unit
            margin: Margin around the content, in board units
            show_obstacles: Draw inflated obstacle boxes
        """
        self.scale = scale
        self.margin = margin
        self.show_obstacles = show_obstacles

        # Colors
        self.bg_color = (255, 255, 255)
        self.shape_fill = (245, 245, 245)
        self.shape_outline = (0, 0, 0)
        self.obstacle_color = (200, 200, 200)
        self.route_color = (30, 90, 200)
        self.anchor_color = (200, 40, 40)
        self.midpoint_color = (40, 160, 60)

    def _content_bounds(
        self, board: Board, routes: Mapping[str, RouteResult]
    ) -> Bounds:
        points: List[Point] = []
        for shape in board.shapes.values():
            points.extend(shape_outline(shape))
        for route in routes.values():
            points.extend(route.geometry.points)
        if not points:
            points = [Point(0, 0), Point(100, 100)]
        return point_sequence_bounds(points, self.margin)

    def render(
        self,
        board: Board,
        routes: Mapping[str, RouteResult],
        output_path: Optional[str] = None,
    ) -> Image.Image:
        """
        Render the board and routes.

        Args:
            board: Shapes to draw
            routes: Connector id -> route
            output_path: If given, the image is also saved there as PNG

        Returns:
            The rendered image.
        """
        bounds = self._content_bounds(board, routes)
        width = max(1, int(math.ceil(bounds.width * self.scale)))
        height = max(1, int(math.ceil(bounds.height * self.scale)))

        img = Image.new("RGB", (width, height), self.bg_color)
        draw = ImageDraw.Draw(img)

        def to_px(p: Point) -> Tuple[float, float]:
            return ((p.x - bounds.left) * self.scale, (p.y - bounds.top) * self.scale)

        if self.show_obstacles:
            for obstacle in build_routing_obstacles(
                board.geometry_lookup, board.kind_lookup
            ):
                b = obstacle.bounds
                draw.rectangle(
                    [to_px(Point(b.left, b.top)), to_px(Point(b.right, b.bottom))],
                    outline=self.obstacle_color,
                )

        for shape in board.shapes.values():
            outline = [to_px(p) for p in shape_outline(shape)]
            draw.polygon(outline, fill=self.shape_fill, outline=self.shape_outline)

        line_width = max(1, self.scale)
        for route in routes.values():
            pixels = [to_px(p) for p in route.geometry.points]
            for p1, p2 in zip(pixels, pixels[1:]):
                draw.line([p1, p2], fill=self.route_color, width=line_width)
            self._draw_arrowhead(draw, pixels[-2], pixels[-1])

            for endpoint in (route.from_endpoint, route.to_endpoint):
                if endpoint.connected:
                    self._draw_dot(draw, to_px(endpoint.point), 3, self.anchor_color)
            self._draw_ring(draw, to_px(route.geometry.mid_point), 4)

        if output_path is not None:
            img.save(Path(output_path), "PNG")
        return img

    def _draw_dot(self, draw: ImageDraw.ImageDraw, center, radius: float, color):
        r = radius * self.scale
        x, y = center
        draw.ellipse([x - r, y - r, x + r, y + r], fill=color)

    def _draw_ring(self, draw: ImageDraw.ImageDraw, center, radius: float):
        r = radius * self.scale
        x, y = center
        draw.ellipse([x - r, y - r, x + r, y + r], outline=self.midpoint_color)

    def _draw_arrowhead(self, draw: ImageDraw.ImageDraw, start, end):
        """Draw an arrowhead at ``end`` pointing away from ``start``."""
        x1, y1 = start
        x2, y2 = end
        angle = math.atan2(y2 - y1, x2 - x1)
        size = 8 * self.scale
        spread = math.pi / 7
        ax1 = x2 - size * math.cos(angle - spread)
        ay1 = y2 - size * math.sin(angle - spread)
        ax2 = x2 - size * math.cos(angle + spread)
        ay2 = y2 - size * math.sin(angle + spread)
        draw.polygon([(x2, y2), (ax1, ay1), (ax2, ay2)], fill=self.route_color)


def render_routes_png(
    board: Board,
    routes: Dict[str, RouteResult],
    output_path: str,
    **kwargs,
) -> str:
    """
    Convenience function to render routes to a PNG file.

    Args:
        board: Shapes to draw
        routes: Connector id -> route
        output_path: Destination path
        **kwargs: Passed to RoutePreviewRenderer

    Returns:
        The output path.
    """
    RoutePreviewRenderer(**kwargs).render(board, routes, output_path)
    return output_path
