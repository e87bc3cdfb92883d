"""
Shape anchor resolution.

Given a shape's geometry, its kind and a requested side, computes the exact
point where a connector attaches and the outward unit direction at that
point. Rays are cast from the shape center in the shape's local
(un-rotated) frame, and the hit point and direction are then rotated into
board space.
"""

import math
from typing import List, Optional, Tuple

from .geometry import ROTATION_EPSILON_DEG, cross, rotate_point, rotate_vector
from .models import (
    AnchorSide,
    Box,
    Ellipse,
    Point,
    Polygon,
    ShapeGeometry,
    ShapeKind,
)

# Denominators at or below this are treated as zero
RAY_EPSILON = 0.000001

_SIDE_DIRECTIONS = {
    AnchorSide.TOP: Point(0.0, -1.0),
    AnchorSide.RIGHT: Point(1.0, 0.0),
    AnchorSide.BOTTOM: Point(0.0, 1.0),
    AnchorSide.LEFT: Point(-1.0, 0.0),
}


def anchor_direction(side: Optional[AnchorSide]) -> Optional[Point]:
    """Un-rotated outward direction for a side, or None without a side."""
    if side is None:
        return None
    return _SIDE_DIRECTIONS[side]


def anchor_direction_for_geometry(side: AnchorSide, geometry: ShapeGeometry) -> Point:
    """Outward direction for a side after applying the shape's rotation."""
    return rotate_vector(_SIDE_DIRECTIONS[side], geometry.rotation_deg)


def _ray_box_exit(direction: Point, half_width: float, half_height: float) -> Point:
    abs_dx = abs(direction.x)
    abs_dy = abs(direction.y)
    t_x = math.inf if abs_dx <= RAY_EPSILON else half_width / abs_dx
    t_y = math.inf if abs_dy <= RAY_EPSILON else half_height / abs_dy
    t = min(t_x, t_y)
    if not math.isfinite(t):
        return Point(0.0, 0.0)
    return Point(direction.x * t, direction.y * t)


def _ray_ellipse_exit(direction: Point, half_width: float, half_height: float) -> Point:
    # Degenerate ellipse collapses to its center
    if half_width <= RAY_EPSILON or half_height <= RAY_EPSILON:
        return Point(0.0, 0.0)
    denominator = (direction.x * direction.x) / (half_width * half_width) + (
        direction.y * direction.y
    ) / (half_height * half_height)
    if denominator <= RAY_EPSILON:
        return Point(0.0, 0.0)
    t = 1.0 / math.sqrt(denominator)
    return Point(direction.x * t, direction.y * t)


def _ray_polygon_exit(direction: Point, vertices: List[Point]) -> Optional[Point]:
    """
    Intersect a ray from the origin with a closed polygon.

    Args:
        direction: Ray direction
        vertices: Polygon vertices relative to the ray origin

    Returns:
        The closest hit, or None if no edge is hit.
    """
    if len(vertices) < 3:
        return None

    best_t = math.inf
    best: Optional[Point] = None
    for i, start in enumerate(vertices):
        end = vertices[(i + 1) % len(vertices)]
        edge = Point(end.x - start.x, end.y - start.y)
        denominator = cross(direction, edge)
        if abs(denominator) <= RAY_EPSILON:
            continue
        t = cross(start, edge) / denominator
        u = cross(start, direction) / denominator
        if t < 0 or u < -RAY_EPSILON or u > 1 + RAY_EPSILON:
            continue
        if t < best_t:
            best_t = t
            best = Point(direction.x * t, direction.y * t)

    return best


def _local_polygon_vertices(kind: Polygon, width: float, height: float) -> List[Point]:
    return [Point((u - 0.5) * width, (v - 0.5) * height) for u, v in kind.vertices]


def _local_anchor_point(
    kind: ShapeKind, direction: Point, geometry: ShapeGeometry
) -> Point:
    half_width = geometry.width / 2
    half_height = geometry.height / 2

    if isinstance(kind, Ellipse):
        return _ray_ellipse_exit(direction, half_width, half_height)
    if isinstance(kind, Polygon):
        vertices = _local_polygon_vertices(kind, geometry.width, geometry.height)
        hit = _ray_polygon_exit(direction, vertices)
        if hit is not None:
            return hit
        return _ray_box_exit(direction, half_width, half_height)
    if isinstance(kind, Box):
        return _ray_box_exit(direction, half_width, half_height)

    raise TypeError(f"Unknown shape kind: {kind!r}")


def resolve_anchor(
    geometry: ShapeGeometry, side: AnchorSide, kind: ShapeKind
) -> Tuple[Point, Point]:
    """
    Resolve the attachment point and outward direction for a side of a shape.

    Args:
        geometry: Shape geometry (un-rotated box plus rotation)
        side: Requested anchor side
        kind: Shape kind used for ray-casting

    Returns:
        Tuple of (point, direction) in board space. The direction is the
        side's outward unit vector rotated with the shape.

    Example:
        >>> point, direction = resolve_anchor(
        ...     ShapeGeometry(0, 0, 100, 50), AnchorSide.RIGHT, BOX
        ... )
        >>> point
        Point(x=100.0, y=25.0)
    """
    center = geometry.center
    local_direction = _SIDE_DIRECTIONS[side]
    local = _local_anchor_point(kind, local_direction, geometry)
    point = Point(center.x + local.x, center.y + local.y)
    direction = anchor_direction_for_geometry(side, geometry)

    if abs(geometry.rotation_deg) < ROTATION_EPSILON_DEG:
        return point, direction
    return rotate_point(point, center, geometry.rotation_deg), direction
