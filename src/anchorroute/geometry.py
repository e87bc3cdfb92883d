"""
Shared geometry primitives for connector routing.

Plain functions over Point and Bounds: distances, path measurements,
bounds arithmetic, rotation, and route point simplification.
"""

import math
from typing import List, Sequence, Tuple

from .models import Bounds, Point, ShapeGeometry

# Two route points closer than this are merged
POINT_MERGE_DISTANCE = 0.1

# Tolerance for treating a coordinate delta as zero
AXIS_EPSILON = 0.001

# Magnitudes below this are treated as zero-length vectors
VECTOR_EPSILON = 0.0001

# Rotations smaller than this (degrees) are the identity
ROTATION_EPSILON_DEG = 0.001


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(a.x - b.x, a.y - b.y)


def path_length(points: Sequence[Point]) -> float:
    """Sum of segment lengths along a polyline."""
    if len(points) < 2:
        return 0.0
    return sum(distance(points[i], points[i + 1]) for i in range(len(points) - 1))


def path_mid_point(points: Sequence[Point]) -> Point:
    """
    Get the point at half of the cumulative length of a polyline.

    Args:
        points: Polyline points

    Returns:
        The midpoint, the only point of a single-point path, or the origin
        for an empty path.
    """
    if not points:
        return Point(0.0, 0.0)
    if len(points) == 1:
        return points[0]

    total = path_length(points)
    if total <= VECTOR_EPSILON:
        return points[0]

    half = total / 2
    traversed = 0.0
    for i in range(len(points) - 1):
        start, end = points[i], points[i + 1]
        seg_len = distance(start, end)
        if traversed + seg_len >= half:
            ratio = 0.0 if seg_len <= VECTOR_EPSILON else (half - traversed) / seg_len
            return Point(
                start.x + (end.x - start.x) * ratio,
                start.y + (end.y - start.y) * ratio,
            )
        traversed += seg_len

    return points[-1]


def point_sequence_bounds(points: Sequence[Point], padding: float = 0.0) -> Bounds:
    """Tight bounding box of the points, inflated by padding."""
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return Bounds(
        left=min(xs) - padding,
        top=min(ys) - padding,
        right=max(xs) + padding,
        bottom=max(ys) + padding,
    )


def bounds_between(a: Point, b: Point, padding: float = 0.0) -> Bounds:
    """Box spanned by two points, inflated by padding."""
    return Bounds(
        left=min(a.x, b.x) - padding,
        top=min(a.y, b.y) - padding,
        right=max(a.x, b.x) + padding,
        bottom=max(a.y, b.y) + padding,
    )


def inflate_bounds(bounds: Bounds, padding: float) -> Bounds:
    return Bounds(
        left=bounds.left - padding,
        top=bounds.top - padding,
        right=bounds.right + padding,
        bottom=bounds.bottom + padding,
    )


def normalize_bounds(bounds: Bounds) -> Bounds:
    """Swap edges so that left <= right and top <= bottom."""
    return Bounds(
        left=min(bounds.left, bounds.right),
        top=min(bounds.top, bounds.bottom),
        right=max(bounds.left, bounds.right),
        bottom=max(bounds.top, bounds.bottom),
    )


def bounds_overlap(a: Bounds, b: Bounds) -> bool:
    """Check if two boxes overlap (touching edges count as overlap)."""
    return not (
        a.right < b.left or a.left > b.right or a.bottom < b.top or a.top > b.bottom
    )


def segment_direction(start: Point, end: Point) -> Point:
    """Unit vector from start to end, or +x for a zero-length segment."""
    dx = end.x - start.x
    dy = end.y - start.y
    magnitude = math.hypot(dx, dy)
    if magnitude <= VECTOR_EPSILON:
        return Point(1.0, 0.0)
    return Point(dx / magnitude, dy / magnitude)


def route_end_directions(points: Sequence[Point]) -> Tuple[Point, Point]:
    """
    Get the unit directions of the first and last non-degenerate segments.

    Returns:
        (start_direction, end_direction), each defaulting to +x.
    """
    default = Point(1.0, 0.0)
    if len(points) < 2:
        return default, default

    start_direction = default
    for i in range(len(points) - 1):
        if distance(points[i], points[i + 1]) > VECTOR_EPSILON:
            start_direction = segment_direction(points[i], points[i + 1])
            break

    end_direction = default
    for i in range(len(points) - 1, 0, -1):
        if distance(points[i - 1], points[i]) > VECTOR_EPSILON:
            end_direction = segment_direction(points[i - 1], points[i])
            break

    return start_direction, end_direction


def rotate_vector(vector: Point, rotation_deg: float) -> Point:
    """Rotate a vector by an angle in degrees."""
    if abs(rotation_deg) < ROTATION_EPSILON_DEG:
        return vector
    radians = math.radians(rotation_deg)
    cos = math.cos(radians)
    sin = math.sin(radians)
    return Point(vector.x * cos - vector.y * sin, vector.x * sin + vector.y * cos)


def rotate_point(point: Point, center: Point, rotation_deg: float) -> Point:
    """Rotate a point about a center by an angle in degrees."""
    offset = rotate_vector(Point(point.x - center.x, point.y - center.y), rotation_deg)
    return Point(center.x + offset.x, center.y + offset.y)


def rotated_bounds(geometry: ShapeGeometry) -> Bounds:
    """Axis-aligned bounds of a shape's box after rotation."""
    center = geometry.center
    hw = geometry.width / 2
    hh = geometry.height / 2
    corners = [
        rotate_point(Point(center.x + dx, center.y + dy), center, geometry.rotation_deg)
        for dx, dy in ((-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh))
    ]
    return point_sequence_bounds(corners)


def is_axis_aligned(a: Point, b: Point) -> bool:
    return abs(a.x - b.x) <= AXIS_EPSILON or abs(a.y - b.y) <= AXIS_EPSILON


def simplify_route_points(points: Sequence[Point]) -> List[Point]:
    """
    Remove near-duplicate points and collapse collinear runs.

    Two-point (and shorter) inputs are returned unchanged.

    Args:
        points: Route points in order

    Returns:
        A new list where consecutive points are more than
        POINT_MERGE_DISTANCE apart and no interior point sits on a straight
        horizontal or vertical run.
    """
    if len(points) <= 2:
        return list(points)

    deduped: List[Point] = []
    for point in points:
        if not deduped or distance(deduped[-1], point) > POINT_MERGE_DISTANCE:
            deduped.append(point)

    if len(deduped) <= 2:
        return deduped

    simplified: List[Point] = [deduped[0]]
    for i in range(1, len(deduped) - 1):
        previous = simplified[-1]
        current = deduped[i]
        following = deduped[i + 1]
        collinear_x = (
            abs(current.x - previous.x) <= AXIS_EPSILON
            and abs(following.x - current.x) <= AXIS_EPSILON
        )
        collinear_y = (
            abs(current.y - previous.y) <= AXIS_EPSILON
            and abs(following.y - current.y) <= AXIS_EPSILON
        )
        if collinear_x or collinear_y:
            continue
        simplified.append(current)
    simplified.append(deduped[-1])

    return simplified


def dot(a: Point, b: Point) -> float:
    return a.x * b.x + a.y * b.y


def cross(a: Point, b: Point) -> float:
    return a.x * b.y - a.y * b.x
