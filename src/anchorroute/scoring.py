"""
Route scoring.

Scores are lower-is-better. A route's score is dominated by how many
obstacles it crosses, then by how many bends it has, then by its length.
A separate alignment term penalizes connectors that leave or enter an
anchor against its outward direction.
"""

import math
from typing import Optional, Sequence

from .geometry import AXIS_EPSILON, VECTOR_EPSILON, dot, path_length
from .models import Bounds, Point, RoutingObstacle

# =============================================================================
# ROUTING CONFIGURATION - scoring weights
# =============================================================================

# Cost of one segment crossing one obstacle. Must dwarf any realistic
# bend + length total so that a crossing route never wins over a clear one.
INTERSECTION_PENALTY = 1_000_000

# Cost of each bend (interior route point)
BEND_PENALTY = 120

# Segments this close to an obstacle edge do not count as crossing it
OBSTACLE_EDGE_MARGIN = 0.8

# Base and slope of the penalty for leaving/entering an anchor backwards
REVERSED_DIRECTION_PENALTY = 2500
REVERSED_DIRECTION_SLOPE = 1400

# Scale of the penalty for imperfect (but not reversed) alignment
MISALIGNMENT_PENALTY = 120

# =============================================================================


def segment_intersects_bounds(start: Point, end: Point, bounds: Bounds) -> bool:
    """
    Check if an axis-aligned segment passes through the inside of a box.

    Segments that only graze an edge (within OBSTACLE_EDGE_MARGIN) do not
    count. Diagonal segments never count.
    """
    margin = OBSTACLE_EDGE_MARGIN
    if abs(start.y - end.y) <= AXIS_EPSILON:
        y = start.y
        if y <= bounds.top + margin or y >= bounds.bottom - margin:
            return False
        left = min(start.x, end.x)
        right = max(start.x, end.x)
        return right > bounds.left + margin and left < bounds.right - margin

    if abs(start.x - end.x) <= AXIS_EPSILON:
        x = start.x
        if x <= bounds.left + margin or x >= bounds.right - margin:
            return False
        top = min(start.y, end.y)
        bottom = max(start.y, end.y)
        return bottom > bounds.top + margin and top < bounds.bottom - margin

    return False


def count_route_intersections(
    points: Sequence[Point], obstacles: Sequence[RoutingObstacle]
) -> int:
    """Count (segment, obstacle) pairs where the segment crosses the obstacle."""
    if len(points) < 2 or not obstacles:
        return 0

    hits = 0
    for i in range(len(points) - 1):
        for obstacle in obstacles:
            if segment_intersects_bounds(points[i], points[i + 1], obstacle.bounds):
                hits += 1
    return hits


def count_bends(points: Sequence[Point]) -> int:
    return max(0, len(points) - 2)


def score_route(points: Sequence[Point], obstacles: Sequence[RoutingObstacle]) -> float:
    """
    Score a candidate route against an obstacle set.

    Args:
        points: Route polyline
        obstacles: Obstacles the route should avoid

    Returns:
        intersections * INTERSECTION_PENALTY + bends * BEND_PENALTY + length
    """
    intersections = count_route_intersections(points, obstacles)
    return (
        intersections * INTERSECTION_PENALTY
        + count_bends(points) * BEND_PENALTY
        + path_length(points)
    )


def _alignment_penalty(alignment: float) -> float:
    if alignment < 0:
        return REVERSED_DIRECTION_PENALTY + abs(alignment) * REVERSED_DIRECTION_SLOPE
    return (1 - alignment) * MISALIGNMENT_PENALTY


def score_direction_alignment(
    from_point: Point,
    to_point: Point,
    from_direction: Optional[Point],
    to_direction: Optional[Point],
) -> float:
    """
    Penalize anchors whose outward direction points away from the connector.

    For the "from" end the connector leaves along ``forward`` (from_point to
    to_point); for the "to" end it leaves the target shape along
    ``-forward``. A negative dot product means the connector must double
    back into the shape.

    Args:
        from_point: Start of the connector
        to_point: End of the connector
        from_direction: Outward direction at the start, if anchored
        to_direction: Outward direction at the end, if anchored

    Returns:
        Sum of the penalties for both ends (0 for coincident points).
    """
    dx = to_point.x - from_point.x
    dy = to_point.y - from_point.y
    length = math.hypot(dx, dy)
    if length <= VECTOR_EPSILON:
        return 0.0

    forward = Point(dx / length, dy / length)
    penalty = 0.0
    if from_direction is not None:
        penalty += _alignment_penalty(dot(from_direction, forward))
    if to_direction is not None:
        penalty += _alignment_penalty(dot(to_direction, Point(-forward.x, -forward.y)))
    return penalty
