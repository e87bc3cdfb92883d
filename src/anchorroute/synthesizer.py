"""
Route synthesis between two resolved endpoints.

Builds a bounded set of orthogonal polylines between a "from" and a "to"
endpoint:
- Lead segments that leave/enter anchored endpoints perpendicular to the shape
- Direct, L-shaped and Z-shaped bridges between the lead points
- Detour bridges that loop around the pair's bounding box on each side

The candidates are scored with score_route and the cheapest one is kept.
"""

from typing import List, Optional, Sequence

from .anchors import anchor_direction
from .geometry import (
    is_axis_aligned,
    path_mid_point,
    point_sequence_bounds,
    route_end_directions,
    simplify_route_points,
)
from .models import Point, ResolvedEndpoint, RouteGeometry, RoutingObstacle
from .scoring import score_direction_alignment, score_route

# =============================================================================
# ROUTING CONFIGURATION - synthesis
# =============================================================================

# Length of the perpendicular lead segment at an anchored endpoint
LEAD_DISTANCE = 30

# Detour offset = clamp(DETOUR_BASE + DETOUR_SCALE * span, DETOUR_MIN, DETOUR_MAX)
DETOUR_BASE = 48
DETOUR_SCALE = 0.2
DETOUR_MIN = 52
DETOUR_MAX = 200

# Extra offset used when a straight route must be forced to bend
DETOUR_RETRY_STEP = 24

# =============================================================================


def detour_distance(start: Point, end: Point) -> float:
    """Offset of the detour lines beyond the start/end bounding box."""
    span = max(abs(start.x - end.x), abs(start.y - end.y))
    return max(DETOUR_MIN, min(DETOUR_MAX, DETOUR_BASE + span * DETOUR_SCALE))


def _route_key(points: Sequence[Point]) -> str:
    return "|".join(f"{round(p.x * 10) / 10},{round(p.y * 10) / 10}" for p in points)


def _detour_bridges(start: Point, end: Point, detour: float) -> List[List[Point]]:
    """Bridges looping via the top, bottom, left and right of the pair's box."""
    left_x = min(start.x, end.x) - detour
    right_x = max(start.x, end.x) + detour
    top_y = min(start.y, end.y) - detour
    bottom_y = max(start.y, end.y) + detour
    return [
        [start, Point(start.x, top_y), Point(end.x, top_y), end],
        [start, Point(start.x, bottom_y), Point(end.x, bottom_y), end],
        [start, Point(left_x, start.y), Point(left_x, end.y), end],
        [start, Point(right_x, start.y), Point(right_x, end.y), end],
    ]


def bridge_candidates(start: Point, end: Point, detour: float) -> List[List[Point]]:
    """
    Generate orthogonal bridge paths between two points.

    Args:
        start: First point of every bridge
        end: Last point of every bridge
        detour: Offset of the detour lines beyond the bounding box

    Returns:
        Simplified, de-duplicated bridges in a fixed order: direct (only
        when already axis-aligned), two L shapes, two Z shapes, then the
        four detours (top, bottom, left, right).
    """
    mid_x = (start.x + end.x) / 2
    mid_y = (start.y + end.y) / 2

    routes: List[List[Point]] = []
    if is_axis_aligned(start, end):
        routes.append([start, end])

    routes.extend(
        [
            [start, Point(end.x, start.y), end],
            [start, Point(start.x, end.y), end],
            [start, Point(mid_x, start.y), Point(mid_x, end.y), end],
            [start, Point(start.x, mid_y), Point(end.x, mid_y), end],
        ]
    )
    routes.extend(_detour_bridges(start, end, detour))

    unique = {}
    for candidate in routes:
        simplified = simplify_route_points(candidate)
        unique.setdefault(_route_key(simplified), simplified)
    return list(unique.values())


def _lead_point(endpoint: ResolvedEndpoint, direction: Optional[Point]) -> Optional[Point]:
    if direction is None:
        return None
    return Point(
        endpoint.point.x + direction.x * LEAD_DISTANCE,
        endpoint.point.y + direction.y * LEAD_DISTANCE,
    )


def _full_route(
    start: Point,
    start_lead: Optional[Point],
    bridge: Sequence[Point],
    end_lead: Optional[Point],
    end: Point,
) -> List[Point]:
    points = [start]
    if start_lead is not None:
        points.append(start_lead)
    points.extend(bridge[1:-1])
    if end_lead is not None:
        points.append(end_lead)
    points.append(end)
    return simplify_route_points(points)


def synthesize(
    from_endpoint: ResolvedEndpoint,
    to_endpoint: ResolvedEndpoint,
    obstacles: Sequence[RoutingObstacle],
    padding: float,
) -> RouteGeometry:
    """
    Build the best orthogonal route between two resolved endpoints.

    Args:
        from_endpoint: Resolved start of the connector
        to_endpoint: Resolved end of the connector
        obstacles: Obstacles to avoid (already culled for this pair)
        padding: Padding added around the route's bounds

    Returns:
        RouteGeometry of the cheapest candidate. When an anchor would be
        violated by a perfectly straight route, a detour is forced instead.
    """
    start = from_endpoint.point
    end = to_endpoint.point
    from_direction = from_endpoint.direction or anchor_direction(from_endpoint.anchor)
    to_direction = to_endpoint.direction or anchor_direction(to_endpoint.anchor)

    start_lead = _lead_point(from_endpoint, from_direction)
    end_lead = _lead_point(to_endpoint, to_direction)
    route_start = start_lead or start
    route_end = end_lead or end
    detour = detour_distance(route_start, route_end)

    candidates = [
        _full_route(start, start_lead, bridge, end_lead, end)
        for bridge in bridge_candidates(route_start, route_end, detour)
    ]

    best_points = candidates[0]
    best_score = score_route(best_points, obstacles)
    for candidate in candidates[1:]:
        candidate_score = score_route(candidate, obstacles)
        if candidate_score < best_score:
            best_score = candidate_score
            best_points = candidate

    penalty = score_direction_alignment(start, end, from_direction, to_direction)
    if penalty > 0 and len(best_points) == 2:
        # Straight through an anchor that faces the wrong way: loop around.
        # Detours parallel to the route collapse back to a line, so take the
        # first one that actually bends.
        for forced in _detour_bridges(
            route_start, route_end, detour + DETOUR_RETRY_STEP
        ):
            points = _full_route(start, start_lead, forced, end_lead, end)
            if len(points) > 2:
                best_points = points
                break

    start_direction, end_direction = route_end_directions(best_points)
    return RouteGeometry(
        points=tuple(best_points),
        bounds=point_sequence_bounds(best_points, padding),
        mid_point=path_mid_point(best_points),
        start_direction=start_direction,
        end_direction=end_direction,
    )
