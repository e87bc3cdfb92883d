"""
Route selection across endpoint candidates.

Evaluates every (from, to) candidate pair, synthesizes and scores a route
for each, and keeps the cheapest. When nothing can be evaluated the
previous result is returned unchanged, so a connector never loses its
route because of a momentarily invalid frame.
"""

from typing import Mapping, Optional, Sequence

from .candidates import endpoint_candidates
from .models import (
    AnchorSide,
    Connector,
    EndpointDrag,
    ResolvedEndpoint,
    RouteResult,
    RoutingObstacle,
    ShapeGeometry,
    ShapeKind,
)
from .obstacles import HIT_PADDING, cull_obstacles
from .scoring import score_direction_alignment, score_route
from .synthesizer import synthesize
from .tracer import RouteTrace

# =============================================================================
# ROUTING CONFIGURATION - selection
# =============================================================================

# Nudge toward keeping the anchor an endpoint is already attached to
ANCHOR_CHANGE_PENALTY = 14

# Discourages (without forbidding) connecting a shape to itself
SAME_OBJECT_PENALTY = 300

# =============================================================================


def _is_self_loop(from_endpoint: ResolvedEndpoint, to_endpoint: ResolvedEndpoint) -> bool:
    return (
        from_endpoint.connected
        and to_endpoint.connected
        and from_endpoint.bound_object_id == to_endpoint.bound_object_id
        and from_endpoint.anchor == to_endpoint.anchor
    )


def _stability_penalty(
    endpoint: ResolvedEndpoint, preferred: Optional[AnchorSide]
) -> float:
    if endpoint.connected and preferred is not None and endpoint.anchor != preferred:
        return ANCHOR_CHANGE_PENALTY
    return 0


def solve(
    from_candidates: Sequence[ResolvedEndpoint],
    to_candidates: Sequence[ResolvedEndpoint],
    obstacles: Sequence[RoutingObstacle],
    preferred_from_anchor: Optional[AnchorSide] = None,
    preferred_to_anchor: Optional[AnchorSide] = None,
    previous_result: Optional[RouteResult] = None,
    trace: Optional[RouteTrace] = None,
) -> Optional[RouteResult]:
    """
    Pick the best route over all candidate endpoint pairs.

    Pairs are visited from-major in candidate order and compared with a
    strict '<', so on an exact tie the first pair visited wins.

    Args:
        from_candidates: Candidates for the start of the connector
        to_candidates: Candidates for the end of the connector
        obstacles: Nearby obstacles (culled further for each pair)
        preferred_from_anchor: Anchor the start is currently attached to
        preferred_to_anchor: Anchor the end is currently attached to
        previous_result: Last result for this connector
        trace: Optional RouteTrace that records every pair

    Returns:
        The cheapest RouteResult, or ``previous_result`` if no pair could be
        evaluated.
    """
    best: Optional[RouteResult] = None
    best_score = float("inf")

    for from_candidate in from_candidates:
        for to_candidate in to_candidates:
            if _is_self_loop(from_candidate, to_candidate):
                if trace is not None:
                    trace.add_skip(from_candidate, to_candidate)
                continue

            pair_obstacles = cull_obstacles(obstacles, from_candidate, to_candidate)
            geometry = synthesize(
                from_candidate, to_candidate, pair_obstacles, HIT_PADDING
            )

            route_score = score_route(geometry.points, pair_obstacles)
            alignment = score_direction_alignment(
                from_candidate.point,
                to_candidate.point,
                from_candidate.direction,
                to_candidate.direction,
            )
            stability = _stability_penalty(
                from_candidate, preferred_from_anchor
            ) + _stability_penalty(to_candidate, preferred_to_anchor)
            same_object = 0
            if (
                from_candidate.connected
                and to_candidate.connected
                and from_candidate.bound_object_id == to_candidate.bound_object_id
            ):
                same_object = SAME_OBJECT_PENALTY

            score = route_score + alignment + stability + same_object

            evaluation = None
            if trace is not None:
                evaluation = trace.add_evaluation(
                    from_candidate,
                    to_candidate,
                    obstacle_count=len(pair_obstacles),
                    route_score=route_score,
                    alignment_penalty=alignment,
                    stability_penalty=stability,
                    same_object_penalty=same_object,
                    bends=geometry.bends,
                )

            if score < best_score:
                best_score = score
                best = RouteResult(
                    from_endpoint=from_candidate,
                    to_endpoint=to_candidate,
                    geometry=geometry,
                )
                if evaluation is not None:
                    trace.mark_selected(evaluation)

    if best is None:
        if trace is not None:
            trace.used_previous = True
        return previous_result
    return best


def solve_connector(
    connector: Connector,
    geometry_lookup: Mapping[str, ShapeGeometry],
    kind_lookup: Mapping[str, ShapeKind],
    obstacles: Sequence[RoutingObstacle],
    active_drag: Optional[EndpointDrag] = None,
    previous_result: Optional[RouteResult] = None,
    trace: Optional[RouteTrace] = None,
) -> Optional[RouteResult]:
    """
    Route one connector end to end.

    Builds both candidate lists (honoring an active endpoint drag) and runs
    solve() with the connector's current anchors as the preferred ones.

    Example:
        >>> geometry = {"a": ShapeGeometry(0, 0, 100, 60),
        ...             "b": ShapeGeometry(300, 0, 100, 60)}
        >>> kinds = {"a": BOX, "b": BOX}
        >>> connector = Connector(
        ...     "c1", ConnectorEndpointSpec("a"), ConnectorEndpointSpec("b")
        ... )
        >>> result = solve_connector(connector, geometry, kinds, [])
        >>> result.from_endpoint.anchor, result.to_endpoint.anchor
        (<AnchorSide.RIGHT: 'right'>, <AnchorSide.LEFT: 'left'>)
    """
    from_candidates = endpoint_candidates(
        connector, "from", geometry_lookup, kind_lookup, active_drag
    )
    to_candidates = endpoint_candidates(
        connector, "to", geometry_lookup, kind_lookup, active_drag
    )
    return solve(
        from_candidates,
        to_candidates,
        obstacles,
        preferred_from_anchor=connector.source.anchor,
        preferred_to_anchor=connector.target.anchor,
        previous_result=previous_result,
        trace=trace,
    )
