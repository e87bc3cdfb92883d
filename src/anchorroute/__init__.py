"""
anchorroute - Orthogonal connector routing for whiteboards

A Python library that picks anchor sides for connectors between shapes and
routes them as orthogonal polylines around nearby obstacles.

Example:
    >>> from anchorroute import parse_scene, compute_board_routes, RouteCache
    >>> board = parse_scene('''
    ...     shape A box 0 0 100 60
    ...     shape B box 300 0 100 60
    ...     connector c1 A -> B
    ... ''').to_board()
    >>> routing = compute_board_routes(board, RouteCache())
    >>> routing.routes["c1"].from_endpoint.anchor
    <AnchorSide.RIGHT: 'right'>

Debug Mode Example:
    >>> trace = RouteTrace(connector_id="c1")
    >>> solve_connector(board.connectors["c1"], board.geometry_lookup,
    ...                 board.kind_lookup, [], trace=trace)
    >>> print(trace.summary())
"""

from .anchors import anchor_direction, anchor_direction_for_geometry, resolve_anchor
from .board import Board
from .candidates import build_candidates, candidate_sides, resolve_connector_draft
from .debug import RoutePreviewRenderer, render_routes_png
from .models import (
    ANCHOR_SIDES,
    BOX,
    ELLIPSE,
    STAR,
    TRIANGLE,
    AnchorSide,
    Bounds,
    Box,
    Connector,
    ConnectorEndpointSpec,
    Ellipse,
    EndpointDrag,
    Point,
    Polygon,
    ResolvedEndpoint,
    RouteGeometry,
    RouteResult,
    RoutingObstacle,
    Shape,
    ShapeGeometry,
    ShapeKind,
)
from .obstacles import (
    ObstacleSpatialIndex,
    build_routing_obstacles,
    cull_obstacles,
    obstacle_signature,
)
from .parser import Scene, SceneError, SceneParser, parse_scene
from .runtime import (
    BoardRoutingPass,
    RouteCache,
    build_route_key,
    compute_board_routes,
)
from .scoring import score_direction_alignment, score_route
from .selector import solve, solve_connector
from .synthesizer import synthesize
from .tracer import PairEvaluation, RouteTrace

__version__ = "0.4.0"

__all__ = [
    # Models
    "Point",
    "Bounds",
    "ShapeGeometry",
    "Box",
    "Ellipse",
    "Polygon",
    "ShapeKind",
    "BOX",
    "ELLIPSE",
    "TRIANGLE",
    "STAR",
    "AnchorSide",
    "ANCHOR_SIDES",
    "ConnectorEndpointSpec",
    "ResolvedEndpoint",
    "RoutingObstacle",
    "RouteGeometry",
    "RouteResult",
    "EndpointDrag",
    "Shape",
    "Connector",
    # Anchors
    "resolve_anchor",
    "anchor_direction",
    "anchor_direction_for_geometry",
    # Candidates
    "build_candidates",
    "candidate_sides",
    "resolve_connector_draft",
    # Obstacles
    "build_routing_obstacles",
    "cull_obstacles",
    "obstacle_signature",
    "ObstacleSpatialIndex",
    # Scoring and synthesis
    "score_route",
    "score_direction_alignment",
    "synthesize",
    # Selection
    "solve",
    "solve_connector",
    # Board runtime
    "Board",
    "RouteCache",
    "BoardRoutingPass",
    "build_route_key",
    "compute_board_routes",
    # Scene parser
    "Scene",
    "SceneParser",
    "SceneError",
    "parse_scene",
    # Debug/Tracing (for development and debugging)
    "RouteTrace",
    "PairEvaluation",
    "RoutePreviewRenderer",
    "render_routes_png",
]
