"""
Board-level routing runtime.

Routes every connector on a board in one pass, the way an interactive canvas
needs it on each frame:
- Connectors outside the viewport are skipped unless they are being edited
- Routes whose inputs have not changed are served from a caller-owned cache
- Only a bounded number of cached routes are refreshed per pass
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .board import Board
from .geometry import bounds_between, bounds_overlap, inflate_bounds
from .models import (
    Bounds,
    Connector,
    ConnectorEndpointSpec,
    EndpointDrag,
    Point,
    RouteResult,
    RoutingObstacle,
    ShapeGeometry,
)
from .obstacles import (
    CULL_PADDING,
    HIT_PADDING,
    ObstacleSpatialIndex,
    build_routing_obstacles,
    obstacle_signature,
)
from .selector import solve_connector
from .tracer import RouteTrace

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTING CONFIGURATION - runtime
# =============================================================================

# Maximum number of connectors recomputed per pass (dirty ones always are)
RECOMPUTE_BUDGET = 24

# =============================================================================


def _tenths(value: float) -> str:
    return repr(round(value * 10) / 10)


def _geometry_signature(geometry: Optional[ShapeGeometry]) -> str:
    if geometry is None:
        return "none"
    return ",".join(
        _tenths(value)
        for value in (
            geometry.x,
            geometry.y,
            geometry.width,
            geometry.height,
            geometry.rotation_deg,
        )
    )


def build_route_key(
    connector: Connector,
    geometry_lookup: Mapping[str, ShapeGeometry],
    obstacles_signature: str,
) -> str:
    """
    Fingerprint of every input that determines a connector's route.

    Coordinates are rounded to tenths, so sub-tenth jitter reuses the
    cached route.
    """
    source, target = connector.source, connector.target
    from_geometry = geometry_lookup.get(source.object_id) if source.object_id else None
    to_geometry = geometry_lookup.get(target.object_id) if target.object_id else None
    return "|".join(
        [
            connector.connector_id,
            source.object_id or "null",
            target.object_id or "null",
            source.anchor.value if source.anchor else "null",
            target.anchor.value if target.anchor else "null",
            _tenths(source.fallback_x),
            _tenths(source.fallback_y),
            _tenths(target.fallback_x),
            _tenths(target.fallback_y),
            _geometry_signature(from_geometry),
            _geometry_signature(to_geometry),
            obstacles_signature,
        ]
    )


@dataclass
class CacheEntry:
    route_key: str
    result: RouteResult


@dataclass
class RecomputeEntry:
    """A connector that is a candidate for recomputation in this pass."""

    connector_id: str
    priority: bool
    has_cached_route: bool


class RouteCache:
    """
    Caller-owned cache of the last route computed for each connector.

    The cache also owns the round-robin cursor used to spread refreshes of
    clean routes across passes.
    """

    def __init__(self):
        self.entries: Dict[str, CacheEntry] = {}
        self.cursor = 0

    def get(self, connector_id: str, route_key: str) -> Optional[RouteResult]:
        """Cached result, only if it was computed for ``route_key``."""
        entry = self.entries.get(connector_id)
        if entry is None or entry.route_key != route_key:
            return None
        return entry.result

    def previous(self, connector_id: str) -> Optional[RouteResult]:
        """Last result for the connector regardless of its key."""
        entry = self.entries.get(connector_id)
        return entry.result if entry else None

    def put(self, connector_id: str, route_key: str, result: RouteResult) -> None:
        self.entries[connector_id] = CacheEntry(route_key, result)

    def prune(self, active_ids: Iterable[str]) -> int:
        """Drop entries for connectors that no longer exist; returns the count."""
        active = set(active_ids)
        stale = [cid for cid in self.entries if cid not in active]
        for connector_id in stale:
            del self.entries[connector_id]
        return len(stale)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, connector_id: str) -> bool:
        return connector_id in self.entries


def select_for_recompute(
    entries: List[RecomputeEntry], budget: int, cache: RouteCache
) -> Set[str]:
    """
    Choose which connectors to recompute this pass.

    Connectors without a cached route and priority connectors are always
    selected. Remaining budget goes to cached connectors, picked round-robin
    from the cache's cursor so every route is eventually refreshed.

    Args:
        entries: Candidates in board order
        budget: Maximum number of connectors to recompute
        cache: Route cache holding the round-robin cursor

    Returns:
        Set of connector ids to recompute.
    """
    selected: Set[str] = set()
    if not entries:
        return selected

    for entry in entries:
        if entry.priority or not entry.has_cached_route:
            selected.add(entry.connector_id)

    remaining = max(0, budget - len(selected))
    refreshable = [
        entry
        for entry in entries
        if entry.has_cached_route and entry.connector_id not in selected
    ]
    if remaining <= 0 or not refreshable:
        return selected

    offset = cache.cursor % len(refreshable)
    for i in range(min(remaining, len(refreshable))):
        selected.add(refreshable[(offset + i) % len(refreshable)].connector_id)
    cache.cursor = (offset + remaining) % len(refreshable)

    return selected


def _endpoint_estimate(
    spec: ConnectorEndpointSpec, geometry_lookup: Mapping[str, ShapeGeometry]
) -> Point:
    if spec.object_id is not None and spec.object_id in geometry_lookup:
        return geometry_lookup[spec.object_id].center
    return Point(spec.fallback_x, spec.fallback_y)


def connector_hit_bounds(
    connector: Connector, geometry_lookup: Mapping[str, ShapeGeometry]
) -> Bounds:
    """Rough bounds of a connector before routing, used for culling."""
    return bounds_between(
        _endpoint_estimate(connector.source, geometry_lookup),
        _endpoint_estimate(connector.target, geometry_lookup),
        HIT_PADDING + CULL_PADDING,
    )


@dataclass
class BoardRoutingPass:
    """
    Output of one compute_board_routes() call.

    Attributes:
        routes: Connector id -> route, for every visible connector with a route
        recomputed: Ids that were re-solved this pass
        culled: Ids skipped because they are outside the viewport
    """

    routes: Dict[str, RouteResult] = field(default_factory=dict)
    recomputed: Set[str] = field(default_factory=set)
    culled: Set[str] = field(default_factory=set)


def compute_board_routes(
    board: Board,
    cache: RouteCache,
    viewport: Optional[Bounds] = None,
    selected_ids: Iterable[str] = (),
    moving_shape_ids: Iterable[str] = (),
    active_drag: Optional[EndpointDrag] = None,
    budget: int = RECOMPUTE_BUDGET,
    traces: Optional[Mapping[str, RouteTrace]] = None,
) -> BoardRoutingPass:
    """
    Route every connector on the board.

    Args:
        board: Shapes and connectors
        cache: Route cache carried between passes by the caller
        viewport: Visible region in board coordinates (None disables culling)
        selected_ids: Selected connectors (never culled, always recomputed)
        moving_shape_ids: Shapes being dragged; their connectors are priority
        active_drag: Connector endpoint being dragged, if any
        budget: Maximum number of connectors recomputed this pass
        traces: Connector id -> RouteTrace; these connectors are always
            recomputed and their selector runs recorded

    Returns:
        BoardRoutingPass with the routes and bookkeeping for this pass.
    """
    geometry_lookup = board.geometry_lookup
    kind_lookup = board.kind_lookup
    index = ObstacleSpatialIndex(build_routing_obstacles(geometry_lookup, kind_lookup))
    selected = set(selected_ids)
    priority_ids = board.connectors_touching(moving_shape_ids) | selected
    if active_drag is not None:
        priority_ids.add(active_drag.connector_id)
    if traces:
        priority_ids.update(traces)

    result = BoardRoutingPass()
    entries: List[RecomputeEntry] = []
    contexts: Dict[str, Tuple[Connector, List[RoutingObstacle], str]] = {}

    for connector_id, connector in board.connectors.items():
        hit_bounds = connector_hit_bounds(connector, geometry_lookup)
        is_priority = connector_id in priority_ids
        if (
            viewport is not None
            and not is_priority
            and not bounds_overlap(hit_bounds, viewport)
        ):
            result.culled.add(connector_id)
            continue

        nearby = index.query(inflate_bounds(hit_bounds, CULL_PADDING))
        route_key = build_route_key(connector, geometry_lookup, obstacle_signature(nearby))
        cached = cache.get(connector_id, route_key)
        if cached is not None:
            result.routes[connector_id] = cached

        entries.append(RecomputeEntry(connector_id, is_priority, cached is not None))
        contexts[connector_id] = (connector, nearby, route_key)

    to_recompute = select_for_recompute(entries, max(1, budget), cache)
    logger.debug(
        "routing pass: %d visible, %d culled, %d recomputing",
        len(entries),
        len(result.culled),
        len(to_recompute),
    )

    for entry in entries:
        if entry.connector_id not in to_recompute:
            continue
        connector, nearby, route_key = contexts[entry.connector_id]
        route = solve_connector(
            connector,
            geometry_lookup,
            kind_lookup,
            nearby,
            active_drag=active_drag,
            previous_result=cache.previous(entry.connector_id),
            trace=traces.get(entry.connector_id) if traces else None,
        )
        result.recomputed.add(entry.connector_id)
        if route is None:
            continue
        result.routes[entry.connector_id] = route
        cache.put(entry.connector_id, route_key, route)

    pruned = cache.prune(board.connectors)
    if pruned:
        logger.debug("pruned %d stale cached routes", pruned)

    return result
