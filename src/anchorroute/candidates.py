"""
Endpoint candidate building.

Turns what a connector endpoint wants to attach to (a ConnectorEndpointSpec)
into an ordered list of ResolvedEndpoint candidates for the route selector.
"""

from typing import List, Mapping, Optional

from .anchors import resolve_anchor
from .models import (
    ANCHOR_SIDES,
    BOX,
    AnchorSide,
    Connector,
    ConnectorEndpointSpec,
    EndpointDrag,
    Point,
    ResolvedEndpoint,
    ShapeGeometry,
    ShapeKind,
)

# Smallest extent used when deriving default endpoints from a connector frame
MIN_SEGMENT_SIZE = 12


def free_endpoint(spec: ConnectorEndpointSpec) -> ResolvedEndpoint:
    """Disconnected candidate at the spec's fallback coordinates."""
    return ResolvedEndpoint(point=Point(spec.fallback_x, spec.fallback_y))


def candidate_sides(
    preferred: Optional[AnchorSide], drag_locked: Optional[AnchorSide] = None
) -> List[AnchorSide]:
    """
    Order the sides to try for a bound endpoint.

    Args:
        preferred: Side the endpoint is currently attached to
        drag_locked: Side locked by an in-progress drag of this endpoint

    Returns:
        Only the locked side during a drag; otherwise all four sides with
        the preferred side first and the rest in canonical order.
    """
    if drag_locked is not None:
        return [drag_locked]
    if preferred is not None:
        return [preferred] + [side for side in ANCHOR_SIDES if side != preferred]
    return list(ANCHOR_SIDES)


def build_candidates(
    spec: ConnectorEndpointSpec,
    drag_locked: Optional[AnchorSide],
    geometry_lookup: Mapping[str, ShapeGeometry],
    kind_lookup: Mapping[str, ShapeKind],
) -> List[ResolvedEndpoint]:
    """
    Build the ordered candidate positions for one connector endpoint.

    Args:
        spec: What the endpoint wants to attach to
        drag_locked: Side locked by an interactive drag, if any
        geometry_lookup: Shape id -> geometry
        kind_lookup: Shape id -> kind (missing kinds are treated as boxes)

    Returns:
        A single free-point candidate when the endpoint is unbound or its
        shape is unknown, otherwise one connected candidate per side.
    """
    if spec.object_id is None:
        return [free_endpoint(spec)]

    geometry = geometry_lookup.get(spec.object_id)
    if geometry is None:
        return [free_endpoint(spec)]

    kind = kind_lookup.get(spec.object_id, BOX)
    candidates = []
    for side in candidate_sides(spec.anchor, drag_locked):
        point, direction = resolve_anchor(geometry, side, kind)
        candidates.append(
            ResolvedEndpoint(
                point=point,
                bound_object_id=spec.object_id,
                anchor=side,
                direction=direction,
                connected=True,
            )
        )
    return candidates


def drag_lock_for(
    connector_id: str,
    endpoint: str,
    spec: ConnectorEndpointSpec,
    active_drag: Optional[EndpointDrag],
) -> Optional[AnchorSide]:
    """Side locked by ``active_drag`` for this endpoint, if it is the one dragged."""
    if active_drag is None:
        return None
    if active_drag.connector_id != connector_id or active_drag.endpoint != endpoint:
        return None
    return spec.anchor


def endpoint_candidates(
    connector: Connector,
    endpoint: str,
    geometry_lookup: Mapping[str, ShapeGeometry],
    kind_lookup: Mapping[str, ShapeKind],
    active_drag: Optional[EndpointDrag] = None,
) -> List[ResolvedEndpoint]:
    """Candidates for the 'from' or 'to' end of a connector."""
    spec = connector.source if endpoint == "from" else connector.target
    locked = drag_lock_for(connector.connector_id, endpoint, spec, active_drag)
    return build_candidates(spec, locked, geometry_lookup, kind_lookup)


def resolve_connector_draft(
    connector_id: str,
    frame: ShapeGeometry,
    source: ConnectorEndpointSpec,
    target: ConnectorEndpointSpec,
    from_xy: Optional[Point] = None,
    to_xy: Optional[Point] = None,
) -> Connector:
    """
    Build a Connector, filling in missing free-endpoint coordinates.

    Connectors stored without explicit endpoint coordinates fall back to
    points inside their own frame: 10% and 90% across, halfway down.

    Args:
        connector_id: Connector id
        frame: The connector's own stored geometry
        source: Source endpoint spec (fallback coordinates may be replaced)
        target: Target endpoint spec (fallback coordinates may be replaced)
        from_xy: Explicit stored start point, if any
        to_xy: Explicit stored end point, if any

    Returns:
        Connector with both endpoint specs carrying usable fallback points.
    """
    width = max(MIN_SEGMENT_SIZE, frame.width)
    height = max(MIN_SEGMENT_SIZE, frame.height)
    default_from = from_xy or Point(frame.x + width * 0.1, frame.y + height * 0.5)
    default_to = to_xy or Point(frame.x + width * 0.9, frame.y + height * 0.5)

    return Connector(
        connector_id=connector_id,
        source=ConnectorEndpointSpec(
            object_id=source.object_id,
            anchor=source.anchor,
            fallback_x=default_from.x,
            fallback_y=default_from.y,
        ),
        target=ConnectorEndpointSpec(
            object_id=target.object_id,
            anchor=target.anchor,
            fallback_x=default_to.x,
            fallback_y=default_to.y,
        ),
    )
