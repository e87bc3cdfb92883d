"""
Data models for connector routing.

This module contains the value types shared by every stage of the routing
pipeline: points and bounds, shape geometry and shape kinds, anchor sides,
resolved endpoints, obstacles, and the final route geometry and result.

Classes:
    Point: A 2D coordinate in board space.
    Bounds: An axis-aligned rectangle.
    ShapeGeometry: Position, size and rotation of a shape.
    Box, Ellipse, Polygon: The shape kinds used for anchor ray-casting.
    AnchorSide: The four sides a connector can attach to.
    ConnectorEndpointSpec: What a connector endpoint wants to attach to.
    ResolvedEndpoint: One evaluated position for a connector endpoint.
    RoutingObstacle: Inflated bounds of a shape a route should avoid.
    RouteGeometry: A routed polyline and its rendering metadata.
    RouteResult: The selected endpoints and their route.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Point:
    """A 2D coordinate (also used for unit direction vectors)."""

    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle given by its four edges."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


def normalize_rotation(rotation_deg: float) -> float:
    """Normalize an angle in degrees to the range [0, 360)."""
    normalized = rotation_deg % 360.0
    # -1e-18 % 360 rounds to 360.0
    return 0.0 if normalized >= 360.0 else normalized


@dataclass(frozen=True)
class ShapeGeometry:
    """
    Geometry of a shape on the board.

    The box (x, y, width, height) is the shape before rotation; the shape is
    rotated by ``rotation_deg`` about the center of that box.

    Attributes:
        x: Left edge of the un-rotated box.
        y: Top edge of the un-rotated box.
        width: Width of the un-rotated box.
        height: Height of the un-rotated box.
        rotation_deg: Clockwise rotation in degrees, normalized to [0, 360).
    """

    x: float
    y: float
    width: float
    height: float
    rotation_deg: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "rotation_deg", normalize_rotation(self.rotation_deg))

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class Box:
    """Rectangular shape kind (also used for sticky notes and text)."""


@dataclass(frozen=True)
class Ellipse:
    """Elliptical shape kind inscribed in the geometry box."""


@dataclass(frozen=True)
class Polygon:
    """
    Polygonal shape kind.

    Attributes:
        vertices: Vertices in the unit square [0, 1] x [0, 1], in drawing
            order. They are scaled to the shape's width and height.
    """

    vertices: Tuple[Tuple[float, float], ...] = field(default_factory=tuple)


ShapeKind = Union[Box, Ellipse, Polygon]

BOX = Box()
ELLIPSE = Ellipse()

TRIANGLE = Polygon(
    vertices=(
        (0.5, 0.06),
        (0.94, 0.92),
        (0.06, 0.92),
    )
)

STAR = Polygon(
    vertices=(
        (0.5, 0.07),
        (0.61, 0.38),
        (0.95, 0.38),
        (0.67, 0.57),
        (0.78, 0.9),
        (0.5, 0.7),
        (0.22, 0.9),
        (0.33, 0.57),
        (0.05, 0.38),
        (0.39, 0.38),
    )
)


class AnchorSide(Enum):
    """A side of a shape where a connector may terminate."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


# Canonical candidate order
ANCHOR_SIDES: Tuple[AnchorSide, ...] = (
    AnchorSide.TOP,
    AnchorSide.RIGHT,
    AnchorSide.BOTTOM,
    AnchorSide.LEFT,
)


@dataclass(frozen=True)
class ConnectorEndpointSpec:
    """
    What one end of a connector wants to be attached to.

    Attributes:
        object_id: Id of the shape the endpoint is bound to, if any.
        anchor: Preferred side of that shape, if any.
        fallback_x: X coordinate used when the endpoint is free.
        fallback_y: Y coordinate used when the endpoint is free.
    """

    object_id: Optional[str] = None
    anchor: Optional[AnchorSide] = None
    fallback_x: float = 0.0
    fallback_y: float = 0.0


@dataclass(frozen=True)
class ResolvedEndpoint:
    """
    A fully evaluated position for one connector endpoint.

    ``connected=False`` means a free point with no direction constraint.
    """

    point: Point
    bound_object_id: Optional[str] = None
    anchor: Optional[AnchorSide] = None
    direction: Optional[Point] = None
    connected: bool = False


@dataclass(frozen=True)
class RoutingObstacle:
    """Inflated bounding box of another routable shape."""

    owner_id: str
    bounds: Bounds


@dataclass(frozen=True)
class RouteGeometry:
    """
    A computed orthogonal polyline with its derived metadata.

    Attributes:
        points: Ordered route points (at least two), axis-aligned segments.
        bounds: Tight box around the points, inflated by the hit padding.
        mid_point: Point at half of the cumulative path length.
        start_direction: Unit direction of the first segment.
        end_direction: Unit direction of the last segment.
    """

    points: Tuple[Point, ...]
    bounds: Bounds
    mid_point: Point
    start_direction: Optional[Point] = None
    end_direction: Optional[Point] = None

    @property
    def bends(self) -> int:
        return max(0, len(self.points) - 2)


@dataclass(frozen=True)
class RouteResult:
    """Selected endpoints and route; also the hysteresis value for the next call."""

    from_endpoint: ResolvedEndpoint
    to_endpoint: ResolvedEndpoint
    geometry: RouteGeometry


@dataclass(frozen=True)
class EndpointDrag:
    """Identity of the connector endpoint currently under interactive drag."""

    connector_id: str
    endpoint: str  # 'from' or 'to'


@dataclass(frozen=True)
class Shape:
    """A routable shape on the board."""

    shape_id: str
    geometry: ShapeGeometry
    kind: ShapeKind = BOX


@dataclass(frozen=True)
class Connector:
    """A connector between two endpoints."""

    connector_id: str
    source: ConnectorEndpointSpec
    target: ConnectorEndpointSpec
