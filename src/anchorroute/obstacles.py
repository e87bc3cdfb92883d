"""
Obstacle index for connector routing.

Builds inflated bounding boxes for routable shapes, indexes them in a
uniform grid for region queries, and culls them per endpoint pair.
"""

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Tuple

from .geometry import (
    bounds_between,
    bounds_overlap,
    inflate_bounds,
    normalize_bounds,
    rotated_bounds,
)
from .models import Bounds, ResolvedEndpoint, RoutingObstacle, ShapeGeometry, ShapeKind

# =============================================================================
# ROUTING CONFIGURATION - obstacles
# =============================================================================

# Clearance added around each shape's visual bounds
OBSTACLE_INFLATION = 14

# Padding around a connector used for hit testing and route bounds
HIT_PADDING = 16

# Extra padding of the region in which obstacles are considered for a pair
CULL_PADDING = 96

# Cell size of the uniform grid used by ObstacleSpatialIndex
GRID_CELL_SIZE = 240

# Quantization step of obstacle signatures
SIGNATURE_STEP = 8

# =============================================================================


def build_routing_obstacles(
    geometry_lookup: Mapping[str, ShapeGeometry],
    kind_lookup: Mapping[str, ShapeKind],
    inflation: float = OBSTACLE_INFLATION,
) -> List[RoutingObstacle]:
    """
    Build one obstacle per routable shape.

    Shapes without a known kind are not routable and are skipped.

    Args:
        geometry_lookup: Shape id -> geometry
        kind_lookup: Shape id -> kind
        inflation: Clearance added around the rotated bounds

    Returns:
        Obstacles in the iteration order of geometry_lookup.
    """
    obstacles = []
    for shape_id, geometry in geometry_lookup.items():
        if shape_id not in kind_lookup:
            continue
        obstacles.append(
            RoutingObstacle(
                owner_id=shape_id,
                bounds=inflate_bounds(rotated_bounds(geometry), inflation),
            )
        )
    return obstacles


def _cell_range(bounds: Bounds, cell_size: float) -> Tuple[int, int, int, int]:
    normalized = normalize_bounds(bounds)
    return (
        math.floor(normalized.left / cell_size),
        math.floor(normalized.top / cell_size),
        math.floor(normalized.right / cell_size),
        math.floor(normalized.bottom / cell_size),
    )


def _cells(bounds: Bounds, cell_size: float) -> Iterable[Tuple[int, int]]:
    min_x, min_y, max_x, max_y = _cell_range(bounds, cell_size)
    for cell_y in range(min_y, max_y + 1):
        for cell_x in range(min_x, max_x + 1):
            yield (cell_x, cell_y)


class ObstacleSpatialIndex:
    """
    Uniform-grid index over obstacles for coarse region queries.

    Each obstacle is registered in every grid cell its bounds touch. A query
    returns the obstacles registered in the cells the query bounds touch,
    so results are a superset of the exact overlaps.
    """

    def __init__(
        self, obstacles: Sequence[RoutingObstacle], cell_size: float = GRID_CELL_SIZE
    ):
        """
        Build the index.

        Args:
            obstacles: Obstacles to index
            cell_size: Grid cell size; non-positive sizes disable the index
        """
        self.obstacles = list(obstacles)
        self.cell_size = cell_size
        self.cells: Dict[Tuple[int, int], List[int]] = defaultdict(list)

        if cell_size <= 0:
            return
        for index, obstacle in enumerate(self.obstacles):
            for cell in _cells(obstacle.bounds, cell_size):
                self.cells[cell].append(index)

    def query(self, bounds: Bounds) -> List[RoutingObstacle]:
        """Obstacles near ``bounds``, without duplicates, in insertion order."""
        if not self.obstacles or self.cell_size <= 0:
            return []

        found: Set[int] = set()
        for cell in _cells(bounds, self.cell_size):
            found.update(self.cells.get(cell, ()))
        return [self.obstacles[index] for index in sorted(found)]


def obstacle_signature(obstacles: Sequence[RoutingObstacle]) -> str:
    """
    Order-independent fingerprint of an obstacle set.

    Coordinates are quantized to SIGNATURE_STEP so that sub-step jitter does
    not change the signature.
    """
    if not obstacles:
        return "none"

    parts = []
    for obstacle in obstacles:
        normalized = normalize_bounds(obstacle.bounds)
        parts.append(
            ":".join(
                [
                    obstacle.owner_id,
                    str(round(normalized.left / SIGNATURE_STEP)),
                    str(round(normalized.top / SIGNATURE_STEP)),
                    str(round(normalized.right / SIGNATURE_STEP)),
                    str(round(normalized.bottom / SIGNATURE_STEP)),
                ]
            )
        )
    return "|".join(sorted(parts))


def cull_obstacles(
    obstacles: Sequence[RoutingObstacle],
    from_endpoint: ResolvedEndpoint,
    to_endpoint: ResolvedEndpoint,
    padding: float = HIT_PADDING + CULL_PADDING,
) -> List[RoutingObstacle]:
    """
    Keep the obstacles relevant to one endpoint pair.

    An obstacle is kept when it overlaps the pair's bounding box inflated by
    ``padding`` and is not owned by either endpoint's shape.
    """
    region = bounds_between(from_endpoint.point, to_endpoint.point, padding)
    return [
        obstacle
        for obstacle in obstacles
        if obstacle.owner_id != from_endpoint.bound_object_id
        and obstacle.owner_id != to_endpoint.bound_object_id
        and bounds_overlap(obstacle.bounds, region)
    ]
