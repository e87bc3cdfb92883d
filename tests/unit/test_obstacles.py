"""Unit tests for the obstacle index."""

from anchorroute.models import (
    BOX,
    Bounds,
    Point,
    ResolvedEndpoint,
    RoutingObstacle,
    ShapeGeometry,
)
from anchorroute.obstacles import (
    ObstacleSpatialIndex,
    build_routing_obstacles,
    cull_obstacles,
    obstacle_signature,
)


def _far_apart_obstacles():
    geometry = {
        "near": ShapeGeometry(0, 0, 100, 50),
        "far": ShapeGeometry(1000, 1000, 100, 50),
    }
    return build_routing_obstacles(geometry, {"near": BOX, "far": BOX})


class TestBuildObstacles:
    """Tests for build_routing_obstacles."""

    def test_inflated_bounds(self):
        obstacles = build_routing_obstacles({"a": ShapeGeometry(0, 0, 100, 50)}, {"a": BOX})
        assert obstacles == [RoutingObstacle("a", Bounds(-14, -14, 114, 64))]

    def test_shapes_without_kind_skipped(self):
        geometry = {"a": ShapeGeometry(0, 0, 10, 10), "b": ShapeGeometry(50, 0, 10, 10)}
        obstacles = build_routing_obstacles(geometry, {"b": BOX})
        assert [o.owner_id for o in obstacles] == ["b"]

    def test_rotated_shape_uses_rotated_bounds(self):
        obstacles = build_routing_obstacles(
            {"a": ShapeGeometry(0, 0, 100, 50, 90)}, {"a": BOX}, inflation=0
        )
        bounds = obstacles[0].bounds
        assert round(bounds.left) == 25
        assert round(bounds.bottom) == 75


class TestSpatialIndex:
    """Tests for ObstacleSpatialIndex."""

    def test_query_returns_nearby_only(self):
        index = ObstacleSpatialIndex(_far_apart_obstacles())
        found = index.query(Bounds(0, 0, 10, 10))
        assert [o.owner_id for o in found] == ["near"]

    def test_query_large_region_keeps_insertion_order(self):
        index = ObstacleSpatialIndex(_far_apart_obstacles())
        found = index.query(Bounds(-500, -500, 2000, 2000))
        assert [o.owner_id for o in found] == ["near", "far"]

    def test_no_duplicates_across_cells(self):
        wide = RoutingObstacle("wide", Bounds(-1000, -10, 1000, 10))
        index = ObstacleSpatialIndex([wide], cell_size=100)
        assert index.query(Bounds(-1000, -10, 1000, 10)) == [wide]

    def test_inverted_query_bounds(self):
        index = ObstacleSpatialIndex(_far_apart_obstacles())
        found = index.query(Bounds(10, 10, 0, 0))
        assert [o.owner_id for o in found] == ["near"]

    def test_empty_and_disabled_index(self):
        assert ObstacleSpatialIndex([]).query(Bounds(0, 0, 10, 10)) == []
        disabled = ObstacleSpatialIndex(_far_apart_obstacles(), cell_size=0)
        assert disabled.query(Bounds(0, 0, 10, 10)) == []


class TestObstacleSignature:
    """Tests for obstacle_signature."""

    def test_empty(self):
        assert obstacle_signature([]) == "none"

    def test_order_independent(self):
        a = RoutingObstacle("a", Bounds(0, 0, 96, 48))
        b = RoutingObstacle("b", Bounds(200, 0, 296, 48))
        assert obstacle_signature([a, b]) == obstacle_signature([b, a])

    def test_small_jitter_ignored(self):
        before = [RoutingObstacle("a", Bounds(0, 0, 96, 48))]
        after = [RoutingObstacle("a", Bounds(1, 1, 97, 49))]
        assert obstacle_signature(before) == obstacle_signature(after)

    def test_real_move_detected(self):
        before = [RoutingObstacle("a", Bounds(0, 0, 96, 48))]
        after = [RoutingObstacle("a", Bounds(16, 0, 112, 48))]
        assert obstacle_signature(before) != obstacle_signature(after)


class TestCullObstacles:
    """Tests for cull_obstacles."""

    def test_endpoint_owners_excluded(self):
        start = ResolvedEndpoint(Point(0, 0), "near", connected=True)
        end = ResolvedEndpoint(Point(200, 0))
        kept = cull_obstacles(_far_apart_obstacles(), start, end)
        assert kept == []

    def test_far_obstacles_excluded(self):
        start = ResolvedEndpoint(Point(-200, 0))
        end = ResolvedEndpoint(Point(200, 0))
        kept = cull_obstacles(_far_apart_obstacles(), start, end)
        assert [o.owner_id for o in kept] == ["near"]
