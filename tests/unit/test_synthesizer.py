"""Unit tests for route synthesis."""

import pytest

from anchorroute.geometry import is_axis_aligned
from anchorroute.models import Bounds, Point, ResolvedEndpoint, RoutingObstacle
from anchorroute.synthesizer import (
    DETOUR_MAX,
    DETOUR_MIN,
    bridge_candidates,
    detour_distance,
    synthesize,
)


def anchored(x, y, dx, dy, owner="s"):
    return ResolvedEndpoint(
        point=Point(x, y),
        bound_object_id=owner,
        direction=Point(dx, dy),
        connected=True,
    )


def free(x, y):
    return ResolvedEndpoint(point=Point(x, y))


class TestDetourDistance:
    def test_clamped_low(self):
        assert detour_distance(Point(0, 0), Point(0, 0)) == DETOUR_MIN

    def test_scales_with_span(self):
        assert detour_distance(Point(0, 0), Point(100, 30)) == pytest.approx(68)

    def test_clamped_high(self):
        assert detour_distance(Point(0, 0), Point(5000, 0)) == DETOUR_MAX


class TestBridgeCandidates:
    """Tests for bridge_candidates."""

    def test_aligned_points_start_with_direct(self):
        bridges = bridge_candidates(Point(0, 0), Point(100, 0), 52)
        assert bridges[0] == [Point(0, 0), Point(100, 0)]
        # L, Z and side detours all collapse onto the direct line
        assert len(bridges) == 3

    def test_unaligned_points(self):
        bridges = bridge_candidates(Point(0, 0), Point(100, 50), 52)
        assert len(bridges) == 8
        assert bridges[0] == [Point(0, 0), Point(100, 0), Point(100, 50)]
        assert bridges[1] == [Point(0, 0), Point(0, 50), Point(100, 50)]

    def test_all_segments_orthogonal(self):
        for bridge in bridge_candidates(Point(-20, 10), Point(130, 75), 60):
            assert bridge[0] == Point(-20, 10)
            assert bridge[-1] == Point(130, 75)
            for a, b in zip(bridge, bridge[1:]):
                assert is_axis_aligned(a, b)


class TestSynthesize:
    """Tests for synthesize."""

    def test_free_points_straight(self):
        geometry = synthesize(free(0, 0), free(200, 0), [], padding=16)
        assert geometry.points == (Point(0, 0), Point(200, 0))
        assert geometry.mid_point == Point(100, 0)
        assert geometry.bounds == Bounds(-16, -16, 216, 16)
        assert geometry.start_direction == Point(1, 0)
        assert geometry.end_direction == Point(1, 0)

    def test_facing_anchors_straight(self):
        geometry = synthesize(
            anchored(100, 50, 1, 0, "a"), anchored(300, 50, -1, 0, "b"), [], 16
        )
        assert geometry.points == (Point(100, 50), Point(300, 50))
        assert geometry.bends == 0

    def test_route_leaves_and_enters_along_anchors(self):
        geometry = synthesize(
            anchored(0, 0, 1, 0, "a"), anchored(200, 100, -1, 0, "b"), [], 16
        )
        assert geometry.start_direction == Point(1, 0)
        assert geometry.end_direction == Point(1, 0)
        assert geometry.bends == 2

    def test_obstacle_forces_detour(self):
        obstacle = RoutingObstacle("x", Bounds(80, -40, 120, 40))
        geometry = synthesize(free(0, 0), free(200, 0), [obstacle], 16)
        assert geometry.points == (
            Point(0, 0),
            Point(0, -88),
            Point(200, -88),
            Point(200, 0),
        )

    def test_reversed_anchors_forced_to_bend(self):
        geometry = synthesize(
            anchored(100, 100, -1, 0, "a"), anchored(300, 100, 1, 0, "b"), [], 16
        )
        assert len(geometry.points) > 2
        assert geometry.points[0] == Point(100, 100)
        assert geometry.points[1] == Point(70, 100)
        assert geometry.points[-2] == Point(330, 100)
        assert geometry.points[-1] == Point(300, 100)

    def test_reversed_vertical_anchors_forced_to_bend(self):
        """The top detour is parallel here, so a side detour is used."""
        geometry = synthesize(
            anchored(100, 100, 0, -1, "a"), anchored(100, 300, 0, 1, "b"), [], 16
        )
        assert len(geometry.points) > 2
        assert min(p.x for p in geometry.points) < 100 or max(
            p.x for p in geometry.points
        ) > 100

    def test_deterministic(self):
        obstacle = RoutingObstacle("x", Bounds(80, -40, 120, 40))
        first = synthesize(anchored(0, 0, 1, 0), free(200, 10), [obstacle], 16)
        second = synthesize(anchored(0, 0, 1, 0), free(200, 10), [obstacle], 16)
        assert first == second
