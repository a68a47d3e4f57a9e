"""Tests for connector path building and custom waypoint preservation."""
from __future__ import annotations

from dataclasses import replace

import pytest

from flowsketch.paths import (
    ConnectionRoute,
    build_path,
    clear_custom_points,
    label_position,
    resolve_endpoints,
    route_connection,
    with_custom_points,
)
from flowsketch.types import Connection, Node, Point


def make_node(id: str, x: float, y: float) -> Node:
    return Node(id=id, kind="process", x=x, y=y, width=100, height=50)


# ============================================================================
# build_path
# ============================================================================


class TestBuildPath:
    def test_elbow(self):
        assert build_path(Point(0, 0), Point(100, 50), "elbow") == [
            Point(0, 0),
            Point(50, 0),
            Point(50, 50),
            Point(100, 50),
        ]

    def test_elbow_is_default(self):
        assert build_path(Point(0, 0), Point(100, 50)) == build_path(
            Point(0, 0), Point(100, 50), "elbow"
        )

    def test_straight(self):
        assert build_path(Point(0, 0), Point(100, 50), "straight") == [
            Point(0, 0),
            Point(100, 50),
        ]

    def test_curved_control_points(self):
        assert build_path(Point(0, 0), Point(100, 50), "curved", 0.25) == [
            Point(0, 0),
            Point(25, 0),
            Point(75, 50),
            Point(100, 50),
        ]

    def test_curvature_is_clamped(self):
        path = build_path(Point(0, 0), Point(100, 50), "curved", 5)
        assert path[1] == Point(100, 0)
        assert path[2] == Point(0, 50)

    def test_elbow_segments_are_orthogonal(self):
        path = build_path(Point(10, 20), Point(300, 170))
        for a, b in zip(path, path[1:]):
            assert a.x == b.x or a.y == b.y


# ============================================================================
# Label placement
# ============================================================================


class TestLabelPosition:
    def test_elbow_uses_half_length(self):
        points = build_path(Point(0, 0), Point(100, 50))
        assert label_position(points, "elbow") == Point(50, 25)

    def test_curved_uses_bezier_midpoint(self):
        points = build_path(Point(0, 0), Point(100, 50), "curved")
        mid = label_position(points, "curved")
        assert mid.x == pytest.approx(50)
        assert mid.y == pytest.approx(25)

    def test_route_label_position(self):
        route = ConnectionRoute(start=Point(0, 0), end=Point(100, 0), style="straight")
        assert route.label_position == Point(50, 0)


# ============================================================================
# Routing against live nodes
# ============================================================================


class TestRouteConnection:
    def test_default_anchors_face_each_other(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 300, 0)
        route = route_connection(Connection(id="c", from_node_id="A", to_node_id="B"), [a, b])
        assert route.start == Point(100, 25)
        assert route.end == Point(300, 25)
        assert route.points == build_path(Point(100, 25), Point(300, 25))

    def test_vertical_neighbours(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 0, 300)
        start, end = resolve_endpoints(
            Connection(id="c", from_node_id="A", to_node_id="B"), a, b
        )
        assert start == Point(50, 50)
        assert end == Point(50, 300)

    def test_named_hooks(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 300, 0)
        conn = Connection(
            id="c",
            from_node_id="A",
            to_node_id="B",
            from_hook_id="A-hook-bottom-0",
            to_hook_id="B-hook-top-0",
        )
        route = route_connection(conn, {"A": a, "B": b})
        assert route.start == Point(50, 50)
        assert route.end == Point(350, 0)

    def test_endpoints_follow_moved_nodes(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 300, 0)
        conn = Connection(id="c", from_node_id="A", to_node_id="B", style="straight")
        moved = replace(b, x=500)
        assert route_connection(conn, [a, moved]).points == [Point(100, 25), Point(500, 25)]

    def test_missing_node_raises(self):
        conn = Connection(id="c", from_node_id="A", to_node_id="Z")
        with pytest.raises(KeyError):
            route_connection(conn, [make_node("A", 0, 0)])

    def test_unknown_hook_raises(self):
        conn = Connection(id="c", from_node_id="A", to_node_id="B", from_hook_id="ghost")
        with pytest.raises(KeyError):
            route_connection(conn, [make_node("A", 0, 0), make_node("B", 300, 0)])


# ============================================================================
# Custom waypoints
# ============================================================================


class TestCustomPoints:
    def _connection(self) -> Connection:
        return Connection(
            id="c",
            from_node_id="A",
            to_node_id="B",
            from_hook_id="A-hook-right-0",
            to_hook_id="B-hook-left-0",
        )

    def test_interior_points_survive_node_moves(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 300, 200)
        dragged = [
            Point(100, 25),
            Point(150, 25),
            Point(150, 100),
            Point(250, 100),
            Point(300, 225),
        ]
        conn = with_custom_points(self._connection(), dragged)
        assert conn.waypoints == tuple(dragged[1:4])

        moved = replace(b, x=400, y=300)
        points = route_connection(conn, [a, moved]).points

        assert len(points) == 5
        assert points[0] == Point(100, 25)
        assert points[1:4] == dragged[1:4]
        assert points[4] == Point(400, 325)

    def test_two_point_route_stays_straight(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 300, 200)
        conn = with_custom_points(self._connection(), [Point(100, 25), Point(300, 225)])
        assert conn.waypoints == ()
        assert conn.custom_route

        route = route_connection(conn, [a, b])
        assert route.points == [Point(100, 25), Point(300, 225)]
        assert route.label_position == Point(200, 125)

    def test_two_point_route_follows_moved_node(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 300, 200)
        conn = with_custom_points(self._connection(), [Point(100, 25), Point(300, 225)])
        moved = replace(b, x=400, y=300)
        assert route_connection(conn, [a, moved]).points == [Point(100, 25), Point(400, 325)]

    def test_too_few_points(self):
        with pytest.raises(ValueError, match="at least 2 points"):
            with_custom_points(self._connection(), [Point(0, 0)])

    def test_clear_custom_points(self):
        conn = with_custom_points(
            self._connection(), [Point(0, 0), Point(5, 5), Point(9, 9)]
        )
        cleared = clear_custom_points(conn)
        assert cleared.waypoints == ()
        assert not cleared.custom_route

    def test_cleared_route_uses_style_again(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 300, 200)
        conn = with_custom_points(self._connection(), [Point(100, 25), Point(300, 225)])
        points = route_connection(clear_custom_points(conn), [a, b]).points
        assert points == build_path(Point(100, 25), Point(300, 225), "elbow")

    def test_custom_route_ignores_style(self):
        route = ConnectionRoute(
            start=Point(0, 0),
            end=Point(100, 0),
            waypoints=(Point(50, 40),),
            style="curved",
        )
        assert route.points == [Point(0, 0), Point(50, 40), Point(100, 0)]
