from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace

from .geometry import cubic_bezier_point, polyline_midpoint
from .hooks import best_connection_directions, default_anchor, get_hook, hook_position
from .types import Connection, Node, PathStyle, Point

# ============================================================================
# Connection path builder -- endpoints plus style to renderable points
# ============================================================================


def build_path(
    start: Point,
    end: Point,
    style: PathStyle = "elbow",
    curvature: float = 0.5,
) -> list[Point]:
    """Point list for a connector between two resolved anchors.

    ``straight`` is the segment itself, ``curved`` the four cubic bezier
    control points, ``elbow`` an orthogonal route turning at the mid x.
    """
    if style == "straight":
        return [start, end]

    if style == "curved":
        c = min(max(curvature, 0.0), 1.0)
        dx = end.x - start.x
        return [
            start,
            Point(x=start.x + dx * c, y=start.y),
            Point(x=start.x + dx * (1 - c), y=end.y),
            end,
        ]

    mid_x = (start.x + end.x) / 2
    return [
        start,
        Point(x=mid_x, y=start.y),
        Point(x=mid_x, y=end.y),
        end,
    ]


@dataclass(frozen=True, slots=True)
class ConnectionRoute:
    """Resolved geometry of one connection.

    ``start``/``end`` come from the live hook positions; ``waypoints`` are the
    user-authored interior points, carried over untouched. A custom route is
    drawn through its waypoints as straight segments, whatever the style.
    """

    start: Point
    end: Point
    waypoints: tuple[Point, ...] = ()
    style: PathStyle = "elbow"
    curvature: float = 0.5
    is_custom: bool = False

    @property
    def points(self) -> list[Point]:
        if self.is_custom or self.waypoints:
            return [self.start, *self.waypoints, self.end]
        return build_path(self.start, self.end, self.style, self.curvature)

    @property
    def label_position(self) -> Point | None:
        style: PathStyle = "straight" if self.is_custom or self.waypoints else self.style
        return label_position(self.points, style)


def resolve_endpoints(
    connection: Connection, from_node: Node, to_node: Node
) -> tuple[Point, Point]:
    """Anchor points of both ends: the named hooks, else the facing sides."""
    from_dir, to_dir = best_connection_directions(from_node, to_node)

    if connection.from_hook_id:
        start = hook_position(from_node, get_hook(from_node, connection.from_hook_id))
    else:
        start = default_anchor(from_node, from_dir)

    if connection.to_hook_id:
        end = hook_position(to_node, get_hook(to_node, connection.to_hook_id))
    else:
        end = default_anchor(to_node, to_dir)

    return start, end


def route_connection(
    connection: Connection,
    nodes: Mapping[str, Node] | Iterable[Node],
) -> ConnectionRoute:
    """Recompute a connection's geometry against the current node positions.

    Both endpoint nodes must be present; a missing one raises ``KeyError``.
    """
    index = nodes if isinstance(nodes, Mapping) else {n.id: n for n in nodes}
    from_node = index[connection.from_node_id]
    to_node = index[connection.to_node_id]
    start, end = resolve_endpoints(connection, from_node, to_node)
    return ConnectionRoute(
        start=start,
        end=end,
        waypoints=connection.waypoints,
        style=connection.style,
        curvature=connection.curvature,
        is_custom=connection.custom_route,
    )


def with_custom_points(connection: Connection, points: Sequence[Point]) -> Connection:
    """Store a user-dragged polyline. Its first and last points are dropped:
    endpoints are always taken from the hooks when the route is rebuilt.
    """
    if len(points) < 2:
        raise ValueError(
            f"A custom route needs at least 2 points, got {len(points)}"
        )
    return replace(connection, waypoints=tuple(points[1:-1]), custom_route=True)


def clear_custom_points(connection: Connection) -> Connection:
    return replace(connection, waypoints=(), custom_route=False)


def label_position(points: Sequence[Point], style: PathStyle = "elbow") -> Point | None:
    """Where a connection label sits: bezier midpoint for curves, else half length."""
    if style == "curved" and len(points) == 4:
        return cubic_bezier_point(points[0], points[1], points[2], points[3], 0.5)
    return polyline_midpoint(list(points))
