from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ============================================================================
# Vocabulary
# ============================================================================

NodeKind = Literal["start", "process", "decision", "end"]

HookDirection = Literal[
    "top",
    "right",
    "bottom",
    "left",
    "top-left",
    "top-right",
    "bottom-left",
    "bottom-right",
]

ConnectionVariant = Literal["positive", "negative", "neutral"]

PathStyle = Literal["straight", "curved", "elbow"]

ContainerKind = Literal["swimlane", "module", "layer", "scenario"]

PrimaryDirection = Literal["horizontal", "vertical"]

LineKind = Literal[
    "start",
    "process",
    "decision",
    "end",
    "container-open",
    "container-close",
    "ignore",
]

BranchKind = Literal["positive", "negative"]

NODE_KINDS: tuple[NodeKind, ...] = ("start", "process", "decision", "end")

CONNECTION_VARIANTS: tuple[ConnectionVariant, ...] = ("positive", "negative", "neutral")

CARDINAL_DIRECTIONS: tuple[HookDirection, ...] = ("top", "right", "bottom", "left")
DIAGONAL_DIRECTIONS: tuple[HookDirection, ...] = (
    "top-left",
    "top-right",
    "bottom-left",
    "bottom-right",
)
HOOK_DIRECTIONS = CARDINAL_DIRECTIONS + DIAGONAL_DIRECTIONS


# ============================================================================
# Geometry values
# ============================================================================

@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def contains(self, other: Rect) -> bool:
        return (
            other.left >= self.left
            and other.right <= self.right
            and other.top >= self.top
            and other.bottom <= self.bottom
        )


# ============================================================================
# Graph values -- emitted by the interpreter, consumed by renderers
# ============================================================================

@dataclass(frozen=True, slots=True)
class Hook:
    """Anchor point on a node boundary.

    ``offset`` is the fractional position along the edge for the cardinal
    directions; diagonal hooks resolve to fixed corner fractions and ignore it.
    """

    id: str
    direction: HookDirection
    offset: float = 0.5
    is_visible: bool = True

    def __post_init__(self) -> None:
        if self.direction not in HOOK_DIRECTIONS:
            raise ValueError(f'Unknown hook direction: "{self.direction}"')
        if not 0 <= self.offset <= 1:
            raise ValueError(f"Hook offset must be within [0, 1], got {self.offset}")


def default_hooks(node_id: str) -> tuple[Hook, ...]:
    """One visible hook per cardinal direction, centred on its edge."""
    return tuple(
        Hook(id=f"{node_id}-hook-{direction}-0", direction=direction, offset=0.5)
        for direction in CARDINAL_DIRECTIONS
    )


@dataclass(frozen=True, slots=True)
class Node:
    """A flowchart node. ``x``/``y`` is the top-left corner in canvas units.

    A node always carries at least one hook: an empty ``hooks`` is replaced by
    the default cardinal set at construction time.
    """

    id: str
    kind: NodeKind
    x: float
    y: float
    width: float
    height: float
    text: str = ""
    container_id: str | None = None
    hooks: tuple[Hook, ...] = ()

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f'Node "{self.id}" must have a positive size, '
                f"got {self.width}x{self.height}"
            )
        if not self.hooks:
            object.__setattr__(self, "hooks", default_hooks(self.id))
        elif not isinstance(self.hooks, tuple):
            object.__setattr__(self, "hooks", tuple(self.hooks))

    @property
    def position(self) -> Point:
        return Point(x=self.x, y=self.y)

    @property
    def rect(self) -> Rect:
        return Rect(x=self.x, y=self.y, width=self.width, height=self.height)

    @property
    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)


@dataclass(frozen=True, slots=True)
class Connection:
    """Directed edge between two nodes.

    ``waypoints`` are the interior points of a user-routed connector. They are
    kept as authored; the two endpoints are always re-resolved from the live
    hook positions (see ``paths.route_connection``). ``custom_route`` marks a
    user-drawn route, which renders as drawn even with no waypoints.
    """

    id: str
    from_node_id: str
    to_node_id: str
    from_hook_id: str | None = None
    to_hook_id: str | None = None
    label: str | None = None
    variant: ConnectionVariant | None = None
    style: PathStyle = "elbow"
    curvature: float = 0.5
    waypoints: tuple[Point, ...] = ()
    custom_route: bool = False

    @property
    def is_self_loop(self) -> bool:
        return self.from_node_id == self.to_node_id


@dataclass(frozen=True, slots=True)
class Container:
    id: str
    kind: ContainerKind
    name: str
    x: float
    y: float
    width: float
    height: float
    node_ids: tuple[str, ...] = ()
    children: tuple[str, ...] = ()
    parent_id: str | None = None
    z_index: int = 0
    is_collapsed: bool = False
    is_locked: bool = False

    @property
    def rect(self) -> Rect:
        return Rect(x=self.x, y=self.y, width=self.width, height=self.height)


@dataclass(slots=True)
class FlowGraph:
    nodes: list[Node] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    containers: list[Container] = field(default_factory=list)

    def node_map(self) -> dict[str, Node]:
        return {n.id: n for n in self.nodes}

    def dangling_connections(self) -> list[Connection]:
        """Connections whose endpoints are not in this snapshot."""
        ids = {n.id for n in self.nodes}
        return [
            c for c in self.connections
            if c.from_node_id not in ids or c.to_node_id not in ids
        ]


# ============================================================================
# Classifier output
# ============================================================================

@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    kind: LineKind
    clean_text: str = ""
    is_branch: bool = False
    branch_kind: BranchKind | None = None
    level: int = 0


IGNORED_LINE = ClassifiedLine(kind="ignore")


# ============================================================================
# Configuration
# ============================================================================

@dataclass(slots=True)
class LayoutConfig:
    """Knobs of the alignment engine."""

    min_spacing: float = 220
    preferred_direction: PrimaryDirection = "horizontal"
    grid_size: float = 20
    avoid_overlap: bool = True
    proximity_factor: float = 0.7
    default_origin: Point = field(default_factory=lambda: Point(x=100, y=300))
    canvas_width: float = 3000
    canvas_height: float = 2000
    max_random_attempts: int = 100
    radial_rings: int = 5
    radial_angle_step: float = 45
    random_seed: int = 0


@dataclass(slots=True)
class FlowOptions:
    origin_x: float | None = None
    origin_y: float | None = None
    horizontal_spacing: float | None = None
    vertical_spacing: float | None = None
    container_padding: float | None = None
    container_margin: float | None = None
    label_max_length: int | None = None
    layout: LayoutConfig | None = None
