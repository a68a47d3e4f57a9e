from __future__ import annotations

import math
from dataclasses import replace

from .geometry import distance
from .styles import (
    DIAGONAL_HOOK_FRACTIONS,
    HOOK_OFFSET_RANGE,
    HOOK_SNAP_DISTANCE,
    MAX_HOOKS_PER_DIRECTION,
)
from .types import (
    DIAGONAL_DIRECTIONS,
    Hook,
    HookDirection,
    Node,
    Point,
    default_hooks,
)

# ============================================================================
# Hook anchor model -- named anchor points on a node boundary
# ============================================================================


def resolve_hook_position(
    node: Node, direction: HookDirection, offset: float = 0.5
) -> Point:
    """Absolute canvas position of an anchor on ``node``'s boundary.

    Cardinal directions place the anchor at ``offset`` along the edge
    (left-to-right for top/bottom, top-to-bottom for left/right). Diagonals
    ignore ``offset`` and sit at the 0.25/0.75 split of the top or bottom edge.
    """
    x, y, w, h = node.x, node.y, node.width, node.height
    t = min(max(offset, 0.0), 1.0)

    if direction == "top":
        return Point(x=x + w * t, y=y)
    if direction == "bottom":
        return Point(x=x + w * t, y=y + h)
    if direction == "left":
        return Point(x=x, y=y + h * t)
    if direction == "right":
        return Point(x=x + w, y=y + h * t)

    fx, fy = DIAGONAL_HOOK_FRACTIONS[direction]
    return Point(x=x + w * fx, y=y + h * fy)


def hook_position(node: Node, hook: Hook) -> Point:
    return resolve_hook_position(node, hook.direction, hook.offset)


def get_default_hooks(node_id: str) -> list[Hook]:
    return list(default_hooks(node_id))


def get_full_hooks(node_id: str) -> list[Hook]:
    """Default cardinal hooks plus the four diagonal corners."""
    hooks = get_default_hooks(node_id)
    hooks.extend(
        Hook(id=f"{node_id}-hook-{direction}-0", direction=direction, offset=0.0)
        for direction in DIAGONAL_DIRECTIONS
    )
    return hooks


def get_hook(node: Node, hook_id: str) -> Hook:
    for hook in node.hooks:
        if hook.id == hook_id:
            return hook
    raise KeyError(f'Node "{node.id}" has no hook "{hook_id}"')


def get_visible_hooks(node: Node) -> list[Hook]:
    return [h for h in node.hooks if h.is_visible]


def find_nearest_hook(
    node: Node, point: Point, max_distance: float = HOOK_SNAP_DISTANCE
) -> Hook | None:
    """Closest hook to ``point`` within ``max_distance``, for snap-to-hook."""
    nearest: Hook | None = None
    best = max_distance
    for hook in node.hooks:
        d = distance(hook_position(node, hook), point)
        if d <= best:
            best = d
            nearest = hook
    return nearest


# ============================================================================
# Hook editing -- every operation returns a new node
# ============================================================================


def can_add_hook(node: Node, direction: HookDirection) -> bool:
    in_direction = sum(1 for h in node.hooks if h.direction == direction)
    return in_direction < MAX_HOOKS_PER_DIRECTION


def distributed_offset(total: int, index: int) -> float:
    """Offset of slot ``index`` when ``total`` hooks share one edge."""
    if total <= 1:
        return 0.5
    low, high = HOOK_OFFSET_RANGE
    return low + (high - low) * index / (total - 1)


def add_hook(
    node: Node, direction: HookDirection, offset: float | None = None
) -> Node:
    """Add a hook on ``direction``.

    Without an explicit ``offset`` the whole direction is re-spread evenly.
    """
    if not can_add_hook(node, direction):
        raise ValueError(
            f'Node "{node.id}" already has {MAX_HOOKS_PER_DIRECTION} hooks '
            f'on "{direction}"'
        )

    taken = {h.id for h in node.hooks}
    index = sum(1 for h in node.hooks if h.direction == direction)
    hook_id = f"{node.id}-hook-{direction}-{index}"
    while hook_id in taken:
        index += 1
        hook_id = f"{node.id}-hook-{direction}-{index}"

    new_hook = Hook(
        id=hook_id,
        direction=direction,
        offset=0.5 if offset is None else offset,
    )
    updated = replace(node, hooks=node.hooks + (new_hook,))
    if offset is None:
        return redistribute_hooks(updated, direction)
    return updated


def remove_hook(node: Node, hook_id: str) -> Node:
    """Drop a hook. Removing the last one falls back to the default set."""
    remaining = tuple(h for h in node.hooks if h.id != hook_id)
    return replace(node, hooks=remaining)


def update_hook(
    node: Node,
    hook_id: str,
    *,
    direction: HookDirection | None = None,
    offset: float | None = None,
    is_visible: bool | None = None,
) -> Node:
    """Return ``node`` with one hook edited; its other hooks are untouched.

    Moving a hook to another direction without an ``offset`` puts it in the
    next free slot after the hooks already there. Offsets are clamped to
    [0, 1].
    """
    hook = get_hook(node, hook_id)
    next_direction = direction or hook.direction
    next_offset = hook.offset if offset is None else offset

    if direction is not None and direction != hook.direction:
        peers = sum(1 for h in node.hooks if h.id != hook_id and h.direction == direction)
        if peers >= MAX_HOOKS_PER_DIRECTION:
            raise ValueError(
                f'Node "{node.id}" already has {MAX_HOOKS_PER_DIRECTION} hooks '
                f'on "{direction}"'
            )
        if offset is None:
            next_offset = distributed_offset(peers + 1, peers)

    updated = replace(
        hook,
        direction=next_direction,
        offset=min(max(next_offset, 0.0), 1.0),
        is_visible=hook.is_visible if is_visible is None else is_visible,
    )
    return replace(
        node, hooks=tuple(updated if h.id == hook_id else h for h in node.hooks)
    )


def redistribute_hooks(node: Node, direction: HookDirection) -> Node:
    """Spread the hooks sharing ``direction`` evenly across the edge."""
    members = [h for h in node.hooks if h.direction == direction]
    slots = {h.id: distributed_offset(len(members), i) for i, h in enumerate(members)}
    hooks = tuple(
        replace(h, offset=slots[h.id]) if h.id in slots else h
        for h in node.hooks
    )
    return replace(node, hooks=hooks)


# ============================================================================
# Default anchors -- used when a connection names no hook
# ============================================================================


def best_connection_directions(
    from_node: Node, to_node: Node
) -> tuple[HookDirection, HookDirection]:
    """Pick the facing sides of two nodes from the angle between their centres."""
    a = from_node.center
    b = to_node.center
    angle = math.degrees(math.atan2(b.y - a.y, b.x - a.x))

    if -45 <= angle < 45:
        return "right", "left"
    if 45 <= angle < 135:
        return "bottom", "top"
    if -135 <= angle < -45:
        return "top", "bottom"
    return "left", "right"


def default_anchor(node: Node, direction: HookDirection) -> Point:
    """Anchor for ``direction``: the node's own hook there if it has one."""
    for hook in node.hooks:
        if hook.direction == direction:
            return hook_position(node, hook)
    return resolve_hook_position(node, direction, 0.5)
