from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from .styles import NEW_NODE_TEXT, NODE_HEIGHT, NODE_WIDTHS
from .types import CONNECTION_VARIANTS, NODE_KINDS, Connection, Hook, Node, NodeKind, Point
from .variants import infer_variant_from_label

# ============================================================================
# Node factory -- toolbar-created nodes and LLM / JSON payloads
# ============================================================================


def new_node_id() -> str:
    return f"node-{uuid.uuid4().hex[:12]}"


def create_node(
    kind: NodeKind,
    position: Point,
    text: str | None = None,
    node_id: str | None = None,
) -> Node:
    if kind not in NODE_KINDS:
        raise ValueError(f'Unknown node kind: "{kind}"')
    return Node(
        id=node_id or new_node_id(),
        kind=kind,
        x=position.x,
        y=position.y,
        width=NODE_WIDTHS[kind],
        height=NODE_HEIGHT,
        text=text or NEW_NODE_TEXT[kind],
    )


def clone_node(node: Node, offset: tuple[float, float] = (20, 20)) -> Node:
    """Copy of ``node`` under a fresh id, shifted by ``offset``.

    Hook ids embed the owning node id, so the hooks are re-keyed to the new
    id; directions and offsets are kept.
    """
    new_id = new_node_id()
    hooks = tuple(
        replace(h, id=h.id.replace(node.id, new_id, 1)) for h in node.hooks
    )
    return replace(
        node,
        id=new_id,
        x=node.x + offset[0],
        y=node.y + offset[1],
        hooks=hooks,
    )


def node_from_dict(data: Mapping[str, Any]) -> Node:
    """Validate and build a node from a JSON-like mapping.

    Accepts ``type`` or ``kind`` for the node kind and either a nested
    ``position`` object or flat ``x``/``y``.
    """
    if not isinstance(data, Mapping):
        raise ValueError("Node payload must be an object")

    node_id = data.get("id")
    kind = data.get("kind", data.get("type"))
    if not isinstance(node_id, str) or not node_id:
        raise ValueError("Node payload needs a string id")
    if kind not in NODE_KINDS:
        raise ValueError(f'Node "{node_id}" has unknown kind: {kind!r}')

    position = data.get("position")
    if isinstance(position, Mapping):
        x, y = position.get("x"), position.get("y")
    else:
        x, y = data.get("x"), data.get("y")

    width = data.get("width", NODE_WIDTHS[kind])
    height = data.get("height", NODE_HEIGHT)
    for name, value in (("x", x), ("y", y), ("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f'Node "{node_id}" field {name} must be a number')

    text = data.get("text", "")
    if not isinstance(text, str):
        raise ValueError(f'Node "{node_id}" text must be a string')

    try:
        hooks = tuple(
            Hook(
                id=str(h["id"]),
                direction=h["direction"],
                offset=float(h.get("offset", 0.5)),
                is_visible=bool(h.get("isVisible", h.get("is_visible", True))),
            )
            for h in data.get("hooks") or ()
        )
    except (KeyError, TypeError, AttributeError) as err:
        raise ValueError(f'Node "{node_id}" has a malformed hook: {err}') from err

    return Node(
        id=node_id,
        kind=kind,
        x=float(x),
        y=float(y),
        width=float(width),
        height=float(height),
        text=text,
        container_id=data.get("containerId", data.get("container_id")),
        hooks=hooks,
    )


def connection_from_dict(data: Mapping[str, Any]) -> Connection:
    """Build a connection from a JSON-like mapping; the variant defaults to
    what the label implies ("Sim" -> positive, "Não" -> negative).
    """
    if not isinstance(data, Mapping):
        raise ValueError("Connection payload must be an object")

    from_id = data.get("fromNodeId", data.get("from_node_id"))
    to_id = data.get("toNodeId", data.get("to_node_id"))
    if not isinstance(from_id, str) or not isinstance(to_id, str):
        raise ValueError("Connection payload needs fromNodeId and toNodeId")

    label = data.get("label")
    if label is not None and not isinstance(label, str):
        raise ValueError(f"Connection {from_id} -> {to_id} label must be a string")
    variant = data.get("variant") or infer_variant_from_label(label)
    if variant not in CONNECTION_VARIANTS:
        raise ValueError(
            f"Connection {from_id} -> {to_id} has unknown variant: {variant!r}"
        )

    points = data.get("points") or ()
    try:
        route = [Point(x=float(p["x"]), y=float(p["y"])) for p in points]
    except (KeyError, TypeError, ValueError) as err:
        raise ValueError(
            f"Connection {from_id} -> {to_id} has a malformed point: {err}"
        ) from err
    if len(route) == 1:
        raise ValueError(
            f"Connection {from_id} -> {to_id} needs at least 2 points, got 1"
        )

    return Connection(
        id=str(data.get("id") or f"conn-{from_id}-to-{to_id}"),
        from_node_id=from_id,
        to_node_id=to_id,
        from_hook_id=data.get("fromHookId", data.get("from_hook_id")),
        to_hook_id=data.get("toHookId", data.get("to_hook_id")),
        label=label,
        variant=variant,
        waypoints=tuple(route[1:-1]),
        custom_route=bool(route),
    )
