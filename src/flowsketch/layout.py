from __future__ import annotations

import logging
from dataclasses import replace
from typing import Literal

from grandalf.graphs import Vertex, Edge, Graph
from grandalf.layouts import SugiyamaLayout

from .geometry import bounding_box, center_to_top_left
from .styles import ARRANGE_DEFAULTS, INTERPRETER_DEFAULTS
from .types import Container, FlowGraph, Node

logger = logging.getLogger(__name__)

ArrangeDirection = Literal["LR", "TD"]


# ============================================================================
# Vertex view -- the size grandalf reads for each node
# ============================================================================


class _VertexView:
    """Minimal view object required by grandalf's SugiyamaLayout."""

    def __init__(self, w: float, h: float) -> None:
        self.w = w
        self.h = h
        # xy is set by the layout engine (center coordinates)
        self.xy = (0.0, 0.0)


# ============================================================================
# Flow arranger -- whole-graph layered relayout
# ============================================================================


def arrange_flow(
    graph: FlowGraph,
    direction: ArrangeDirection = "LR",
    node_spacing: float | None = None,
    layer_spacing: float | None = None,
) -> FlowGraph:
    """Re-lay out every node of ``graph`` with grandalf (Sugiyama algorithm).

    Each connected component is laid out on its own and the components are
    stacked along the cross axis. Custom routes are reset to the connection
    style, and containers are refitted around their members. Node sizes, ids and hooks are unchanged.
    """
    opts = dict(ARRANGE_DEFAULTS)
    if node_spacing is not None:
        opts["node_spacing"] = node_spacing
    if layer_spacing is not None:
        opts["layer_spacing"] = layer_spacing

    if not graph.nodes:
        return FlowGraph(
            nodes=[],
            connections=list(graph.connections),
            containers=list(graph.containers),
        )

    is_horizontal = direction == "LR"

    # grandalf stacks layers along its y axis; for LR that axis is our x,
    # so the node's extent along it is its width
    vertices: dict[str, Vertex] = {}
    for node in graph.nodes:
        v = Vertex(node.id)
        if is_horizontal:
            v.view = _VertexView(node.height, node.width)
        else:
            v.view = _VertexView(node.width, node.height)
        vertices[node.id] = v

    edges_list: list[Edge] = []
    for conn in graph.connections:
        if conn.is_self_loop:
            continue
        src_v = vertices.get(conn.from_node_id)
        tgt_v = vertices.get(conn.to_node_id)
        if not src_v or not tgt_v:
            continue
        edges_list.append(Edge(src_v, tgt_v))

    g = Graph(list(vertices.values()), edges_list)

    # Layout-space centres, components shifted so they do not overlap
    centers: dict[str, tuple[float, float]] = {}
    cross_offset = 0.0
    for component in g.C:
        component_vertices = list(component.sV)
        if len(component_vertices) > 1:
            _run_sugiyama(component, opts)

        min_cross = min(v.view.xy[0] - v.view.w / 2 for v in component_vertices)
        max_cross = max(v.view.xy[0] + v.view.w / 2 for v in component_vertices)
        min_layer = min(v.view.xy[1] - v.view.h / 2 for v in component_vertices)

        for v in component_vertices:
            centers[v.data] = (
                v.view.xy[0] - min_cross + cross_offset,
                v.view.xy[1] - min_layer,
            )
        logger.debug("Arranged component of %d nodes", len(component_vertices))
        cross_offset += (max_cross - min_cross) + opts["component_gap"]

    nodes: list[Node] = []
    for node in graph.nodes:
        cross, layer = centers[node.id]
        cx, cy = (layer, cross) if is_horizontal else (cross, layer)
        top_left = center_to_top_left(cx, cy, node.width, node.height)
        nodes.append(replace(
            node,
            x=round(opts["origin_x"] + top_left.x, 2),
            y=round(opts["origin_y"] + top_left.y, 2),
        ))

    connections = [
        replace(c, waypoints=(), custom_route=False) if c.waypoints or c.custom_route else c
        for c in graph.connections
    ]
    containers = refit_containers(graph.containers, nodes)

    return FlowGraph(nodes=nodes, connections=connections, containers=containers)


def refit_containers(
    containers: list[Container],
    nodes: list[Node],
    margin: float | None = None,
) -> list[Container]:
    """Resize each container to the union of its members plus ``margin``.

    Nested containers are fitted first so their parents enclose them.
    Containers with no placed members keep their geometry.
    """
    pad = INTERPRETER_DEFAULTS["container_margin"] if margin is None else margin
    node_index = {n.id: n for n in nodes}
    by_id = {c.id: c for c in containers}
    fitted: dict[str, Container] = {}

    def fit(container: Container) -> Container:
        if container.id in fitted:
            return fitted[container.id]
        rects = [node_index[nid].rect for nid in container.node_ids if nid in node_index]
        rects += [fit(by_id[cid]).rect for cid in container.children if cid in by_id]
        box = bounding_box(rects, pad)
        result = container
        if box is not None:
            result = replace(
                container, x=box.x, y=box.y, width=box.width, height=box.height
            )
        fitted[container.id] = result
        return result

    return [fit(c) for c in containers]


# ============================================================================
# Helpers
# ============================================================================


def _run_sugiyama(component, opts: dict) -> None:
    sug = SugiyamaLayout(component)
    sug.xspace = opts["node_spacing"]
    sug.yspace = opts["layer_spacing"]
    sug.init_all()
    sug.draw()
