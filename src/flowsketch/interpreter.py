from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from .alignment import AlignmentEngine
from .classifier import classify_line, strip_numbering
from .geometry import bounding_box
from .styles import (
    DEFAULT_CONTAINER_KIND,
    DEFAULT_CONTAINER_SIZE,
    INTERPRETER_DEFAULTS,
    NODE_HEIGHT,
    NODE_WIDTHS,
)
from .types import (
    BranchKind,
    ClassifiedLine,
    Connection,
    Container,
    FlowGraph,
    FlowOptions,
    LayoutConfig,
    Node,
    NodeKind,
    Point,
)
from .variants import label_for_variant

logger = logging.getLogger(__name__)

# ============================================================================
# Flow interpreter -- classified lines to nodes, connections and containers
# ============================================================================


@dataclass(slots=True)
class _DecisionEntry:
    node_id: str
    x: float
    y: float


@dataclass(slots=True)
class _ContainerDraft:
    id: str
    name: str
    x: float
    y: float
    width: float
    height: float
    resume_y: float
    z_index: int
    parent_id: str | None = None
    node_ids: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)


@dataclass(slots=True)
class _InterpreterState:
    """Everything carried from one line to the next during a single call."""

    cursor: Point
    existing: list[Node]
    taken_ids: set[str]
    nodes: list[Node] = field(default_factory=list)
    node_index: dict[str, Node] = field(default_factory=dict)
    connections: list[Connection] = field(default_factory=list)
    container_order: list[str] = field(default_factory=list)
    closed_containers: dict[str, Container] = field(default_factory=dict)
    decision_stack: list[_DecisionEntry] = field(default_factory=list)
    container_stack: list[_ContainerDraft] = field(default_factory=list)
    last_node_id: str | None = None
    counters: dict[str, int] = field(default_factory=dict)


class FlowInterpreter:
    """Turns flow DSL text into a laid-out graph.

    The interpreter is permissive: lines it cannot classify are dropped and no
    input makes it raise. Each ``interpret`` call starts from a fresh state.
    """

    def __init__(self, options: FlowOptions | None = None) -> None:
        self._opts = _merge_options(options)
        self._layout = (options.layout if options else None) or LayoutConfig()

    def interpret(self, text: str, existing_nodes: Iterable[Node] = ()) -> FlowGraph:
        existing = list(existing_nodes)
        tokens = [
            token
            for token in (
                classify_line(line, self._opts["label_max_length"])
                for line in (text or "").split("\n")
                if line.strip()
            )
            if token.kind != "ignore"
        ]

        state = _InterpreterState(
            cursor=Point(x=self._opts["origin_x"], y=self._opts["origin_y"]),
            existing=existing,
            taken_ids={n.id for n in existing},
        )
        engine = AlignmentEngine(self._layout, existing)

        for token in tokens:
            self._step(state, engine, token)

        while state.container_stack:
            self._close_container(state)

        graph = FlowGraph(
            nodes=state.nodes,
            connections=state.connections,
            containers=[state.closed_containers[cid] for cid in state.container_order],
        )
        logger.debug(
            "Interpreted flow: %d nodes, %d connections, %d containers",
            len(graph.nodes),
            len(graph.connections),
            len(graph.containers),
        )
        return graph

    # ------------------------------------------------------------------
    # Per-line step
    # ------------------------------------------------------------------

    def _step(
        self,
        state: _InterpreterState,
        engine: AlignmentEngine,
        token: ClassifiedLine,
    ) -> None:
        if token.kind == "container-open":
            self._open_container(state, token.clean_text)
            return

        if token.kind == "container-close":
            if state.container_stack:
                self._close_container(state)
            return

        if token.is_branch and state.decision_stack:
            self._place_branch(state, engine, token)
            return

        if token.is_branch:
            logger.debug(
                "Branch %r has no open decision; placing it in sequence",
                token.clean_text,
            )

        self._place_in_sequence(state, engine, token)

    def _place_in_sequence(
        self,
        state: _InterpreterState,
        engine: AlignmentEngine,
        token: ClassifiedLine,
    ) -> None:
        kind: NodeKind = token.kind  # type: ignore[assignment]
        # Any non-decision node in the chain leaves the innermost decision
        if kind != "decision" and state.decision_stack:
            state.decision_stack.pop()

        previous = state.node_index.get(state.last_node_id) if state.last_node_id else None

        node = self._emit_node(state, engine, kind, token.clean_text, state.cursor, previous)

        if previous is not None:
            self._connect(state, previous.id, node.id)
        state.last_node_id = node.id

        if kind == "decision":
            state.decision_stack.append(_DecisionEntry(node_id=node.id, x=node.x, y=node.y))
            state.cursor = node.position
        else:
            state.cursor = Point(x=node.x + self._opts["horizontal_spacing"], y=node.y)

    def _place_branch(
        self,
        state: _InterpreterState,
        engine: AlignmentEngine,
        token: ClassifiedLine,
    ) -> None:
        decision = state.decision_stack[-1]
        branch_kind: BranchKind = token.branch_kind or "positive"

        x = decision.x + self._opts["horizontal_spacing"]
        y = decision.y
        if branch_kind == "negative":
            y += self._opts["vertical_spacing"]

        anchor = state.node_index.get(decision.node_id)
        node = self._emit_node(state, engine, "process", token.clean_text, Point(x=x, y=y), anchor)
        self._connect(
            state,
            decision.node_id,
            node.id,
            label=label_for_variant(branch_kind),
            variant=branch_kind,
        )

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _emit_node(
        self,
        state: _InterpreterState,
        engine: AlignmentEngine,
        kind: NodeKind,
        text: str,
        proposed: Point,
        anchor: Node | None,
    ) -> Node:
        container = state.container_stack[-1] if state.container_stack else None
        candidate = Node(
            id=self._next_id(state, "node"),
            kind=kind,
            x=proposed.x,
            y=proposed.y,
            width=NODE_WIDTHS[kind],
            height=NODE_HEIGHT,
            text=text,
            container_id=container.id if container else None,
        )

        engine.update_existing_nodes(state.existing + state.nodes)
        position = engine.resolve_position(candidate, anchor)
        node = candidate
        if position != candidate.position:
            node = replace(candidate, x=position.x, y=position.y)

        state.nodes.append(node)
        state.node_index[node.id] = node
        if container is not None:
            container.node_ids.append(node.id)
        return node

    def _connect(
        self,
        state: _InterpreterState,
        from_id: str,
        to_id: str,
        label: str | None = None,
        variant: BranchKind | None = None,
    ) -> None:
        state.connections.append(Connection(
            id=self._next_id(state, "conn"),
            from_node_id=from_id,
            to_node_id=to_id,
            label=label,
            variant=variant,
        ))

    def _next_id(self, state: _InterpreterState, prefix: str) -> str:
        while True:
            count = state.counters.get(prefix, 0) + 1
            state.counters[prefix] = count
            candidate = f"{prefix}-{count}"
            if candidate not in state.taken_ids:
                state.taken_ids.add(candidate)
                return candidate

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def _open_container(self, state: _InterpreterState, name: str) -> None:
        parent = state.container_stack[-1] if state.container_stack else None
        width, height = DEFAULT_CONTAINER_SIZE
        draft = _ContainerDraft(
            id=self._next_id(state, "container"),
            name=name,
            x=state.cursor.x,
            y=state.cursor.y,
            width=width,
            height=height,
            resume_y=state.cursor.y,
            z_index=len(state.container_stack),
            parent_id=parent.id if parent else None,
        )
        if parent is not None:
            parent.children.append(draft.id)

        state.container_stack.append(draft)
        state.container_order.append(draft.id)

        pad = self._opts["container_padding"]
        state.cursor = Point(x=state.cursor.x + pad, y=state.cursor.y + pad)

    def _close_container(self, state: _InterpreterState) -> None:
        draft = state.container_stack.pop()
        margin = self._opts["container_margin"]

        rects = [state.node_index[nid].rect for nid in draft.node_ids]
        rects += [state.closed_containers[cid].rect for cid in draft.children]
        box = bounding_box(rects, margin)
        if box is not None:
            draft.x, draft.y = box.x, box.y
            draft.width, draft.height = box.width, box.height

        container = Container(
            id=draft.id,
            kind=DEFAULT_CONTAINER_KIND,
            name=draft.name,
            x=draft.x,
            y=draft.y,
            width=draft.width,
            height=draft.height,
            node_ids=tuple(draft.node_ids),
            children=tuple(draft.children),
            parent_id=draft.parent_id,
            z_index=draft.z_index,
        )
        state.closed_containers[container.id] = container
        state.cursor = Point(
            x=container.x + container.width + margin,
            y=draft.resume_y,
        )


# ============================================================================
# Module-level entry points
# ============================================================================


def interpret_text(
    text: str,
    existing_nodes: Iterable[Node] | None = None,
    options: FlowOptions | None = None,
) -> FlowGraph:
    """Interpret flow DSL text into ``{nodes, connections, containers}``.

    ``existing_nodes`` are only obstacles for placement; they are not part of
    the returned graph.
    """
    return FlowInterpreter(options).interpret(text, existing_nodes or ())


def interpret_structured_text(
    text: str,
    existing_nodes: Iterable[Node] | None = None,
    options: FlowOptions | None = None,
) -> FlowGraph:
    """Like ``interpret_text`` but first strips outline numbering from lines."""
    return interpret_text(strip_numbering(text or ""), existing_nodes, options)


def _merge_options(options: FlowOptions | None) -> dict:
    opts = dict(INTERPRETER_DEFAULTS)
    if options:
        for key in INTERPRETER_DEFAULTS:
            value = getattr(options, key)
            if value is not None:
                opts[key] = value
    return opts
