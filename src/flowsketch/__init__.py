"""flowsketch: turn flow DSL text into laid-out flowcharts with attached connectors."""

from __future__ import annotations

import logging

from .types import (
    ClassifiedLine,
    Connection,
    Container,
    FlowGraph,
    FlowOptions,
    Hook,
    LayoutConfig,
    Node,
    Point,
    Rect,
)
from .classifier import classify_line, strip_numbering
from .interpreter import FlowInterpreter, interpret_text, interpret_structured_text
from .alignment import AlignmentEngine, find_optimal_position
from .hooks import (
    add_hook,
    can_add_hook,
    find_nearest_hook,
    get_default_hooks,
    redistribute_hooks,
    resolve_hook_position,
    update_hook,
)
from .paths import ConnectionRoute, build_path, route_connection, with_custom_points
from .layout import arrange_flow
from .factory import create_node

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "interpret_text",
    "interpret_structured_text",
    "FlowInterpreter",
    "classify_line",
    "strip_numbering",
    "AlignmentEngine",
    "find_optimal_position",
    "resolve_hook_position",
    "get_default_hooks",
    "find_nearest_hook",
    "can_add_hook",
    "add_hook",
    "redistribute_hooks",
    "update_hook",
    "build_path",
    "route_connection",
    "with_custom_points",
    "ConnectionRoute",
    "arrange_flow",
    "create_node",
    "ClassifiedLine",
    "Connection",
    "Container",
    "FlowGraph",
    "FlowOptions",
    "Hook",
    "LayoutConfig",
    "Node",
    "Point",
    "Rect",
]
