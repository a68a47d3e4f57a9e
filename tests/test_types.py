"""Tests for the graph value types and their construction-time checks."""
from __future__ import annotations

import pytest

from flowsketch.types import (
    CARDINAL_DIRECTIONS,
    Connection,
    FlowGraph,
    Hook,
    LayoutConfig,
    Node,
    Point,
    Rect,
)


def make_node(**overrides) -> Node:
    defaults = dict(id="A", kind="process", x=0, y=0, width=200, height=80)
    defaults.update(overrides)
    return Node(**defaults)


# ============================================================================
# Node
# ============================================================================


class TestNode:
    def test_empty_hooks_become_default_cardinal_set(self):
        node = make_node()
        assert [h.direction for h in node.hooks] == list(CARDINAL_DIRECTIONS)
        assert all(h.offset == 0.5 and h.is_visible for h in node.hooks)
        assert node.hooks[0].id == "A-hook-top-0"

    def test_hook_list_is_frozen_to_tuple(self):
        node = make_node(hooks=[Hook(id="h", direction="left")])
        assert node.hooks == (Hook(id="h", direction="left"),)

    @pytest.mark.parametrize("width,height", [(0, 80), (200, 0), (-5, 80)])
    def test_rejects_non_positive_size(self, width, height):
        with pytest.raises(ValueError, match="positive size"):
            make_node(width=width, height=height)

    def test_geometry_properties(self):
        node = make_node(x=10, y=20)
        assert node.position == Point(10, 20)
        assert node.rect == Rect(10, 20, 200, 80)
        assert node.center == Point(110, 60)


# ============================================================================
# Hook
# ============================================================================


class TestHook:
    def test_rejects_unknown_direction(self):
        with pytest.raises(ValueError, match="direction"):
            Hook(id="h", direction="north")  # type: ignore[arg-type]

    @pytest.mark.parametrize("offset", [-0.1, 1.5])
    def test_rejects_offset_outside_unit_range(self, offset):
        with pytest.raises(ValueError, match="offset"):
            Hook(id="h", direction="top", offset=offset)

    def test_accepts_range_bounds(self):
        assert Hook(id="a", direction="top", offset=0).offset == 0
        assert Hook(id="b", direction="top", offset=1).offset == 1


# ============================================================================
# Connection / FlowGraph / config
# ============================================================================


class TestFlowGraph:
    def test_self_loop(self):
        assert Connection(id="c", from_node_id="A", to_node_id="A").is_self_loop
        assert not Connection(id="c", from_node_id="A", to_node_id="B").is_self_loop

    def test_dangling_connections(self):
        graph = FlowGraph(
            nodes=[make_node(id="A"), make_node(id="B", x=400)],
            connections=[
                Connection(id="ok", from_node_id="A", to_node_id="B"),
                Connection(id="bad", from_node_id="A", to_node_id="Z"),
            ],
        )
        assert [c.id for c in graph.dangling_connections()] == ["bad"]
        assert set(graph.node_map()) == {"A", "B"}


class TestLayoutConfig:
    def test_defaults(self):
        cfg = LayoutConfig()
        assert cfg.min_spacing == 220
        assert cfg.preferred_direction == "horizontal"
        assert cfg.grid_size == 20
        assert cfg.avoid_overlap is True
        assert cfg.proximity_factor == 0.7
        assert cfg.default_origin == Point(100, 300)

    def test_instances_do_not_share_origin(self):
        assert LayoutConfig().default_origin is not None
        a, b = LayoutConfig(), LayoutConfig()
        a.default_origin = Point(0, 0)
        assert b.default_origin == Point(100, 300)
