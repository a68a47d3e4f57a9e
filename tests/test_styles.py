"""Tests for sizing tables and renderer palettes."""
from __future__ import annotations

import pytest

from flowsketch.styles import (
    DEFAULT_LABELS,
    NEW_NODE_TEXT,
    NODE_WIDTHS,
    container_colors,
)
from flowsketch.types import NODE_KINDS


class TestStyles:
    def test_every_kind_has_size_and_labels(self):
        for kind in NODE_KINDS:
            assert NODE_WIDTHS[kind] > 0
            assert DEFAULT_LABELS[kind]
            assert NEW_NODE_TEXT[kind]

    @pytest.mark.parametrize("kind", ["swimlane", "module", "layer", "scenario"])
    def test_container_colors(self, kind):
        fill, border = container_colors(kind)
        assert fill.startswith("#") and border.startswith("#")
        assert fill != border

    def test_module_palette(self):
        assert container_colors("module") == ("#E8F5E9", "#4CAF50")

    def test_unknown_container_kind(self):
        with pytest.raises(KeyError):
            container_colors("cloud")  # type: ignore[arg-type]
