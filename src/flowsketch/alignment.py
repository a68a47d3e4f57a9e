from __future__ import annotations

import logging
import math
import random
from collections.abc import Iterable
from dataclasses import dataclass, field

from .geometry import distance, rects_overlap, snap_to_grid
from .types import LayoutConfig, Node, Point, PrimaryDirection, Rect

logger = logging.getLogger(__name__)

# ============================================================================
# Alignment engine -- collision-free placement of a node among existing ones
# ============================================================================


@dataclass(slots=True)
class AlignmentGrid:
    """Snapped centre rows/columns and occupied top-left cells of the layout."""

    rows: list[float] = field(default_factory=list)
    columns: list[float] = field(default_factory=list)
    occupied: set[tuple[float, float]] = field(default_factory=set)


class AlignmentEngine:
    """Places new nodes next to existing ones without overlapping them.

    The engine does not observe external mutation: call
    ``update_existing_nodes`` whenever the node set changes. Results depend
    only on the existing nodes, the candidate and the config, so repeated
    queries give the same answer.
    """

    def __init__(
        self,
        config: LayoutConfig | None = None,
        existing_nodes: Iterable[Node] = (),
    ) -> None:
        self.config = config or LayoutConfig()
        self._existing: list[Node] = []
        self._grid = AlignmentGrid()
        self.update_existing_nodes(existing_nodes)

    @property
    def existing_nodes(self) -> list[Node]:
        return list(self._existing)

    @property
    def grid(self) -> AlignmentGrid:
        return self._grid

    def update_existing_nodes(self, nodes: Iterable[Node]) -> None:
        self._existing = list(nodes)
        self._recalculate_grid()

    # ------------------------------------------------------------------
    # Public queries
    # ------------------------------------------------------------------

    def detect_primary_direction(self) -> PrimaryDirection:
        """Dominant axis of the existing layout, compared pairwise in order."""
        nodes = self._existing
        if len(nodes) <= 1:
            return self.config.preferred_direction

        spacing = self.config.min_spacing
        along_x = 0
        along_y = 0
        for prev, curr in zip(nodes, nodes[1:]):
            if abs(curr.x - prev.x) < spacing:
                along_x += 1
            if abs(curr.y - prev.y) < spacing:
                along_y += 1

        if along_x > along_y:
            return "horizontal"
        if along_y > along_x:
            return "vertical"
        return self.config.preferred_direction

    def find_optimal_position(
        self, candidate: Node, reference: Node | None = None
    ) -> Point:
        """Top-left position for ``candidate`` that clears every existing node.

        Tries the straight candidates around ``reference`` (default: the most
        recently added node), then a radial search, then seeded random
        placements. When all of them fail the node goes to a fixed spot past
        the right edge of the canvas; overlap is accepted there.
        """
        if not self._existing:
            return self.config.default_origin

        direction = self.detect_primary_direction()
        ref = reference if reference is not None else self._existing[-1]

        for position in self.candidate_positions(candidate, ref, direction):
            if self.is_position_valid(position, candidate):
                return position

        logger.debug(
            "Straight candidates around %s exhausted for %s; trying radial search",
            ref.id,
            candidate.id,
        )
        return self._find_radial_position(candidate, ref)

    def resolve_position(
        self, candidate: Node, reference: Node | None = None
    ) -> Point:
        """Keep ``candidate``'s own position when it is free, else relocate it."""
        proposed = candidate.position
        if self.is_position_valid(proposed, candidate):
            return proposed
        return self.find_optimal_position(candidate, reference)

    def candidate_positions(
        self, candidate: Node, reference: Node, direction: PrimaryDirection
    ) -> list[Point]:
        spacing = self.config.min_spacing
        base_x = reference.x + reference.width + spacing
        base_y = reference.y + reference.height + spacing

        right = Point(x=base_x, y=reference.y)
        below = Point(x=reference.x, y=base_y)
        diagonal = Point(x=base_x, y=base_y)
        left = Point(x=reference.x - candidate.width - spacing, y=reference.y)
        above = Point(x=reference.x, y=reference.y - candidate.height - spacing)

        if direction == "horizontal":
            return [right, below, diagonal, left, above]
        return [below, right, diagonal, left, above]

    def is_position_valid(self, position: Point, node: Node) -> bool:
        """No rectangle overlap and no centre closer than the proximity limit."""
        if not self.config.avoid_overlap:
            return True

        rect = Rect(x=position.x, y=position.y, width=node.width, height=node.height)
        for existing in self._existing:
            if existing.id == node.id:
                continue
            if rects_overlap(rect, existing.rect):
                return False

        return not self._is_too_close(rect.center, node)

    def snap_to_grid(self, value: float) -> float:
        return snap_to_grid(value, self.config.grid_size)

    def snap_position(self, position: Point) -> Point:
        return Point(x=self.snap_to_grid(position.x), y=self.snap_to_grid(position.y))

    # ------------------------------------------------------------------
    # Fallback searches
    # ------------------------------------------------------------------

    def _find_radial_position(self, candidate: Node, reference: Node) -> Point:
        cfg = self.config
        center = reference.center
        steps = max(1, int(round(360 / cfg.radial_angle_step)))

        for ring in range(1, cfg.radial_rings + 1):
            radius = cfg.min_spacing * ring
            for step in range(steps):
                angle = math.radians(step * cfg.radial_angle_step)
                cx = center.x + math.cos(angle) * radius
                cy = center.y + math.sin(angle) * radius
                position = Point(
                    x=round(cx - candidate.width / 2, 6),
                    y=round(cy - candidate.height / 2, 6),
                )
                if self.is_position_valid(position, candidate):
                    return position

        return self._find_random_position(candidate)

    def _find_random_position(self, candidate: Node) -> Point:
        cfg = self.config
        rng = random.Random(cfg.random_seed)
        span_x = max(cfg.canvas_width - candidate.width, 0)
        span_y = max(cfg.canvas_height - candidate.height, 0)

        for _ in range(cfg.max_random_attempts):
            position = Point(x=rng.random() * span_x, y=rng.random() * span_y)
            if self.is_position_valid(position, candidate):
                return position

        logger.warning(
            "No free position found for %s among %d nodes; placing it past the canvas edge",
            candidate.id,
            len(self._existing),
        )
        return Point(x=cfg.canvas_width + cfg.min_spacing, y=cfg.default_origin.y)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_too_close(self, center: Point, node: Node) -> bool:
        limit = self.config.min_spacing * self.config.proximity_factor
        for existing in self._existing:
            if existing.id == node.id:
                continue
            if distance(center, existing.center) < limit:
                return True
        return False

    def _recalculate_grid(self) -> None:
        grid = AlignmentGrid()
        if self._existing:
            direction = self.detect_primary_direction()
            if direction == "horizontal":
                ordered = sorted(self._existing, key=lambda n: (n.x, n.y))
            else:
                ordered = sorted(self._existing, key=lambda n: (n.y, n.x))

            for node in ordered:
                row = self.snap_to_grid(node.y + node.height / 2)
                col = self.snap_to_grid(node.x + node.width / 2)
                if row not in grid.rows:
                    grid.rows.append(row)
                if col not in grid.columns:
                    grid.columns.append(col)
                grid.occupied.add((self.snap_to_grid(node.x), self.snap_to_grid(node.y)))

            grid.rows.sort()
            grid.columns.sort()
        self._grid = grid


def find_optimal_position(
    candidate: Node,
    existing_nodes: Iterable[Node],
    reference: Node | None = None,
    config: LayoutConfig | None = None,
) -> Point:
    """One-shot placement, e.g. for a toolbar "add node" action."""
    engine = AlignmentEngine(config, existing_nodes)
    return engine.find_optimal_position(candidate, reference)
