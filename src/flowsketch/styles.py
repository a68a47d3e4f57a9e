from __future__ import annotations

from .types import ContainerKind

# ============================================================================
# Node sizing -- fixed per kind; text wraps inside the node when rendered.
# ============================================================================

NODE_WIDTHS = {
    "start": 140,
    "end": 140,
    "decision": 160,
    "process": 200,
}

NODE_HEIGHT = 80

# Canonical label used when a marker line carries no text
DEFAULT_LABELS = {
    "start": "Início",
    "end": "Fim",
    "decision": "Decisão",
    "process": "Processo",
}

# Placeholder text for nodes created from the toolbar
NEW_NODE_TEXT = {
    "start": "[Início] Novo fluxo",
    "process": "[Processo] Nova ação",
    "decision": '[Decisão] "Condição?"',
    "end": "[Fim] Fluxo concluído",
}

LABEL_MAX_LENGTH = 50
ELLIPSIS = "…"

DEFAULT_CONTAINER_NAME = "Container"
DEFAULT_CONTAINER_KIND = "module"
DEFAULT_CONTAINER_SIZE = (400, 240)

# ============================================================================
# Interpreter spacing defaults
# ============================================================================

INTERPRETER_DEFAULTS = {
    "origin_x": 300,
    "origin_y": 100,
    "horizontal_spacing": 250,
    "vertical_spacing": 160,
    "container_padding": 40,
    "container_margin": 40,
    "label_max_length": LABEL_MAX_LENGTH,
}

# ============================================================================
# Hooks
# ============================================================================

MAX_HOOKS_PER_DIRECTION = 5
HOOK_OFFSET_RANGE = (0.15, 0.85)
HOOK_SNAP_DISTANCE = 30

# Fixed corner fraction for diagonal hooks, along the top/bottom edge
DIAGONAL_HOOK_FRACTIONS = {
    "top-left": (0.25, 0.0),
    "top-right": (0.75, 0.0),
    "bottom-left": (0.25, 1.0),
    "bottom-right": (0.75, 1.0),
}

# ============================================================================
# Containers -- renderer palette
# ============================================================================

CONTAINER_COLORS = {
    "swimlane": "#E3F2FD",
    "module": "#E8F5E9",
    "layer": "#FFF3E0",
    "scenario": "#F3E5F5",
}

CONTAINER_BORDER_COLORS = {
    "swimlane": "#2196F3",
    "module": "#4CAF50",
    "layer": "#FF9800",
    "scenario": "#9C27B0",
}


def container_colors(kind: ContainerKind) -> tuple[str, str]:
    """(fill, border) pair a renderer paints a container of ``kind`` with."""
    return CONTAINER_COLORS[kind], CONTAINER_BORDER_COLORS[kind]


# ============================================================================
# Arranger (grandalf) spacing
# ============================================================================

ARRANGE_DEFAULTS = {
    "origin_x": 100,
    "origin_y": 100,
    "node_spacing": 60,
    "layer_spacing": 120,
    "component_gap": 120,
}
