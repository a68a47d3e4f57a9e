from __future__ import annotations

import unicodedata

from .types import ConnectionVariant

# Decision branch labels
VARIANT_LABELS = {
    "positive": "Sim",
    "negative": "Não",
}

_POSITIVE_WORDS = {"sim", "yes"}
_NEGATIVE_WORDS = {"nao", "no"}


def label_for_variant(variant: ConnectionVariant | None) -> str | None:
    if variant is None or variant == "neutral":
        return None
    return VARIANT_LABELS[variant]


def infer_variant_from_label(label: str | None) -> ConnectionVariant:
    """Map a free-text connection label to a branch variant, ignoring accents."""
    normalized = _normalize(label)
    if normalized in _POSITIVE_WORDS:
        return "positive"
    if normalized in _NEGATIVE_WORDS:
        return "negative"
    return "neutral"


def _normalize(label: str | None) -> str:
    decomposed = unicodedata.normalize("NFD", label or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().strip()
