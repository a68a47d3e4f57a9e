from __future__ import annotations

import re

from .styles import (
    DEFAULT_CONTAINER_NAME,
    DEFAULT_LABELS,
    ELLIPSIS,
    LABEL_MAX_LENGTH,
)
from .types import IGNORED_LINE, ClassifiedLine, NodeKind

# ============================================================================
# DSL line classifier -- one source line to one semantic token
# ============================================================================

# Outline markers and decorations that never carry a node
NOISE_REGEX = re.compile(r"^(\d+\.\d+\.\d+\.|\d+\.\d+\.|•|[-*]|\d+\))")
SEPARATOR_REGEX = re.compile(r"^={3,}")
HEADING_REGEX = re.compile(
    r"^(cenário macro|fluxograma|nós em sequência|versão)", re.IGNORECASE
)

MARKER_PATTERNS: list[tuple[re.Pattern[str], NodeKind]] = [
    (re.compile(r"^\[início\]", re.IGNORECASE), "start"),
    (re.compile(r"^\[fim\]", re.IGNORECASE), "end"),
    (re.compile(r"^\[decisão\]", re.IGNORECASE), "decision"),
    (re.compile(r"^\[processo\]", re.IGNORECASE), "process"),
]

POSITIVE_BRANCH_REGEX = re.compile(r"^(sim|s)\s*(?:→|->|:|-)\s*", re.IGNORECASE)
NEGATIVE_BRANCH_REGEX = re.compile(r"^(não|nao|n)\s*(?:→|->|:|-)\s*", re.IGNORECASE)

CONTAINER_CLOSE_REGEX = re.compile(r"^\[container-end\]", re.IGNORECASE)
CONTAINER_OPEN_REGEX = re.compile(r"^\[container\]\s*(.*)$", re.IGNORECASE)

# Implicit process: starts with an uppercase letter (accented capitals included)
IMPLICIT_PROCESS_REGEX = re.compile(r"^[A-ZÀ-Ú]")

LEADING_BULLET_REGEX = re.compile(r"^[-*•]\s*")

# Outline numbering stripped by strip_numbering()
NUMBERING_PREFIXES = [
    re.compile(r"^\d+\.\d+\.\d+\.\s*"),
    re.compile(r"^\d+\.\d+\.\s*"),
    re.compile(r"^\(\d+\)\s*"),
]


def classify_line(raw_line: str, max_length: int = LABEL_MAX_LENGTH) -> ClassifiedLine:
    """Classify one DSL line. Never raises; unknown lines become ``ignore``."""
    indent = len(raw_line) - len(raw_line.lstrip(" "))
    level = indent // 2
    line = raw_line.strip()

    if _is_noise(line):
        return IGNORED_LINE

    for pattern, kind in MARKER_PATTERNS:
        m = pattern.match(line)
        if m:
            text = LEADING_BULLET_REGEX.sub("", line[m.end():].strip()).strip()
            return ClassifiedLine(
                kind=kind,
                clean_text=truncate_label(text or DEFAULT_LABELS[kind], max_length),
                level=level,
            )

    m = POSITIVE_BRANCH_REGEX.match(line)
    if m:
        return _branch(line[m.end():], "positive", "Sim", level, max_length)

    m = NEGATIVE_BRANCH_REGEX.match(line)
    if m:
        return _branch(line[m.end():], "negative", "Não", level, max_length)

    if CONTAINER_CLOSE_REGEX.match(line):
        return ClassifiedLine(kind="container-close", level=level)

    m = CONTAINER_OPEN_REGEX.match(line)
    if m:
        name = m.group(1).strip() or DEFAULT_CONTAINER_NAME
        return ClassifiedLine(kind="container-open", clean_text=name, level=level)

    if IMPLICIT_PROCESS_REGEX.match(line):
        return ClassifiedLine(
            kind="process",
            clean_text=truncate_label(line, max_length),
            level=level,
        )

    return IGNORED_LINE


def truncate_label(text: str, max_length: int = LABEL_MAX_LENGTH) -> str:
    """Cap a display label at ``max_length`` characters, ellipsis included."""
    if max_length <= 0 or len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)].rstrip() + ELLIPSIS


def strip_numbering(text: str) -> str:
    """Drop outline numbering ("1.1.", "1.1.1.", "(1)") from every line."""
    lines = []
    for line in text.split("\n"):
        cleaned = line.strip()
        for prefix in NUMBERING_PREFIXES:
            cleaned = prefix.sub("", cleaned)
        lines.append(cleaned)
    return "\n".join(lines)


def _is_noise(line: str) -> bool:
    return (
        len(line) < 3
        or bool(NOISE_REGEX.match(line))
        or bool(SEPARATOR_REGEX.match(line))
        or bool(HEADING_REGEX.match(line))
    )


def _branch(
    rest: str,
    branch_kind: str,
    default_label: str,
    level: int,
    max_length: int,
) -> ClassifiedLine:
    text = rest.strip()
    return ClassifiedLine(
        kind="process",
        clean_text=truncate_label(text or default_label, max_length),
        is_branch=True,
        branch_kind=branch_kind,  # type: ignore[arg-type]
        level=level + 1,
    )
