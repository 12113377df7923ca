"""
Parse outline text (indented lines or a Mermaid-style `mindmap` block) into a Node tree.

Input never fails: empty or unusable text yields the default single-node tree.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path

from ..model import Node, default_tree

logger = logging.getLogger(__name__)

MINDMAP_HEADER = "mindmap"
SPACES_PER_LEVEL = 2

# Mermaid node shapes: id((text)), id(text), id[text], id{{text}}, id))text((, id)text(
_SHAPE_RE = re.compile(
    r"^(?P<id>[\w-]*)"
    r"(?:\(\((?P<circle>.*)\)\)|\)\)(?P<bang>.*)\(\(|\{\{(?P<hexagon>.*)\}\}"
    r"|\((?P<rounded>.*)\)|\[(?P<square>.*)\]|\)(?P<cloud>.*)\()$"
)
_ROOT_BUBBLE_RE = re.compile(r"^\(\((.*)\)\)$")


def detect_indent_unit(text: str) -> str:
    """Return "tab" when more lines start with a tab than with two spaces, else "space"."""
    tab_count = 0
    space_count = 0
    for line in text.split("\n"):
        if line.startswith("\t"):
            tab_count += 1
        elif line.startswith("  "):
            space_count += 1
    return "tab" if tab_count > space_count else "space"


def indent_level(line: str, unit: str) -> int:
    """Depth of one line under the document's indentation unit."""
    if unit == "tab":
        return len(line) - len(line.lstrip("\t"))
    count = 0
    for c in line:
        if c == " ":
            count += 1
        elif c == "\t":
            count += SPACES_PER_LEVEL
        else:
            break
    return count // SPACES_PER_LEVEL


def clean_label(text: str) -> str:
    """Strip list dashes and surrounding whitespace from a label."""
    return text.lstrip(" \t-").strip()


def clean_root_label(text: str) -> str:
    """Drop a leading `root` token and unwrap the `((Label))` bubble."""
    text = clean_label(text)
    if text.startswith("root"):
        text = text[len("root"):]
    m = _ROOT_BUBBLE_RE.match(text)
    if m:
        return clean_label(m.group(1))
    return text.strip()


def unwrap_shape(text: str) -> str:
    """Return the text inside a Mermaid node shape (`id[text]`, `(text)`, ...)."""
    m = _SHAPE_RE.match(text)
    if not m:
        return text
    for key in ("circle", "bang", "hexagon", "rounded", "square", "cloud"):
        value = m.group(key)
        if value is not None:
            return value.strip()
    return text


def _is_metadata(trimmed: str) -> bool:
    # Mermaid decorations attach to the previous node; they are not nodes.
    return trimmed.startswith("::icon(") or trimmed.startswith(":::")


def parse_outline(text: str) -> Node:
    """
    Parse outline text and return the root Node.

    The first line at the shallowest depth becomes root. A deeper line is a child
    of the line before it; an equal or shallower line attaches to the nearest
    preceding line that is shallower than itself. Jumps of several levels are
    clamped onto that nearest shallower node rather than rejected.
    """
    if not text or not text.strip():
        logger.debug("Empty outline, using default tree")
        return default_tree()

    unit = detect_indent_unit(text)
    mermaid = False
    entries: list[tuple[int, str]] = []
    for raw in text.splitlines():
        trimmed = raw.strip()
        if not trimmed:
            continue
        if trimmed == MINDMAP_HEADER and not entries:
            mermaid = True
            continue
        if mermaid and _is_metadata(trimmed):
            continue
        entries.append((indent_level(raw, unit), raw))

    if not entries:
        logger.debug("Outline has no node lines, using default tree")
        return default_tree()

    base = min(level for level, _ in entries)
    root: Node | None = None
    # (level, node) from root down to the most recent node; stale levels are popped
    stack: list[tuple[int, Node]] = []
    for level, raw in entries:
        level -= base
        if root is None:
            if level != 0:
                logger.debug("Skipping line before root: %r", raw)
                continue
            label = clean_root_label(raw) if mermaid else clean_label(raw)
            root = Node(label or "Root")
            stack.append((0, root))
            continue

        label = clean_label(raw)
        if mermaid:
            # shape text may itself start with a dash; strip it so format_outline round-trips
            label = clean_label(unwrap_shape(label))
        if not label:
            continue
        # Never pop the root: extra top-level lines become its children.
        while len(stack) > 1 and stack[-1][0] >= level:
            stack.pop()
        parent_level, parent = stack[-1]
        if level > parent_level + 1:
            logger.debug("Indent jump %d -> %d for %r, attached to %r", parent_level, level, label, parent.text)
        node = parent.add_child(Node(label))
        stack.append((level, node))

    return root or default_tree()


def parse_outline_file(path: Path | str) -> Node:
    """Read a UTF-8 outline file and parse it."""
    return parse_outline(Path(path).read_text(encoding="utf-8"))


def format_outline(root: Node, indent: str = "  ") -> str:
    """Serialize a tree back to plain indentation form, one label per line."""
    lines: list[str] = []
    stack: list[tuple[Node, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        lines.append(f"{indent * depth}{node.text}")
        for child in reversed(node.children):
            stack.append((child, depth + 1))
    return "\n".join(lines) + "\n"
