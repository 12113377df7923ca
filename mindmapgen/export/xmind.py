"""
Export a parsed outline to an XMind workbook; outline nesting becomes topic nesting.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..model import Node

logger = logging.getLogger(__name__)


def _workbook_class() -> Any:
    try:
        from py_xmind16 import Workbook
    except ImportError as e:
        raise ImportError("py-xmind16 is required for --xmind. Install with: pip install py-xmind16") from e
    return Workbook


def build_xmind(
    root: Node,
    out_path: Path | str,
    *,
    sheet_title: str = "Mind Map",
) -> Path:
    """
    Write `root` and all its descendants to out_path as a single-sheet .xmind.
    The outline root becomes the sheet's root topic; child order is preserved.
    """
    Workbook = _workbook_class()
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    sheet = workbook.create_sheet(sheet_title)
    root_topic = sheet.get_root_topic()
    root_topic.title = root.text or "(No content)"

    # (node, topic) pairs; subtopics are added in child order before descending
    stack: list[tuple[Node, Any]] = [(root, root_topic)]
    count = 1
    while stack:
        node, topic = stack.pop()
        pending = []
        for child in node.children:
            pending.append((child, topic.add_subtopic(child.text)))
        count += len(pending)
        stack.extend(reversed(pending))

    workbook.save(str(out_path))
    logger.info("Wrote XMind %s (%d topics)", out_path, count)
    return out_path


def _walk_sheets(xmind_path: Path | str):
    Workbook = _workbook_class()
    w = Workbook.load(str(xmind_path))
    for i in range(w.sheet_count):
        root = w.get_sheet(i).root_topic
        if root:
            yield root


def load_xmind_topic_titles(xmind_path: Path | str) -> list[str]:
    """All topic titles in pre-order (for tests)."""
    titles: list[str] = []
    for root in _walk_sheets(xmind_path):
        stack = [root]
        while stack:
            topic = stack.pop()
            t = getattr(topic, "title", None)
            if t:
                titles.append(str(t).strip())
            stack.extend(reversed(getattr(topic, "subtopics", []) or []))
    return titles


def load_xmind_parent_child_pairs(xmind_path: Path | str) -> list[tuple[str, str]]:
    """(parent_title, child_title) for every topic link."""
    pairs: list[tuple[str, str]] = []
    for root in _walk_sheets(xmind_path):
        stack = [root]
        while stack:
            topic = stack.pop()
            parent = str(getattr(topic, "title", "") or "").strip()
            for st in getattr(topic, "subtopics", []) or []:
                t = getattr(st, "title", None)
                if t:
                    pairs.append((parent, str(t).strip()))
                stack.append(st)
    return pairs
