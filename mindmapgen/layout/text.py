"""
Measure and word-wrap node labels (Latin + CJK) into sized boxes.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Protocol

from ..model import NodeKind, Tree
from ..theme import LayoutParams

# CJK unified ideographs (+ extension A, compatibility block, supplementary planes)
_HAN_RE = re.compile("[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\U00020000-\U0003134f]")
# A line holding more ideographs than this is cut every CJK_CHUNK ideographs
MAX_CJK_PER_LINE = 20
CJK_CHUNK = 10


class FontLike(Protocol):
    def getlength(self, text: str) -> float: ...


def is_han(ch: str) -> bool:
    return bool(_HAN_RE.match(ch))


def count_han(text: str) -> int:
    return len(_HAN_RE.findall(text))


@dataclass(frozen=True)
class Word:
    text: str
    spaced: bool  # whitespace preceded this word


@dataclass
class Dimensions:
    width: float
    height: float
    lines: list[str] = field(default_factory=list)
    text_width: float = 0.0  # widest line, in pixels


@dataclass
class ShapedNode:
    dims: Dimensions
    kind: NodeKind


class TextMeasurer:
    """Width of strings in one font; memoized per distinct string for one render pass."""

    def __init__(self, font: FontLike):
        self.font = font
        self._cache: dict[str, float] = {}

    def width(self, text: str) -> float:
        w = self._cache.get(text)
        if w is None:
            w = float(self.font.getlength(text))
            self._cache[text] = w
        return w

    @property
    def cache_size(self) -> int:
        return len(self._cache)


def split_words(text: str) -> list[Word]:
    """
    Split on whitespace; each CJK ideograph is also a word of its own, so
    Latin text wraps at spaces and CJK text may wrap between any two characters.
    """
    words: list[Word] = []
    current: list[str] = []
    spaced = False
    pending_space = False

    def flush() -> None:
        nonlocal spaced
        if current:
            words.append(Word("".join(current), spaced))
            current.clear()
            spaced = False

    for ch in text:
        if ch.isspace():
            flush()
            pending_space = True
            continue
        if is_han(ch):
            flush()
            words.append(Word(ch, pending_space and bool(words)))
        else:
            if not current:
                spaced = pending_space and bool(words)
            current.append(ch)
        pending_space = False
    flush()
    return words


def join_words(words: list[Word]) -> str:
    parts: list[str] = []
    for i, word in enumerate(words):
        if i > 0 and word.spaced:
            parts.append(" ")
        parts.append(word.text)
    return "".join(parts)


def _split_long_word(word: Word, measurer: TextMeasurer, available: float) -> list[Word]:
    """Cut a word wider than a whole line into line-sized pieces."""
    pieces: list[Word] = []
    current = ""
    for ch in word.text:
        if current and measurer.width(current + ch) > available:
            pieces.append(Word(current, word.spaced if not pieces else False))
            current = ch
        else:
            current += ch
    if current:
        pieces.append(Word(current, word.spaced if not pieces else False))
    return pieces


def break_lines(words: list[Word], measurer: TextMeasurer, available: float) -> list[str]:
    """Greedy line packing: add words to the current line while they fit."""
    lines: list[str] = []
    line: list[Word] = []
    line_width = 0.0
    space = measurer.width(" ")
    queue: list[Word] = []
    for word in words:
        if measurer.width(word.text) > available and len(word.text) > 1:
            queue.extend(_split_long_word(word, measurer, available))
        else:
            queue.append(word)
    for word in queue:
        word_width = measurer.width(word.text)
        gap = space if line and word.spaced else 0.0
        if not line or line_width + gap + word_width <= available:
            line.append(word)
            line_width += gap + word_width
            continue
        lines.append(join_words(line))
        line = [word]
        line_width = word_width
    if line:
        lines.append(join_words(line))
    return lines


def split_cjk_runs(line: str) -> list[str]:
    """Cut a line roughly every CJK_CHUNK ideographs when it holds too many."""
    if count_han(line) <= MAX_CJK_PER_LINE:
        return [line]
    parts: list[str] = []
    current = ""
    count = 0
    for ch in line:
        current += ch
        if is_han(ch):
            count += 1
            if count >= CJK_CHUNK:
                parts.append(current)
                current = ""
                count = 0
    if current.strip():
        parts.append(current)
    return [p.strip() for p in parts]


def shape_label(text: str, measurer: TextMeasurer, params: LayoutParams) -> Dimensions:
    """Wrapped lines and box size for one label. Width depends on the label only."""
    words = split_words(text)
    if not words:
        return Dimensions(width=params.min_node_width, height=params.min_node_height)

    text_width = measurer.width(join_words(words))
    width = min(max(text_width + 2 * params.text_padding, params.min_node_width), params.max_node_width)
    available = width - 2 * params.text_padding

    lines: list[str] = []
    for line in break_lines(words, measurer, available):
        lines.extend(split_cjk_runs(line))

    height = max(len(lines) * params.line_height + 2 * params.text_padding, params.min_node_height)
    widest = max(measurer.width(line) for line in lines)
    return Dimensions(width=width, height=height, lines=lines, text_width=widest)


def shape_tree(tree: Tree, measurer: TextMeasurer, params: LayoutParams) -> list[ShapedNode]:
    """Dimensions and style kind for every arena index."""
    return [
        ShapedNode(dims=shape_label(node.text, measurer, params), kind=tree.kind_of(i))
        for i, node in enumerate(tree.nodes)
    ]
