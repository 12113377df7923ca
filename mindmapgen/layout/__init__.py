"""Layout: label shaping (wrap + size) and horizontal tree layout."""
from .text import (
    Dimensions,
    ShapedNode,
    TextMeasurer,
    Word,
    split_words,
    break_lines,
    split_cjk_runs,
    shape_label,
    shape_tree,
)
from .tree import LEFT, RIGHT, Bounds, LayoutMode, subtree_heights, split_sides, layout_tree

__all__ = [
    "Dimensions",
    "ShapedNode",
    "TextMeasurer",
    "Word",
    "split_words",
    "break_lines",
    "split_cjk_runs",
    "shape_label",
    "shape_tree",
    "LEFT",
    "RIGHT",
    "Bounds",
    "LayoutMode",
    "subtree_heights",
    "split_sides",
    "layout_tree",
]
