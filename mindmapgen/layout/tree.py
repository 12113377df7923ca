"""
Horizontal mind-map layout: subtree heights bottom-up, then positions top-down.

Positions are node centers with the root at (0, 0). Children are stacked
vertically around their parent's y and pushed sideways by level spacing plus
both half-widths. In BOTH mode the root's children are split over two sides.
"""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass

from ..model import Tree
from ..theme import LayoutParams
from .text import ShapedNode

logger = logging.getLogger(__name__)

RIGHT = 1
LEFT = -1


class LayoutMode(enum.Enum):
    RIGHT = "right"
    LEFT = "left"
    BOTH = "both"

    @classmethod
    def parse(cls, value: LayoutMode | str | None) -> LayoutMode:
        """Mode from a user value; anything unknown falls back to RIGHT."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            if value:
                logger.debug("Unknown layout mode %r, using right", value)
            return cls.RIGHT


@dataclass
class Bounds:
    min_x: float = math.inf
    min_y: float = math.inf
    max_x: float = -math.inf
    max_y: float = -math.inf

    def include(self, left: float, top: float, right: float, bottom: float) -> None:
        self.min_x = min(self.min_x, left)
        self.min_y = min(self.min_y, top)
        self.max_x = max(self.max_x, right)
        self.max_y = max(self.max_y, bottom)

    def expand(self, margin: float) -> Bounds:
        return Bounds(self.min_x - margin, self.min_y - margin, self.max_x + margin, self.max_y + margin)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def is_empty(self) -> bool:
        return not (math.isfinite(self.width) and math.isfinite(self.height))


def subtree_heights(tree: Tree, shaped: list[ShapedNode], node_spacing: float) -> list[float]:
    """Vertical extent of each node's subtree: max(own height, stacked children + gaps)."""
    heights = [0.0] * len(tree)
    for i in tree.postorder():
        own = shaped[i].dims.height
        kids = tree.children[i]
        if not kids:
            heights[i] = own
            continue
        stacked = sum(heights[k] for k in kids) + node_spacing * (len(kids) - 1)
        heights[i] = max(own, stacked)
    return heights


def split_sides(children: list[int], heights: list[float]) -> tuple[list[int], list[int]]:
    """Greedy two-way split: each child goes to the lighter side, ties to the right."""
    right: list[int] = []
    left: list[int] = []
    right_total = 0.0
    left_total = 0.0
    for k in children:
        if right_total <= left_total:
            right.append(k)
            right_total += heights[k]
        else:
            left.append(k)
            left_total += heights[k]
    return right, left


def layout_tree(
    tree: Tree,
    shaped: list[ShapedNode],
    params: LayoutParams,
    mode: LayoutMode | str = LayoutMode.RIGHT,
) -> tuple[list[int], Bounds]:
    """
    Assign x/y to every node in place.

    Returns the side (+1 right, -1 left) each node grows toward, and the
    bounding box of all node boxes.
    """
    mode = LayoutMode.parse(mode)
    heights = subtree_heights(tree, shaped, params.node_spacing)
    sides = [RIGHT] * len(tree)
    root_side = LEFT if mode is LayoutMode.LEFT else RIGHT
    sides[0] = root_side

    root = tree.nodes[0]
    root.x, root.y = 0.0, 0.0
    bounds = Bounds()
    for i in tree.preorder():
        node = tree.nodes[i]
        dims = shaped[i].dims
        bounds.include(node.x - dims.width / 2, node.y - dims.height / 2,
                       node.x + dims.width / 2, node.y + dims.height / 2)
        kids = tree.children[i]
        if not kids:
            continue
        if i == 0 and mode is LayoutMode.BOTH:
            right, left = split_sides(kids, heights)
            groups = [(right, RIGHT), (left, LEFT)]
        else:
            groups = [(kids, sides[i])]
        for group, side in groups:
            _place_column(tree, shaped, heights, params, i, group, side)
            for k in group:
                sides[k] = side
    return sides, bounds


def _place_column(
    tree: Tree,
    shaped: list[ShapedNode],
    heights: list[float],
    params: LayoutParams,
    parent: int,
    group: list[int],
    side: int,
) -> None:
    if not group:
        return
    node = tree.nodes[parent]
    half_width = shaped[parent].dims.width / 2
    total = sum(heights[k] for k in group) + params.node_spacing * (len(group) - 1)
    y = node.y - total / 2
    for k in group:
        child = tree.nodes[k]
        offset = params.level_spacing + half_width + shaped[k].dims.width / 2
        child.x = node.x + side * offset
        child.y = y + heights[k] / 2
        y += heights[k] + params.node_spacing
