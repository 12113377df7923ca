"""
Mind map tree: Node (label + owned children + computed center) and the
index arena (Tree) that layout and drawing walk without recursion.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class NodeStyle:
    """Fill, stroke and text color of one node box."""
    fill: RGB
    stroke: RGB
    text: RGB


class NodeKind(enum.Enum):
    """Style class of a node, resolved once per render."""
    ROOT = "root"
    BRANCH = "branch"  # has grandchildren
    LEAF_PARENT = "leaf_parent"  # has children, none of them have children
    LEAF = "leaf"


@dataclass(eq=False)
class Node:
    """One labeled box. x/y are the box center in layout coordinates."""
    text: str
    children: list[Node] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    style: NodeStyle | None = None

    def add_child(self, child: Node) -> Node:
        self.children.append(child)
        return child

    def __repr__(self) -> str:
        return f"Node({self.text!r}, children={len(self.children)})"


def default_tree() -> Node:
    """Tree used when the outline has no usable content."""
    return Node("Root")


class Tree:
    """
    Pre-order arena over a Node tree.

    Index 0 is the root and every child index is greater than its parent's,
    so ascending iteration is a top-down walk and descending iteration is a
    bottom-up walk.
    """

    def __init__(self, root: Node):
        self.nodes: list[Node] = []
        self.children: list[list[int]] = []
        self.parent: list[int] = []
        self.depth: list[int] = []
        stack: list[tuple[Node, int, int]] = [(root, -1, 0)]
        while stack:
            node, parent, depth = stack.pop()
            index = len(self.nodes)
            self.nodes.append(node)
            self.children.append([])
            self.parent.append(parent)
            self.depth.append(depth)
            if parent >= 0:
                self.children[parent].append(index)
            for child in reversed(node.children):
                stack.append((child, index, depth + 1))

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def is_leaf(self, index: int) -> bool:
        return not self.children[index]

    def kind_of(self, index: int) -> NodeKind:
        if index == 0:
            return NodeKind.ROOT
        kids = self.children[index]
        if not kids:
            return NodeKind.LEAF
        if any(self.children[k] for k in kids):
            return NodeKind.BRANCH
        return NodeKind.LEAF_PARENT

    def preorder(self) -> range:
        return range(len(self.nodes))

    def postorder(self) -> range:
        return range(len(self.nodes) - 1, -1, -1)
