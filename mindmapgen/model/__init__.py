"""Model: Node tree, per-node style override, node kinds and the index arena."""
from .node import RGB, Node, NodeKind, NodeStyle, Tree, default_tree

__all__ = [
    "RGB",
    "Node",
    "NodeKind",
    "NodeStyle",
    "Tree",
    "default_tree",
]
