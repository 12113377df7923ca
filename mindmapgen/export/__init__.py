"""Export: write outlines to other mind-map formats."""
from .xmind import build_xmind, load_xmind_parent_child_pairs, load_xmind_topic_titles

__all__ = [
    "build_xmind",
    "load_xmind_topic_titles",
    "load_xmind_parent_child_pairs",
]
