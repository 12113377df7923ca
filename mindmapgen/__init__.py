"""
mindmapgen: outline text -> mind map image.

Pipeline: parser (outline -> Node tree) -> layout (label shaping, tree
placement) -> drawer (Pillow canvas, PNG). Themes come from the theme store;
service wraps the pipeline behind a concurrency limit.
"""
from .errors import (
    CanvasAllocationError,
    MindmapError,
    RenderCancelledError,
    RenderError,
    RenderIOError,
    ThemeFormatError,
    ThemeNotFoundError,
)
from .model import Node, NodeKind, NodeStyle, Tree
from .parser import format_outline, parse_outline
from .layout import LayoutMode
from .theme import Theme, ThemeStore, get_store
from .service import MindmapService, RenderLimiter, render, render_text, render_to_bytes, render_to_file

__version__ = "0.1.0"

__all__ = [
    "CanvasAllocationError",
    "MindmapError",
    "RenderCancelledError",
    "RenderError",
    "RenderIOError",
    "ThemeFormatError",
    "ThemeNotFoundError",
    "Node",
    "NodeKind",
    "NodeStyle",
    "Tree",
    "format_outline",
    "parse_outline",
    "LayoutMode",
    "Theme",
    "ThemeStore",
    "get_store",
    "MindmapService",
    "RenderLimiter",
    "render",
    "render_text",
    "render_to_bytes",
    "render_to_file",
]
