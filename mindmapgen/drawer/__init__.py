"""Drawer: fonts, connector/box geometry, PNG rendering of a laid-out mind map."""
from .fonts import ScaledFont, load_font, font_candidates
from .geometry import connector_curve, cubic_bezier, rounded_rect_points, wobble
from .drawer import (
    OUTER_MARGIN,
    LEAF_TEXT_GAP,
    MAX_CANVAS_SIDE,
    canvas_bounds,
    canvas_size,
    draw_mindmap,
    encode_png,
    node_style,
    pattern_mask,
)

__all__ = [
    "ScaledFont",
    "load_font",
    "font_candidates",
    "connector_curve",
    "cubic_bezier",
    "rounded_rect_points",
    "wobble",
    "OUTER_MARGIN",
    "LEAF_TEXT_GAP",
    "MAX_CANVAS_SIDE",
    "canvas_bounds",
    "canvas_size",
    "draw_mindmap",
    "encode_png",
    "node_style",
    "pattern_mask",
]
