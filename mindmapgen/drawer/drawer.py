"""
Render a laid-out mind map to a Pillow image and encode it as PNG.

Connectors are painted first and node boxes second, so boxes always sit on top.
Sketch themes redraw outlines and connectors several times with seeded jitter.
"""
from __future__ import annotations

import io
import logging
import math
import random
from typing import BinaryIO

from PIL import Image, ImageChops, ImageDraw, ImageFont

from ..config import get_max_canvas_pixels
from ..errors import CanvasAllocationError, RenderIOError
from ..layout import Bounds, ShapedNode
from ..model import RGB, NodeKind, NodeStyle, Tree
from ..theme import Theme
from .geometry import Point, connector_curve, rounded_rect_points, translate, wobble

logger = logging.getLogger(__name__)

OUTER_MARGIN = 50.0
BRANCH_MARGIN = 5.0
LEAF_MARGIN = 15.0
# Connectors into leaves stop this far before the label text
LEAF_TEXT_GAP = 6.0
GRID_SIZE = 40.0
CONNECTOR_WIDTH = 1.5
OUTLINE_WIDTH = 0.8
SHADOW_OFFSET = 2.0
SHADOW_BLUR = 3.0
PATTERN_SPACING = 6.0
# PNG stores width and height as 31-bit unsigned values
MAX_CANVAS_SIDE = 2**31 - 1

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def canvas_bounds(tree: Tree, shaped: list[ShapedNode]) -> Bounds:
    """All node boxes plus per-node margin (wider for leaves) plus the outer margin."""
    bounds = Bounds()
    for i, node in enumerate(tree.nodes):
        dims = shaped[i].dims
        extra = LEAF_MARGIN if tree.is_leaf(i) else BRANCH_MARGIN
        bounds.include(
            node.x - dims.width / 2 - extra,
            node.y - dims.height / 2 - extra,
            node.x + dims.width / 2 + extra,
            node.y + dims.height / 2 + extra,
        )
    return bounds.expand(OUTER_MARGIN)


def canvas_size(bounds: Bounds, scale: float, max_pixels: int | None = None) -> tuple[int, int]:
    """Scaled pixel size of the canvas; raises CanvasAllocationError when unusable."""
    if bounds.is_empty or scale <= 0:
        raise CanvasAllocationError("empty drawing bounds")
    width = math.ceil(bounds.width * scale)
    height = math.ceil(bounds.height * scale)
    limit = max_pixels if max_pixels is not None else get_max_canvas_pixels()
    if width <= 0 or height <= 0:
        raise CanvasAllocationError(f"degenerate canvas {width}x{height}")
    if width > MAX_CANVAS_SIDE or height > MAX_CANVAS_SIDE:
        raise CanvasAllocationError(f"canvas {width}x{height} exceeds the PNG side limit ({MAX_CANVAS_SIDE})")
    if width * height > limit:
        raise CanvasAllocationError(f"canvas {width}x{height} exceeds the pixel budget ({limit} pixels)")
    return width, height


class Painter:
    """Draws one mind map onto a canvas; holds the coordinate transform and RNG."""

    def __init__(self, image: Image.Image, bounds: Bounds, theme: Theme, font: Font):
        self.image = image
        self.draw = ImageDraw.Draw(image, "RGBA")
        self.origin_x = bounds.min_x
        self.origin_y = bounds.min_y
        self.theme = theme
        self.scale = theme.layout.scale
        self.font = font
        self.sketch = theme.sketch
        self.rng = random.Random(theme.sketch.seed if theme.sketch else 0)

    def px(self, point: Point) -> Point:
        return ((point[0] - self.origin_x) * self.scale, (point[1] - self.origin_y) * self.scale)

    def pxs(self, points: list[Point]) -> list[Point]:
        return [self.px(p) for p in points]

    def stroke_width(self, width: float) -> int:
        return max(1, round(width * self.scale))

    def grid(self) -> None:
        w, h = self.image.size
        step = GRID_SIZE * self.scale
        color = (0, 0, 0, 5)
        x = 0.0
        while x < w:
            self.draw.line([(x, 0), (x, h)], fill=color, width=1)
            x += step
        y = 0.0
        while y < h:
            self.draw.line([(0, y), (w, y)], fill=color, width=1)
            y += step

    def polyline(self, points: list[Point], color: RGB, width: float, closed: bool = False) -> None:
        passes = self.sketch.repeat if self.sketch else 1
        for _ in range(passes):
            path = points
            if self.sketch:
                path = wobble(points, self.rng, self.sketch.jitter, self.sketch.waviness)
            if closed:
                path = path + [path[0]]
            self.draw.line(self.pxs(path), fill=color, width=self.stroke_width(width), joint="curve")

    def connector(self, start: Point, end: Point) -> None:
        self.polyline(connector_curve(start, end), self.theme.connector, CONNECTOR_WIDTH)

    def box(self, cx: float, cy: float, w: float, h: float, style: NodeStyle, shadow: bool) -> None:
        x0, y0, x1, y1 = cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2
        r = self.theme.layout.corner_radius
        if self.sketch:
            outline = rounded_rect_points(x0, y0, x1, y1, r)
            self.sketch_fill(outline, style.fill)
            self.polyline(outline, style.stroke, OUTLINE_WIDTH * 1.5, closed=True)
            return
        if shadow:
            i = 0.0
            while i < SHADOW_BLUR:
                alpha = round(255 * 0.04 * (SHADOW_BLUR - i) / SHADOW_BLUR)
                so = i + SHADOW_OFFSET
                self.draw.rounded_rectangle(
                    [self.px((x0 + so, y0 + so)), self.px((x1 + so, y1 + so))],
                    radius=r * self.scale,
                    fill=(0, 0, 0, alpha),
                )
                i += 0.5
        self.draw.rounded_rectangle(
            [self.px((x0, y0)), self.px((x1, y1))],
            radius=r * self.scale,
            fill=style.fill,
            outline=style.stroke,
            width=self.stroke_width(OUTLINE_WIDTH),
        )

    def sketch_fill(self, outline: list[Point], color: RGB) -> None:
        pattern = self.sketch.fill_pattern if self.sketch else "solid"
        shape = self.pxs(wobble(outline, self.rng, self.sketch.jitter / 2, 0.0) if self.sketch else outline)
        if pattern == "solid":
            self.draw.polygon(shape, fill=color)
            return
        xs = [p[0] for p in shape]
        ys = [p[1] for p in shape]
        left, top = math.floor(min(xs)), math.floor(min(ys))
        size = (math.ceil(max(xs)) - left + 1, math.ceil(max(ys)) - top + 1)
        mask = Image.new("L", size, 0)
        ImageDraw.Draw(mask).polygon(translate(shape, -left, -top), fill=255)
        texture = pattern_mask(size, pattern, PATTERN_SPACING * self.scale, self.stroke_width(0.6))
        self.image.paste(color, (left, top, left + size[0], top + size[1]), ImageChops.multiply(mask, texture))

    def label(self, cx: float, cy: float, lines: list[str], color: RGB) -> None:
        lh = self.theme.layout.line_height
        first = cy - len(lines) * lh / 2 + lh / 2
        metrics = getattr(self.font, "getmetrics", None)
        for i, line in enumerate(lines):
            x, y = self.px((cx, first + i * lh))
            left, top, right, bottom = self.draw.textbbox((0, 0), line, font=self.font)
            if metrics is not None:
                ascent, descent = metrics()
                ty = y - (ascent + descent) / 2
            else:
                ty = y - (bottom - top) / 2 - top
            self.draw.text((x - (right - left) / 2 - left, ty), line, font=self.font, fill=color)


def pattern_mask(size: tuple[int, int], pattern: str, spacing: float, width: int) -> Image.Image:
    """Repeating dot or crosshatch texture as an L-mode mask."""
    w, h = size
    mask = Image.new("L", size, 0)
    draw = ImageDraw.Draw(mask)
    step = max(2.0, spacing)
    if pattern == "dots":
        radius = max(1.0, step / 6)
        y = step / 2
        while y < h:
            x = step / 2
            while x < w:
                draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=255)
                x += step
            y += step
    elif pattern == "crosshatch":
        offset = -float(h)
        while offset < w:
            draw.line([(offset, 0), (offset + h, h)], fill=255, width=width)
            draw.line([(offset, h), (offset + h, 0)], fill=255, width=width)
            offset += step
    else:
        draw.rectangle([0, 0, w, h], fill=255)
    return mask


def node_style(tree: Tree, index: int, kind: NodeKind, theme: Theme) -> NodeStyle:
    """Explicit per-node style wins; otherwise the theme style for the node kind."""
    return tree.nodes[index].style or theme.style_for(kind)


def draw_mindmap(
    tree: Tree,
    shaped: list[ShapedNode],
    sides: list[int],
    theme: Theme,
    font: Font,
    *,
    max_pixels: int | None = None,
) -> Image.Image:
    """Paint a positioned, sized tree. Raises CanvasAllocationError for unusable sizes."""
    bounds = canvas_bounds(tree, shaped)
    size = canvas_size(bounds, theme.layout.scale, max_pixels)
    try:
        image = Image.new("RGB", size, theme.background)
    except (MemoryError, ValueError) as e:
        raise CanvasAllocationError(f"cannot allocate {size[0]}x{size[1]} canvas: {e}") from e
    logger.debug("Canvas %dx%d for %d nodes", size[0], size[1], len(tree))

    painter = Painter(image, bounds, theme, font)
    if theme.grid:
        painter.grid()

    for k in tree.preorder():
        p = tree.parent[k]
        if p < 0:
            continue
        side = sides[k]
        parent, child = tree.nodes[p], tree.nodes[k]
        start = (parent.x + side * shaped[p].dims.width / 2, parent.y)
        dims = shaped[k].dims
        if tree.is_leaf(k) and dims.lines:
            end_dx = dims.text_width / 2 + LEAF_TEXT_GAP
        else:
            end_dx = dims.width / 2
        painter.connector(start, (child.x - side * end_dx, child.y))

    for i in tree.preorder():
        node = tree.nodes[i]
        item = shaped[i]
        style = node_style(tree, i, item.kind, theme)
        shadow = theme.shadow and item.kind is not NodeKind.LEAF
        painter.box(node.x, node.y, item.dims.width, item.dims.height, style, shadow)
        if item.dims.lines:
            painter.label(node.x, node.y, item.dims.lines, style.text)
    return image


def encode_png(image: Image.Image, sink: BinaryIO) -> int:
    """Encode fully in memory, then write to sink. Returns bytes written."""
    buf = io.BytesIO()
    image.save(buf, "PNG")
    data = buf.getvalue()
    try:
        sink.write(data)
        flush = getattr(sink, "flush", None)
        if flush is not None:
            flush()
    except (OSError, ValueError) as e:
        raise RenderIOError(f"failed to write image: {e}") from e
    return len(data)
