"""
Render pipeline: Node tree -> shaped -> laid out -> drawn -> PNG bytes in a sink.

Each call owns its tree; only the theme store and font cache are shared, and
both are read-only, so renders may run on several threads at once.
"""
from __future__ import annotations

import io
import logging
import time
from pathlib import Path
from typing import BinaryIO

from PIL import Image

from ..config import get_default_theme_id
from ..drawer import ScaledFont, draw_mindmap, encode_png, load_font
from ..errors import RenderIOError
from ..layout import LayoutMode, TextMeasurer, layout_tree, shape_tree
from ..model import Node, Tree
from ..parser import parse_outline
from ..theme import Theme, ThemeStore, get_store

logger = logging.getLogger(__name__)


def resolve_theme(theme_id: str | None, store: ThemeStore | None = None) -> Theme:
    store = store or get_store()
    return store.get_theme(theme_id or get_default_theme_id())


def render_image(
    root: Node,
    theme: Theme,
    layout_mode: LayoutMode | str = LayoutMode.RIGHT,
    *,
    max_pixels: int | None = None,
) -> Image.Image:
    """Shape, lay out and draw the tree; writes node x/y in place."""
    params = theme.layout
    font = load_font(params.font_size * params.scale)
    measurer = TextMeasurer(ScaledFont(font, params.scale))
    tree = Tree(root)
    shaped = shape_tree(tree, measurer, params)
    sides, _ = layout_tree(tree, shaped, params, layout_mode)
    return draw_mindmap(tree, shaped, sides, theme, font, max_pixels=max_pixels)


def render(
    root: Node,
    theme_id: str | None = None,
    layout_mode: LayoutMode | str = LayoutMode.RIGHT,
    sink: BinaryIO | None = None,
    *,
    store: ThemeStore | None = None,
    max_pixels: int | None = None,
) -> int:
    """
    Render `root` as PNG into `sink` and return the number of bytes written.

    Unknown theme ids fall back to the default theme and unknown layout modes
    to "right". Raises ThemeNotFoundError, CanvasAllocationError or RenderIOError;
    nothing is written to the sink unless the whole image was drawn and encoded.
    """
    if sink is None:
        raise ValueError("sink is required")
    t0 = time.perf_counter()
    theme = resolve_theme(theme_id, store)
    mode = LayoutMode.parse(layout_mode)
    image = render_image(root, theme, mode, max_pixels=max_pixels)
    written = encode_png(image, sink)
    logger.info(
        "Rendered mind map %dx%d (theme=%s, layout=%s, %d bytes) in %.2fs",
        image.width, image.height, theme.id, mode.value, written, time.perf_counter() - t0,
    )
    return written


def render_text(
    text: str,
    theme_id: str | None = None,
    layout_mode: LayoutMode | str = LayoutMode.RIGHT,
    sink: BinaryIO | None = None,
    **kwargs,
) -> int:
    """Parse outline text and render it (see render)."""
    return render(parse_outline(text), theme_id, layout_mode, sink, **kwargs)


def render_to_bytes(
    root: Node,
    theme_id: str | None = None,
    layout_mode: LayoutMode | str = LayoutMode.RIGHT,
    **kwargs,
) -> bytes:
    buf = io.BytesIO()
    render(root, theme_id, layout_mode, buf, **kwargs)
    return buf.getvalue()


def render_to_file(
    root: Node,
    out_path: Path | str,
    theme_id: str | None = None,
    layout_mode: LayoutMode | str = LayoutMode.RIGHT,
    **kwargs,
) -> Path:
    """Render to a PNG file; the file is only created once encoding succeeded."""
    out_path = Path(out_path)
    data = render_to_bytes(root, theme_id, layout_mode, **kwargs)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(data)
    except OSError as e:
        raise RenderIOError(f"failed to write {out_path}: {e}") from e
    return out_path
