"""
Font lookup for drawing and measuring: configured font, common CJK-capable
system fonts, then Pillow's default font (with a warning).
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from PIL import ImageFont

from ..config import get_font_path

logger = logging.getLogger(__name__)

SYSTEM_FONTS = [
    "/System/Library/Fonts/PingFang.ttc",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/usr/share/fonts/truetype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/google-noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    "C:/Windows/Fonts/msyh.ttc",
    "C:/Windows/Fonts/simhei.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
]


def font_candidates() -> list[Path]:
    candidates: list[Path] = []
    configured = get_font_path()
    if configured is not None:
        candidates.append(configured)
    candidates.extend(Path(p) for p in SYSTEM_FONTS)
    return candidates


@lru_cache(maxsize=32)
def _load_font(candidates: tuple[Path, ...], size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    for path in candidates:
        if not path.is_file():
            continue
        try:
            return ImageFont.truetype(str(path), size)
        except (OSError, ValueError) as e:
            logger.warning("Font %s could not be loaded: %s", path, e)
    logger.warning("No preferred font found, using Pillow default font (CJK glyphs may be missing)")
    return ImageFont.load_default(size)


def load_font(size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Font at the given pixel size; never fails, falls back to Pillow's default font."""
    return _load_font(tuple(font_candidates()), max(1, round(size)))


class ScaledFont:
    """Measure with a drawing-size font but report widths in layout units."""

    def __init__(self, font: ImageFont.FreeTypeFont | ImageFont.ImageFont, scale: float):
        self.font = font
        self.scale = scale

    def getlength(self, text: str) -> float:
        return self.font.getlength(text) / self.scale
