"""
Load .env from project root; expose MINDMAP_* settings (fonts, themes, limits).
Getters call load_env() so values from .env are visible without a prior call.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_THEME_ID = "default"
DEFAULT_MAX_CONCURRENT_RENDERS = 3
# ~150 megapixels: a 3x scaled RGB canvas of roughly 4000 x 12500 logical px
DEFAULT_MAX_CANVAS_PIXELS = 150_000_000


def _project_root() -> Path:
    """Project root (directory containing mindmapgen/ or main.py)."""
    p = Path(__file__).resolve()
    # mindmapgen/config/config.py -> up to three levels
    for _ in range(3):
        p = p.parent
        if (p / "main.py").is_file() or (p / "mindmapgen").is_dir():
            return p
    return Path.cwd()


def load_env() -> None:
    """Load env vars from project root .env if present."""
    root = _project_root()
    env_file = root / ".env"
    if not env_file.is_file():
        return
    for line in env_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, _, v = line.partition("=")
        k, v = k.strip(), v.strip().strip("'\"")
        if k and v:
            os.environ.setdefault(k, v)


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer), using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%d (must be positive), using %d", name, value, default)
        return default
    return value


def get_font_path() -> Path | None:
    """Preferred font file (MINDMAP_FONT_PATH); None lets the drawer search."""
    load_env()
    raw = os.environ.get("MINDMAP_FONT_PATH")
    return Path(raw) if raw else None


def get_themes_dir() -> Path | None:
    """Extra directory of *.json theme bundles (MINDMAP_THEMES_DIR)."""
    load_env()
    raw = os.environ.get("MINDMAP_THEMES_DIR")
    return Path(raw) if raw else None


def get_default_theme_id() -> str:
    """Theme used when none is requested (MINDMAP_DEFAULT_THEME). Default: default."""
    load_env()
    return os.environ.get("MINDMAP_DEFAULT_THEME") or DEFAULT_THEME_ID


def get_max_concurrent_renders() -> int:
    """Size of the render permit pool (MINDMAP_MAX_CONCURRENT_RENDERS). Default: 3."""
    load_env()
    return _int_env("MINDMAP_MAX_CONCURRENT_RENDERS", DEFAULT_MAX_CONCURRENT_RENDERS)


def get_max_canvas_pixels() -> int:
    """Largest scaled canvas (width * height) a render may allocate."""
    load_env()
    return _int_env("MINDMAP_MAX_CANVAS_PIXELS", DEFAULT_MAX_CANVAS_PIXELS)
