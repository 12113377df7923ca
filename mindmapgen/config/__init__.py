"""Config: load .env, expose MINDMAP_FONT_PATH, MINDMAP_THEMES_DIR, render limits."""
from .config import (
    DEFAULT_MAX_CANVAS_PIXELS,
    DEFAULT_MAX_CONCURRENT_RENDERS,
    DEFAULT_THEME_ID,
    load_env,
    get_font_path,
    get_themes_dir,
    get_default_theme_id,
    get_max_concurrent_renders,
    get_max_canvas_pixels,
)

__all__ = [
    "DEFAULT_MAX_CANVAS_PIXELS",
    "DEFAULT_MAX_CONCURRENT_RENDERS",
    "DEFAULT_THEME_ID",
    "load_env",
    "get_font_path",
    "get_themes_dir",
    "get_default_theme_id",
    "get_max_concurrent_renders",
    "get_max_canvas_pixels",
]
