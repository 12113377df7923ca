"""Theme: built-in JSON bundles, validation, process-wide read-only store."""
from .store import (
    BUILTIN_THEMES_DIR,
    FILL_PATTERNS,
    LayoutParams,
    SketchParams,
    Theme,
    ThemeStore,
    parse_color,
    theme_from_dict,
    fallback_theme,
    load_theme_file,
    get_store,
)

__all__ = [
    "BUILTIN_THEMES_DIR",
    "FILL_PATTERNS",
    "LayoutParams",
    "SketchParams",
    "Theme",
    "ThemeStore",
    "parse_color",
    "theme_from_dict",
    "fallback_theme",
    "load_theme_file",
    "get_store",
]
