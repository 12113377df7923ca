"""
Theme store: named visual bundles (colors, spacing, font metrics, sketch parameters).

Built-in bundles are JSON files in themes/; the file stem is the theme id.
The store is filled once and only read afterwards, so renders can share it.
"""
from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import ImageColor

from ..config import DEFAULT_THEME_ID, get_themes_dir
from ..errors import ThemeFormatError, ThemeNotFoundError
from ..model import RGB, NodeKind, NodeStyle

logger = logging.getLogger(__name__)

BUILTIN_THEMES_DIR = Path(__file__).resolve().parent / "themes"

# JSON key -> node kind
STYLE_KEYS = {
    "root": NodeKind.ROOT,
    "level1": NodeKind.BRANCH,
    "level2": NodeKind.LEAF_PARENT,
    "leaf": NodeKind.LEAF,
}
FILL_PATTERNS = ("solid", "dots", "crosshatch")


@dataclass(frozen=True)
class LayoutParams:
    """Spacing and sizing constants, in unscaled pixels."""
    min_node_width: float = 100.0
    max_node_width: float = 240.0
    min_node_height: float = 36.0
    level_spacing: float = 150.0
    node_spacing: float = 30.0
    corner_radius: float = 8.0
    font_size: float = 15.0
    scale: float = 3.0
    line_height: float = 20.0
    text_padding: float = 15.0


@dataclass(frozen=True)
class SketchParams:
    """Hand-drawn rendering parameters."""
    jitter: float = 1.5
    repeat: int = 2
    waviness: float = 0.8
    fill_pattern: str = "solid"
    seed: int = 42


@dataclass(frozen=True)
class Theme:
    id: str
    name: str
    background: RGB
    connector: RGB
    styles: tuple[tuple[NodeKind, NodeStyle], ...]
    layout: LayoutParams = LayoutParams()
    sketch: SketchParams | None = None
    grid: bool = False
    shadow: bool = True

    def style_for(self, kind: NodeKind) -> NodeStyle:
        for k, style in self.styles:
            if k is kind:
                return style
        raise KeyError(kind)

    @property
    def is_sketch(self) -> bool:
        return self.sketch is not None


_LAYOUT_KEYS = {
    "minNodeWidth": "min_node_width",
    "maxNodeWidth": "max_node_width",
    "minNodeHeight": "min_node_height",
    "levelSpacing": "level_spacing",
    "nodeSpacing": "node_spacing",
    "cornerRadius": "corner_radius",
    "fontSize": "font_size",
    "scale": "scale",
    "lineHeight": "line_height",
    "textPadding": "text_padding",
}
_SKETCH_KEYS = {
    "jitter": "jitter",
    "strokeRepeat": "repeat",
    "waviness": "waviness",
    "fillPattern": "fill_pattern",
    "seed": "seed",
}


def parse_color(value: Any) -> RGB:
    """
    Color from "#RRGGBB" / CSS name, or an RGB triple.
    Triples of floats in 0..1 are scaled to 0..255; ints are taken as is.
    """
    if isinstance(value, str):
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError as e:
            raise ThemeFormatError(f"invalid color {value!r}") from e
        return (rgb[0], rgb[1], rgb[2])
    if isinstance(value, (list, tuple)) and len(value) == 3:
        if not all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in value):
            raise ThemeFormatError(f"invalid color {value!r}")
        if all(isinstance(c, int) for c in value) and any(c > 1 for c in value):
            channels = [int(c) for c in value]
        else:
            channels = [round(float(c) * 255) for c in value]
        if any(c < 0 or c > 255 for c in channels):
            raise ThemeFormatError(f"color out of range {value!r}")
        return (channels[0], channels[1], channels[2])
    raise ThemeFormatError(f"invalid color {value!r}")


def _parse_layout(raw: Any) -> LayoutParams:
    if raw is None:
        return LayoutParams()
    if not isinstance(raw, dict):
        raise ThemeFormatError("layout must be an object")
    kwargs: dict[str, float] = {}
    for key, attr in _LAYOUT_KEYS.items():
        if key not in raw:
            continue
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ThemeFormatError(f"layout.{key} must be a positive number, got {value!r}")
        kwargs[attr] = float(value)
    params = LayoutParams(**kwargs)
    if params.min_node_width > params.max_node_width:
        raise ThemeFormatError("layout.minNodeWidth exceeds layout.maxNodeWidth")
    return params


def _parse_sketch(raw: Any) -> SketchParams | None:
    if raw is None or raw is False:
        return None
    if raw is True:
        return SketchParams()
    if not isinstance(raw, dict):
        raise ThemeFormatError("sketch must be an object")
    defaults = SketchParams()
    kwargs: dict[str, Any] = {}
    for key, attr in _SKETCH_KEYS.items():
        if key in raw:
            kwargs[attr] = raw[key]
    try:
        sketch = SketchParams(
            jitter=float(kwargs.get("jitter", defaults.jitter)),
            repeat=int(kwargs.get("repeat", defaults.repeat)),
            waviness=float(kwargs.get("waviness", defaults.waviness)),
            fill_pattern=str(kwargs.get("fill_pattern", defaults.fill_pattern)),
            seed=int(kwargs.get("seed", defaults.seed)),
        )
    except (TypeError, ValueError) as e:
        raise ThemeFormatError(f"invalid sketch parameters: {e}") from e
    if sketch.repeat < 1:
        raise ThemeFormatError("sketch.strokeRepeat must be >= 1")
    if sketch.jitter < 0 or sketch.waviness < 0:
        raise ThemeFormatError("sketch.jitter and sketch.waviness must be >= 0")
    if sketch.fill_pattern not in FILL_PATTERNS:
        raise ThemeFormatError(f"sketch.fillPattern must be one of {', '.join(FILL_PATTERNS)}")
    return sketch


def theme_from_dict(theme_id: str, data: dict[str, Any]) -> Theme:
    """Validate one bundle and build a Theme. Raises ThemeFormatError."""
    if not isinstance(data, dict):
        raise ThemeFormatError("theme must be a JSON object")
    colors = data.get("colors") or {}
    if not isinstance(colors, dict):
        raise ThemeFormatError("colors must be an object")
    node_styles = data.get("nodeStyles")
    if not isinstance(node_styles, dict):
        raise ThemeFormatError("nodeStyles is required")
    styles = []
    for key, kind in STYLE_KEYS.items():
        raw = node_styles.get(key)
        if not isinstance(raw, dict):
            raise ThemeFormatError(f"nodeStyles.{key} is required")
        try:
            style = NodeStyle(
                fill=parse_color(raw["fillColor"]),
                stroke=parse_color(raw["strokeColor"]),
                text=parse_color(raw["textColor"]),
            )
        except KeyError as e:
            raise ThemeFormatError(f"nodeStyles.{key}.{e.args[0]} is required") from e
        styles.append((kind, style))
    return Theme(
        id=theme_id,
        name=str(data.get("name") or theme_id),
        background=parse_color(colors.get("background", "#FFFFFF")),
        connector=parse_color(colors.get("connectionLine", "#0D0B22")),
        styles=tuple(styles),
        layout=_parse_layout(data.get("layout")),
        sketch=_parse_sketch(data.get("sketch")),
        grid=bool(data.get("grid", False)),
        shadow=bool(data.get("shadow", True)),
    )


def fallback_theme() -> Theme:
    """Hard-coded default used when no bundle can be loaded."""
    return theme_from_dict(DEFAULT_THEME_ID, {
        "name": "Default Theme",
        "colors": {"background": "#FFFFFF", "connectionLine": "#0D0B22"},
        "nodeStyles": {
            "root": {"fillColor": [0.051, 0.043, 0.133], "strokeColor": [0.051, 0.043, 0.133], "textColor": [1.0, 1.0, 1.0]},
            "level1": {"fillColor": [0.96, 0.97, 0.98], "strokeColor": [0.96, 0.97, 0.98], "textColor": [0.0, 0.0, 0.0]},
            "level2": {"fillColor": [0.96, 0.97, 0.98], "strokeColor": [0.96, 0.97, 0.98], "textColor": [0.0, 0.0, 0.0]},
            "leaf": {"fillColor": [1.0, 1.0, 1.0], "strokeColor": [1.0, 1.0, 1.0], "textColor": [0.0, 0.0, 0.0]},
        },
    })


def load_theme_file(path: Path) -> Theme:
    """Load one *.json bundle; the file stem is the id."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        raise ThemeFormatError(f"cannot read {path.name}: {e}") from e
    return theme_from_dict(path.stem, data)


def _load_dir(directory: Path) -> dict[str, Theme]:
    themes: dict[str, Theme] = {}
    if not directory.is_dir():
        return themes
    for path in sorted(directory.glob("*.json")):
        try:
            themes[path.stem] = load_theme_file(path)
        except ThemeFormatError as e:
            logger.warning("Skipping theme %s: %s", path.name, e)
    return themes


class ThemeStore:
    """Read-only registry of themes keyed by id."""

    def __init__(self, themes: dict[str, Theme] | None = None):
        self._themes: dict[str, Theme] = dict(themes or {})

    @classmethod
    def load_builtin(cls, extra_dir: Path | None = None) -> ThemeStore:
        """Built-in bundles, plus/overridden by extra_dir; hard-coded default if none load."""
        themes = _load_dir(BUILTIN_THEMES_DIR)
        if extra_dir is not None:
            extra = _load_dir(Path(extra_dir))
            if not extra:
                logger.warning("No usable themes in %s", extra_dir)
            themes.update(extra)
        if not themes:
            logger.warning("No theme bundles loaded, using built-in default")
            themes[DEFAULT_THEME_ID] = fallback_theme()
        logger.debug("Loaded themes: %s", ", ".join(sorted(themes)))
        return cls(themes)

    def list_themes(self) -> list[str]:
        return sorted(self._themes)

    def __contains__(self, theme_id: object) -> bool:
        return theme_id in self._themes

    def get_theme(self, theme_id: str | None) -> Theme:
        """Theme by id; unknown ids get the default theme when one is registered."""
        theme = self._themes.get(theme_id or DEFAULT_THEME_ID)
        if theme is not None:
            return theme
        default = self._themes.get(DEFAULT_THEME_ID)
        if default is None:
            raise ThemeNotFoundError(str(theme_id))
        logger.debug("Theme %r not found, using %r", theme_id, DEFAULT_THEME_ID)
        return default


_store: ThemeStore | None = None
_store_lock = threading.Lock()


def get_store() -> ThemeStore:
    """Process-wide store, loaded on first use."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = ThemeStore.load_builtin(get_themes_dir())
    return _store
