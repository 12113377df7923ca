"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import pytest

from mindmapgen.layout import TextMeasurer
from mindmapgen.theme import LayoutParams

_ENV_KEYS = (
    "MINDMAP_FONT_PATH",
    "MINDMAP_THEMES_DIR",
    "MINDMAP_DEFAULT_THEME",
    "MINDMAP_MAX_CONCURRENT_RENDERS",
    "MINDMAP_MAX_CANVAS_PIXELS",
)


class FixedWidthFont:
    """Every character is `advance` pixels wide; keeps wrapping tests font-independent."""

    def __init__(self, advance: float = 15.0):
        self.advance = advance
        self.calls = 0

    def getlength(self, text: str) -> float:
        self.calls += 1
        return len(text) * self.advance


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Avoid picking up MINDMAP_* settings from the shell or a project .env."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fixed_font() -> FixedWidthFont:
    return FixedWidthFont()


@pytest.fixture
def measurer(fixed_font) -> TextMeasurer:
    return TextMeasurer(fixed_font)


@pytest.fixture
def params() -> LayoutParams:
    return LayoutParams()


@pytest.fixture
def sample_outline() -> str:
    return (
        "Project\n"
        "  Design\n"
        "    Wireframes\n"
        "    Colors\n"
        "  Build\n"
        "    Backend\n"
        "    Frontend\n"
        "  Launch\n"
    )
