"""
Error kinds raised by the pipeline.

Parse problems never surface here: the parser falls back to a default tree.
Font problems are logged and degrade to the default font.
"""
from __future__ import annotations


class MindmapError(RuntimeError):
    """Base class for mindmapgen errors."""


class ThemeNotFoundError(MindmapError, KeyError):
    """Unknown theme id and no default theme registered."""

    def __init__(self, theme_id: str):
        super().__init__(f"theme '{theme_id}' not found")
        self.theme_id = theme_id

    def __str__(self) -> str:
        return self.args[0]


class ThemeFormatError(MindmapError, ValueError):
    """A theme bundle is missing fields or holds invalid values."""


class RenderError(MindmapError):
    """A render call failed; no image was written."""


class RenderIOError(RenderError):
    """Writing the encoded image to the sink failed."""


class CanvasAllocationError(RenderError):
    """Computed canvas is degenerate or too large to allocate."""


class RenderCancelledError(MindmapError):
    """No render permit became available before cancellation."""
