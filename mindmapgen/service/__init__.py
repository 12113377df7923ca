"""Service: render pipeline entry points and render admission control."""
from .pipeline import render, render_text, render_image, render_to_bytes, render_to_file, resolve_theme
from .limiter import RenderLimiter
from .service import MindmapService

__all__ = [
    "render",
    "render_text",
    "render_image",
    "render_to_bytes",
    "render_to_file",
    "resolve_theme",
    "RenderLimiter",
    "MindmapService",
]
