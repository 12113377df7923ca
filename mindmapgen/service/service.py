"""
Front-door facade: what a CLI, HTTP handler or tool server calls to turn
outline text into PNG bytes under a shared concurrency limit.
"""
from __future__ import annotations

import logging
import threading
from typing import BinaryIO

from ..config import get_max_concurrent_renders
from ..layout import LayoutMode
from ..parser import parse_outline
from ..theme import Theme, ThemeStore, get_store
from .limiter import RenderLimiter
from .pipeline import render

logger = logging.getLogger(__name__)


class MindmapService:
    def __init__(self, store: ThemeStore | None = None, max_concurrent: int | None = None):
        self.store = store or get_store()
        self.limiter = RenderLimiter(max_concurrent or get_max_concurrent_renders())

    def list_themes(self) -> list[str]:
        return self.store.list_themes()

    def get_theme(self, theme_id: str) -> Theme:
        return self.store.get_theme(theme_id)

    def render_text(
        self,
        text: str,
        sink: BinaryIO,
        theme_id: str | None = None,
        layout_mode: LayoutMode | str = LayoutMode.RIGHT,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> int:
        """Parse and render under a permit; returns bytes written to sink."""
        root = parse_outline(text)
        with self.limiter.acquire(cancel=cancel, timeout=timeout):
            return render(root, theme_id, layout_mode, sink, store=self.store)
