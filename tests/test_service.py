"""Tests for render admission control and the service facade."""
from __future__ import annotations

import io
import threading
import time

import pytest

from mindmapgen.errors import RenderCancelledError
from mindmapgen.service import MindmapService, RenderLimiter
from mindmapgen.theme import ThemeStore


@pytest.fixture(scope="module")
def store() -> ThemeStore:
    return ThemeStore.load_builtin()


def test_limiter_rejects_zero() -> None:
    with pytest.raises(ValueError):
        RenderLimiter(0)


def test_limiter_tracks_active_permits() -> None:
    limiter = RenderLimiter(2)
    with limiter.acquire():
        assert limiter.active == 1
        with limiter.acquire():
            assert limiter.active == 2
    assert limiter.active == 0


def test_limiter_releases_on_error() -> None:
    limiter = RenderLimiter(1)
    with pytest.raises(KeyError):
        with limiter.acquire():
            raise KeyError("boom")
    with limiter.acquire(timeout=0.5):
        assert limiter.active == 1


def test_limiter_timeout_while_full() -> None:
    limiter = RenderLimiter(1)
    with limiter.acquire():
        t0 = time.monotonic()
        with pytest.raises(RenderCancelledError):
            with limiter.acquire(timeout=0.1):
                pass
        assert time.monotonic() - t0 >= 0.09


def test_limiter_cancel_before_acquire() -> None:
    limiter = RenderLimiter(1)
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(RenderCancelledError):
        with limiter.acquire(cancel=cancel):
            pass
    assert limiter.active == 0


def test_limiter_cancel_while_waiting() -> None:
    """A waiter blocked on a full pool gives up once its event is set."""
    limiter = RenderLimiter(1)
    cancel = threading.Event()
    errors: list[Exception] = []

    def waiter() -> None:
        try:
            with limiter.acquire(cancel=cancel):
                pass
        except RenderCancelledError as e:
            errors.append(e)

    with limiter.acquire():
        t = threading.Thread(target=waiter)
        t.start()
        time.sleep(0.1)
        cancel.set()
        t.join(timeout=2)
    assert not t.is_alive()
    assert len(errors) == 1


def test_limiter_caps_concurrency() -> None:
    limiter = RenderLimiter(2)
    peak = 0
    lock = threading.Lock()

    def work() -> None:
        nonlocal peak
        with limiter.acquire():
            with lock:
                peak = max(peak, limiter.active)
            time.sleep(0.03)

    threads = [threading.Thread(target=work) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert 1 <= peak <= 2
    assert limiter.active == 0


def test_service_renders_png(store) -> None:
    service = MindmapService(store=store, max_concurrent=1)
    buf = io.BytesIO()
    n = service.render_text("Root\n  A\n  B\n", buf, "dark", "both")
    assert n == len(buf.getvalue())
    assert buf.getvalue().startswith(b"\x89PNG")
    assert service.limiter.active == 0


def test_service_lists_themes(store) -> None:
    service = MindmapService(store=store)
    assert service.list_themes() == store.list_themes()
    assert service.get_theme("default").id == "default"


def test_service_default_concurrency_from_env(monkeypatch, store) -> None:
    monkeypatch.setenv("MINDMAP_MAX_CONCURRENT_RENDERS", "5")
    assert MindmapService(store=store).limiter.max_concurrent == 5
    monkeypatch.delenv("MINDMAP_MAX_CONCURRENT_RENDERS")
    assert MindmapService(store=store).limiter.max_concurrent == 3


def test_service_cancelled_render_writes_nothing(store) -> None:
    service = MindmapService(store=store, max_concurrent=1)
    cancel = threading.Event()
    cancel.set()
    buf = io.BytesIO()
    with pytest.raises(RenderCancelledError):
        service.render_text("Root\n  A\n", buf, cancel=cancel)
    assert buf.getvalue() == b""


def test_service_parallel_renders(store) -> None:
    service = MindmapService(store=store, max_concurrent=2)
    outputs: list[bytes] = []
    lock = threading.Lock()

    def work() -> None:
        buf = io.BytesIO()
        service.render_text("Hub\n  One\n  Two\n    Three\n", buf, "sketch")
        with lock:
            outputs.append(buf.getvalue())

    threads = [threading.Thread(target=work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    assert len(outputs) == 4
    assert len(set(outputs)) == 1
