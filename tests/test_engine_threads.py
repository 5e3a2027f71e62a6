"""Tests for concurrent rendering and reloading."""

import io
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from stencil import Engine, MemoryFS


@pytest.fixture
def threaded_engine():
    fs = MemoryFS(
        {
            "layout.tpl": "<section>{{ view() }}</section>",
            "page.tpl": "<h1>{{ n }}</h1>",
            "partials/nav.tpl": "<nav/>",
        }
    )
    engine = Engine(fs, partials="partials", cache=True)
    engine.load()
    return engine


class TestConcurrentRenders:
    """Renders sharing one cached template set stay isolated."""

    def test_shared_set_isolated(self, threaded_engine):
        def work(n: int) -> str:
            return threaded_engine.compile("page", "layout", {"n": n}).decode()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(work, range(200)))

        assert results == [f"<section><h1>{n}</h1></section>" for n in range(200)]
        assert threaded_engine.cached_keys() == ["page:layout"]

    def test_renders_during_reloads(self, threaded_engine):
        errors: list[BaseException] = []
        stop = threading.Event()

        def reloader() -> None:
            while not stop.is_set():
                threaded_engine.load()

        def renderer() -> None:
            try:
                for n in range(100):
                    out = io.StringIO()
                    threaded_engine.render(out, "page", {"n": n}, "layout")
                    assert out.getvalue() == f"<section><h1>{n}</h1></section>"
            except BaseException as e:  # noqa: BLE001
                errors.append(e)

        thread = threading.Thread(target=reloader)
        thread.start()
        try:
            workers = [threading.Thread(target=renderer) for _ in range(4)]
            for w in workers:
                w.start()
            for w in workers:
                w.join()
        finally:
            stop.set()
            thread.join()

        assert errors == []
        assert threaded_engine.loaded

    def test_dev_mode_concurrent_reloads(self):
        fs = MemoryFS({"layout.tpl": "[{{ view() }}]", "page.tpl": "{{ n }}"})
        engine = Engine(fs, dev=True)

        def work(n: int) -> str:
            return engine.compile("page", "layout", {"n": n}).decode()

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(work, range(40)))

        assert results == [f"[{n}]" for n in range(40)]
