"""Pytest configuration and fixtures for stencil tests."""

import pytest

from stencil import Engine, MemoryFS

SITE = {
    "views/layout.tpl": "<html>{{ view() }}</html>",
    "views/pages/home.tpl": "{{ Title }}",
    "views/pages/about.tpl": "<h1>About {{ Name }}</h1>",
    "views/pages/contact.tpl": '{{ require("pages/contact/form") }}|{{ include("pages/contact/social") }}',
    "views/pages/contact/form.tpl": "<form></form>",
    "views/pages/contact/social.tpl": "<ul></ul>",
    "views/pages/nav_page.tpl": '{{ include("@partials/nav", {"Title": Title}) }}',
    "views/partials/nav.tpl": "<nav>{{ Title }}</nav>",
    "views/partials/widgets/clock.tpl": "<time>{{ now }}</time>",
}


class CountingFS(MemoryFS):
    """MemoryFS that records every read, for cache assertions."""

    __slots__ = ("reads",)

    def __init__(self, files=None):
        super().__init__(files)
        self.reads: list[str] = []

    def read_file(self, path: str) -> bytes:
        self.reads.append(path)
        return super().read_file(path)


@pytest.fixture
def site_fs():
    """In-memory site with a layout, pages and global partials."""
    return CountingFS(SITE)


@pytest.fixture
def engine(site_fs):
    """Loaded engine over the in-memory site, caching disabled."""
    eng = Engine(site_fs, root="views", partials="views/partials")
    eng.load()
    return eng


@pytest.fixture
def cached_engine(site_fs):
    """Loaded engine over the in-memory site with caching enabled."""
    eng = Engine(site_fs, root="views", partials="views/partials", cache=True)
    eng.load()
    return eng


@pytest.fixture
def dev_engine(site_fs):
    """Loaded engine in development mode (reload on every call)."""
    eng = Engine(site_fs, root="views", partials="views/partials", dev=True, cache=True)
    eng.load()
    return eng
