"""The template engine: global partials, layouts, and the template set cache.

Lifecycle:
    Unloaded ──load()──> Loaded ──load()──> Loaded (rebuilt, not extended)

``load()`` builds a complete snapshot (base template set with the global
partials, an empty cache, the partial matcher) and installs it in one
assignment. Renders read whichever snapshot is current; they never see one
that is half built. A failed ``load()`` leaves the engine Unloaded.

In development mode every ``exists()``/``render()`` reloads first and
nothing is cached, so template edits show up on the next request.

Render pipeline:
    1. Normalize the view, the layout (first layout argument) and the
       per-call partials (the remaining non-empty arguments)
    2. Refuse files from the partials directory as any of them
    3. Reuse the cached set for ``view:layout:partials``, or clone the base
       set and parse ``view::<id>``, ``layout::<id>`` and ``<partial id>``
    4. Render the view; with a layout, render the layout around it, with
       ``view()`` returning the child markup
    5. Write the finished output to the sink in one call

Example:
    >>> engine = Engine(DirFS("assets"), root="views", partials="views/partials", cache=True)
    >>> engine.load()
    >>> engine.compile("pages/home", "layout", ctx().add("Title", "Hi"))
    b'<html>Hi</html>'
"""

from __future__ import annotations

import io
import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Any, TextIO

from markupsafe import Markup

from stencil.config import Config
from stencil.environment.exceptions import (
    NotLoadedError,
    PartialRenderError,
    PatternError,
    TemplateNotFoundError,
)
from stencil.environment.filesystem import FileSystem
from stencil.paths import ext_pattern, to_key, to_name, to_path
from stencil.render_context import render_context
from stencil.template_set import TemplateSet

logger = logging.getLogger(__name__)

PARTIALS_PREFIX = "@partials/"
VIEW_PREFIX = "view::"
LAYOUT_PREFIX = "layout::"


@dataclass
class _Snapshot:
    """Everything load() builds, swapped in as a unit."""

    base: TemplateSet
    partial_rx: re.Pattern[str] | None
    templates: dict[str, TemplateSet] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def is_partial(self, path: str) -> bool:
        return self.partial_rx is not None and self.partial_rx.search(path) is not None


@dataclass(frozen=True, slots=True)
class _Request:
    """A normalized render request."""

    view: str
    view_id: str
    layout: str
    layout_id: str
    partials: tuple[str, ...]
    partial_ids: tuple[str, ...]

    @property
    def key(self) -> str:
        return to_key(self.view_id, self.layout_id, *self.partial_ids)


class Engine:
    """Render views inside named layouts, with global partials and caching.

    Args:
        fs: Filesystem holding the templates
        config: Prebuilt Config; mutually exclusive with keyword options
        **options: Config fields (root, partials, extension, delimiters,
            dev, cache, pipes)

    Thread-Safety:
        ``load()`` is serialized by an exclusive lock. ``render()``,
        ``compile()`` and ``exists()`` run concurrently; each works against
        the snapshot that was current when it started.
    """

    def __init__(self, fs: FileSystem, config: Config | None = None, **options: Any):
        if config is not None and options:
            raise TypeError("pass either a Config or keyword options, not both")
        self.fs = fs
        self.config = config if config is not None else Config.from_options(**options)
        self._snapshot: _Snapshot | None = None
        self._load_lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    def cached_keys(self) -> list[str]:
        """Keys of the template sets currently cached."""
        snap = self._snapshot
        if snap is None:
            return []
        with snap.lock:
            return sorted(snap.templates)

    def partial_names(self) -> list[str]:
        """Names of the registered global partials."""
        snap = self._snapshot
        if snap is None:
            return []
        return [n for n in snap.base.names() if n.startswith(PARTIALS_PREFIX)]

    # -- loading ---------------------------------------------------------

    def load(self) -> None:
        """(Re)build the base template set and clear the cache.

        Raises:
            PatternError: If the partial matcher cannot be compiled
            OSError: If listing or reading template files fails
            jinja2.TemplateSyntaxError: If a global partial does not parse
        """
        self._reload()

    def _reload(self) -> _Snapshot:
        with self._load_lock:
            try:
                snap = self._build_snapshot()
            except Exception:
                self._snapshot = None
                raise
            self._snapshot = snap
            return snap

    def _build_snapshot(self) -> _Snapshot:
        cfg = self.config
        base = TemplateSet(cfg.delimiters, dict(cfg.pipes))

        partial_rx = None
        if cfg.partials:
            pattern = ext_pattern(cfg.partials, cfg.extension)
            try:
                partial_rx = re.compile(pattern)
            except re.error as e:
                raise PatternError(pattern, str(e)) from e

        files = self.fs.lookup(cfg.root, ext_pattern("", cfg.extension))

        if partial_rx is not None:
            for file in files:
                if not partial_rx.search(file):
                    continue
                name = PARTIALS_PREFIX + to_name(file, cfg.partials, cfg.extension)
                base.parse(name, _decode(self.fs.read_file(file)))

        logger.debug(
            "Loaded %d template file(s) under %s, %d global partial(s)",
            len(files),
            cfg.root,
            len(base),
        )
        return _Snapshot(base=base.freeze(), partial_rx=partial_rx)

    def _current(self) -> _Snapshot:
        snap = self._reload() if self.config.dev else self._snapshot
        if snap is None:
            raise NotLoadedError()
        return snap

    # -- lookups ---------------------------------------------------------

    def exists(self, name: str) -> bool:
        """Whether the view ``name`` is cached or present on the filesystem.

        Raises:
            OSError: Any read failure other than the file being missing
        """
        snap = self._reload() if self.config.dev else self._snapshot
        cfg = self.config
        view = to_path(name, cfg.root, cfg.extension)
        if not view:
            return False
        key = to_key(to_name(view, cfg.root, cfg.extension))

        if snap is not None:
            with snap.lock:
                if key in snap.templates:
                    return True

        try:
            self.fs.read_file(view)
        except FileNotFoundError:
            return False
        return True

    # -- rendering -------------------------------------------------------

    def _normalize(self, name: str, layouts: tuple[str, ...]) -> _Request:
        cfg = self.config
        view = to_path(name, cfg.root, cfg.extension)
        layout = ""
        partials: list[str] = []
        if layouts:
            layout = to_path(layouts[0], cfg.root, cfg.extension)
            partials = [to_path(p, cfg.root, cfg.extension) for p in layouts[1:] if p]
        return _Request(
            view=view,
            view_id=to_name(view, cfg.root, cfg.extension),
            layout=layout,
            layout_id=to_name(layout, cfg.root, cfg.extension),
            partials=tuple(partials),
            partial_ids=tuple(to_name(p, cfg.root, cfg.extension) for p in partials),
        )

    def _check_partials(self, snap: _Snapshot, req: _Request) -> None:
        if snap.is_partial(req.view):
            raise PartialRenderError(req.view)
        if req.layout and snap.is_partial(req.layout):
            raise PartialRenderError(req.layout)
        for path in req.partials:
            if snap.is_partial(path):
                raise PartialRenderError(path, f"{path} partial already loaded globally")

    def _read(self, path: str, kind: str) -> str:
        if not path:
            raise TemplateNotFoundError(path, kind)
        try:
            return _decode(self.fs.read_file(path))
        except FileNotFoundError:
            raise TemplateNotFoundError(path, kind) from None

    def _assemble(self, snap: _Snapshot, req: _Request) -> TemplateSet:
        tset = snap.base.clone()
        tset.parse(VIEW_PREFIX + req.view_id, self._read(req.view, "template"))
        if req.layout:
            tset.parse(LAYOUT_PREFIX + req.layout_id, self._read(req.layout, "layout template"))
        for path, pid in zip(req.partials, req.partial_ids):
            tset.parse(pid, self._read(path, "partial template"))
        return tset.freeze()

    def _resolve(self, snap: _Snapshot, req: _Request) -> TemplateSet:
        key = req.key
        with snap.lock:
            cached = snap.templates.get(key)
        if cached is not None:
            logger.debug("Template cache hit: %s", key)
            return cached

        logger.debug("Template cache miss: %s", key)
        tset = self._assemble(snap, req)
        if self.config.caching:
            with snap.lock:
                tset = snap.templates.setdefault(key, tset)
            logger.debug("Template set cached: %s", key)
        return tset

    def render(self, sink: TextIO, name: str, data: Any = None, *layouts: str) -> None:
        """Render the view ``name`` to ``sink``.

        ``layouts[0]`` names the layout (``""`` for none); the remaining
        non-empty entries name per-call partials registered under their ids.
        Nothing is written to ``sink`` unless the whole render succeeds.

        Raises:
            NotLoadedError: If load() has not succeeded yet
            PartialRenderError: If a partials-directory file is the view, the
                layout, or a per-call partial
            TemplateNotFoundError: If a view/layout/partial file is missing
            ViewOutsideLayoutError: If the view calls view()
            jinja2.TemplateError: Syntax or runtime errors from Jinja2
        """
        snap = self._current()
        req = self._normalize(name, layouts)
        self._check_partials(snap, req)
        tset = self._resolve(snap, req)

        with render_context(tset, req.view_id, req.layout_id) as rctx:
            body = tset.execute(VIEW_PREFIX + req.view_id, data)
            if req.layout:
                rctx.view = Markup(body)
                body = tset.execute(LAYOUT_PREFIX + req.layout_id, data)
        sink.write(body)

    def compile(self, name: str, layout: str = "", data: Any = None, *partials: str) -> bytes:
        """Render into memory and return the UTF-8 encoded output."""
        buf = io.StringIO()
        self.render(buf, name, data, layout, *partials)
        return buf.getvalue().encode("utf-8")


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8")
