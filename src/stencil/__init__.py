"""Stencil — layouts, global partials, and cached template sets for Jinja2.

A thin layer over Jinja2 for server-rendered HTML. Views are rendered first
and then wrapped by a named layout; every file in the partials directory is
available to every template as ``@partials/<name>``; assembled template sets
are cached per view/layout/partials combination.

Quickstart:
    >>> from stencil import DirFS, Engine, ctx
    >>> engine = Engine(DirFS("assets"), root="views", partials="views/partials")
    >>> engine.load()
    >>> engine.render(response, "pages/home", ctx().add("Title", "Hi"), "layout")

Templates:
    {# views/layout.tpl #}
    <html>
      <body>{{ include("@partials/nav") }}{{ view() }}</body>
    </html>

    {# views/pages/home.tpl #}
    <h1>{{ Title }}</h1>

Per-call partials:
    >>> engine.render(out, "pages/contact", None, "layout", "pages/contact/form")
    # pages/contact.tpl can {{ require("pages/contact/form") }}

Modes:
- ``cache=True``: keep assembled template sets between renders
- ``dev=True``: reload everything on each call, never cache

Thread-Safety:
``render()``, ``compile()`` and ``exists()`` may run from many threads at
once. ``load()`` swaps in a fully built snapshot, so a render never sees a
half-loaded engine.

"""

from stencil.config import Config
from stencil.context import Context, ctx, is_empty, to_context, underlying_value
from stencil.engine import Engine
from stencil.environment import (
    ConfigError,
    DirFS,
    ErrorCode,
    FileSystem,
    MemoryFS,
    NotLoadedError,
    PartialRenderError,
    PatternError,
    PipeError,
    TemplateError,
    TemplateNotFoundError,
    TemplateRequiredError,
    TemplateRuntimeError,
    ViewOutsideLayoutError,
)
from stencil.pipes import STANDARD_PIPES, standard_pipes
from stencil.render_context import RenderContext, get_render_context, render_context
from stencil.template_set import TemplateSet

__version__ = "0.1.0"

__all__ = [
    "STANDARD_PIPES",
    "Config",
    "ConfigError",
    "Context",
    "DirFS",
    "Engine",
    "ErrorCode",
    "FileSystem",
    "MemoryFS",
    "NotLoadedError",
    "PartialRenderError",
    "PatternError",
    "PipeError",
    "RenderContext",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRequiredError",
    "TemplateRuntimeError",
    "TemplateSet",
    "ViewOutsideLayoutError",
    "ctx",
    "get_render_context",
    "is_empty",
    "render_context",
    "standard_pipes",
    "to_context",
    "underlying_value",
]
