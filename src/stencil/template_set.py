"""Template sets: named, parsed templates sharing one Jinja2 environment.

A set holds the global partials, and for a render also the view, the
layout and any per-call partials, each registered under its own name:

    @partials/<id>     global partial (parsed at load time)
    view::<id>         the view of a render
    layout::<id>       the layout of a render
    <id>               a per-call partial

Every template in a set can reach every other one, through the ``include``
and ``require`` built-ins or Jinja2's own ``{% include %}`` tag.

Cloning is cheap: compiled code objects are shared and only bound to the
clone's environment on first use, so templates are parsed once.
"""

from __future__ import annotations

from collections.abc import Callable
from types import CodeType
from typing import Any

import jinja2

from stencil import builtins
from stencil.config import DEFAULT_DELIMITERS
from stencil.context import template_vars


class _SetLoader(jinja2.BaseLoader):
    """Resolve ``{% include %}`` and friends against a TemplateSet."""

    def __init__(self, tset: TemplateSet):
        self._tset = tset

    def get_source(
        self, environment: jinja2.Environment, template: str
    ) -> tuple[str, str | None, Callable[[], bool] | None]:
        source = self._tset.source(template)
        if source is None:
            raise jinja2.TemplateNotFound(template)
        return source, None, lambda: True

    def load(
        self,
        environment: jinja2.Environment,
        name: str,
        globals: Any = None,
    ) -> jinja2.Template:
        tpl = self._tset.lookup(name)
        if tpl is None:
            raise jinja2.TemplateNotFound(name)
        return tpl

    def list_templates(self) -> list[str]:
        return self._tset.names()


class TemplateSet:
    """A collection of parsed templates sharing functions and delimiters.

    Attributes:
        delimiters: Variable start/end strings
        pipes: Extra functions exposed to the templates

    Thread-Safety:
        Parsing is only done while a set is assembled. Once frozen (which the
        engine does before caching a set), it is read-only and safe to render
        from many threads.
    """

    __slots__ = ("_codes", "_env", "_frozen", "_sources", "_templates", "delimiters", "pipes")

    def __init__(
        self,
        delimiters: tuple[str, str] = DEFAULT_DELIMITERS,
        pipes: dict[str, Callable[..., Any]] | None = None,
    ):
        self.delimiters = delimiters
        self.pipes = dict(pipes or {})
        self._sources: dict[str, str] = {}
        self._codes: dict[str, CodeType] = {}
        self._templates: dict[str, jinja2.Template] = {}
        self._frozen = False
        self._env = self._make_environment()

    def _make_environment(self) -> jinja2.Environment:
        left, right = self.delimiters
        env = jinja2.Environment(
            loader=_SetLoader(self),
            variable_start_string=left,
            variable_end_string=right,
            autoescape=True,
            keep_trailing_newline=True,
            cache_size=0,
        )
        env.globals.update(self.pipes)
        env.globals["view"] = builtins.view
        env.globals.update(builtins.make_set_functions(self))
        return env

    @property
    def environment(self) -> jinja2.Environment:
        return self._env

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> TemplateSet:
        """Mark the set read-only; later parse() calls raise RuntimeError."""
        self._frozen = True
        return self

    def parse(self, name: str, source: str) -> None:
        """Compile ``source`` and register it as ``name``.

        Raises:
            jinja2.TemplateSyntaxError: If the source does not parse
            RuntimeError: If the set is frozen
        """
        if self._frozen:
            raise RuntimeError(f"template set is frozen, cannot parse {name!r}")
        code = self._env.compile(source, name)
        self._sources[name] = source
        self._codes[name] = code
        self._templates.pop(name, None)

    def clone(self) -> TemplateSet:
        """Return an unfrozen copy sharing every template parsed so far."""
        twin = TemplateSet(self.delimiters, self.pipes)
        twin._sources = self._sources.copy()
        twin._codes = self._codes.copy()
        return twin

    def exists(self, name: str) -> bool:
        return name in self._codes

    def names(self) -> list[str]:
        return sorted(self._codes)

    def source(self, name: str) -> str | None:
        return self._sources.get(name)

    def lookup(self, name: str) -> jinja2.Template | None:
        """Return the Jinja2 template registered as ``name``, or None."""
        tpl = self._templates.get(name)
        if tpl is not None:
            return tpl
        code = self._codes.get(name)
        if code is None:
            return None
        tpl = self._env.template_class.from_code(
            self._env, code, self._env.make_globals(None), None
        )
        return self._templates.setdefault(name, tpl)

    def execute(self, name: str, data: Any = None) -> str:
        """Render the template registered as ``name`` against ``data``."""
        tpl = self.lookup(name)
        if tpl is None:
            raise jinja2.TemplateNotFound(name)
        return tpl.render(template_vars(data))

    def __contains__(self, name: object) -> bool:
        return name in self._codes

    def __len__(self) -> int:
        return len(self._codes)

    def __repr__(self) -> str:
        return f"<TemplateSet {len(self._codes)} templates{' frozen' if self._frozen else ''}>"
