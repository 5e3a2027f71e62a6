"""Built-in functions available in every template set.

- ``view()``: the rendered child view, inside a layout
- ``exists(name)``: whether ``name`` is registered in the current set
- ``include(name, data=None)``: render ``name``; empty when it is missing
- ``require(name, data=None)``: render ``name``; error when it is missing

Usage:
    {# layout.tpl #}
    <html>
      <body>
        {{ include("@partials/nav") }}
        {{ view() }}
        {% if exists("@partials/footer") %}{{ require("@partials/footer", user) }}{% endif %}
      </body>
    </html>

``exists``, ``include`` and ``require`` look names up in the template set
they were created for. ``view`` reads the RenderContext of the current
render, so one cached set can serve concurrent renders of different pages.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from stencil.environment.exceptions import TemplateRequiredError, ViewOutsideLayoutError
from stencil.render_context import get_render_context

if TYPE_CHECKING:
    from stencil.template_set import TemplateSet

BUILTIN_NAMES = frozenset({"view", "exists", "include", "require"})


def _current_template() -> str | None:
    rctx = get_render_context()
    return rctx.template_name if rctx is not None else None


def view() -> Markup:
    """Return the child view rendered for the current layout.

    Raises:
        ViewOutsideLayoutError: If no child view has been rendered, i.e. the
            calling template is not a layout being rendered around a view
    """
    rctx = get_render_context()
    if rctx is None or rctx.view is None:
        raise ViewOutsideLayoutError(_current_template())
    return rctx.view


def make_set_functions(tset: TemplateSet) -> dict[str, Callable[..., Any]]:
    """Build ``exists``, ``include`` and ``require`` bound to ``tset``."""

    def exists(name: str) -> bool:
        return tset.exists(name)

    def include(name: str, data: Any = None) -> Markup:
        if not tset.exists(name):
            return Markup("")
        return Markup(tset.execute(name, data))

    def require(name: str, data: Any = None) -> Markup:
        if not tset.exists(name):
            raise TemplateRequiredError(name, _current_template())
        return Markup(tset.execute(name, data))

    return {"exists": exists, "include": include, "require": require}
