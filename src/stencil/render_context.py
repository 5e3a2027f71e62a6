"""Per-render state for the built-in template functions.

A cached template set is shared by every render that resolves to the same
cache key, possibly on several threads at once. The state that differs per
render (most importantly the child view markup that ``view()`` returns)
lives in a RenderContext bound to a ContextVar for the duration of one
render, so the shared set is never mutated.

    with render_context(tset, view_id="pages/home", layout_id="layout") as rctx:
        rctx.view = Markup(tset.execute("view::pages/home", data))
        html = tset.execute("layout::layout", data)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from markupsafe import Markup

    from stencil.template_set import TemplateSet


@dataclass
class RenderContext:
    """State of one engine render call.

    Attributes:
        template_set: Template set the render executes against
        view_id: Id of the view being rendered
        layout_id: Id of the wrapping layout, ``""`` without one
        view: Rendered child view; ``None`` until the layout phase starts
    """

    template_set: TemplateSet
    view_id: str = ""
    layout_id: str = ""
    view: Markup | None = None

    @property
    def template_name(self) -> str:
        """Name of the template currently executing, for error messages."""
        if self.view is not None and self.layout_id:
            return f"layout::{self.layout_id}"
        return f"view::{self.view_id}"


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "stencil_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Current render context, or None outside an engine render."""
    return _render_context.get()


@contextmanager
def render_context(
    template_set: TemplateSet,
    view_id: str = "",
    layout_id: str = "",
) -> Iterator[RenderContext]:
    """Bind a fresh RenderContext for the duration of the with block.

    The previous context (if any) is restored on exit, so nested renders
    started from inside a template do not clobber the outer one.
    """
    ctx = RenderContext(template_set=template_set, view_id=view_id, layout_id=layout_id)
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
