"""Render data helpers.

`Context` is a small chainable builder for template variables:

    >>> data = ctx().add("Title", "Hi").add("User", user)
    >>> engine.render(out, "pages/home", data, "layout")

Any mapping works as render data too; other objects are exposed to the
template as the single variable ``data``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from functools import singledispatch
from numbers import Number
from typing import Any


class Context:
    """Ordered key/value bag passed as render data."""

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, Any] | None = None):
        self._data: dict[str, Any] = data if data is not None else {}

    def add(self, key: str, value: Any) -> Context:
        """Set ``key`` to ``value`` and return the context. Empty keys are ignored."""
        if key:
            self._data[key] = value
        return self

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Context({self._data!r})"


def ctx() -> Context:
    """Create an empty Context."""
    return Context()


def to_context(value: Any) -> Context:
    """Wrap a mapping as a Context; anything that is not a mapping gives an empty one."""
    if isinstance(value, Context):
        return value
    if isinstance(value, dict):
        return Context(value)
    if isinstance(value, Mapping):
        return Context(dict(value))
    return Context()


def underlying_value(value: Any) -> Any:
    """Unwrap a Context to its mapping; other values pass through."""
    if isinstance(value, Context):
        return value.data
    return value


def template_vars(value: Any) -> dict[str, Any]:
    """Turn render data into the variables a template sees."""
    value = underlying_value(value)
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    return {"data": value}


@singledispatch
def is_empty(value: Any) -> bool:
    """Report whether ``value`` is the zero value of its kind.

    Empty: None, empty strings and bytes, empty sequences, mappings and
    sets, and numeric zero. Booleans and other objects are never empty.
    """
    return False


@is_empty.register(type(None))
def _(value: None) -> bool:
    return True


@is_empty.register(bool)
def _(value: bool) -> bool:
    return False


@is_empty.register(Number)
def _(value: Number) -> bool:
    return value == 0


@is_empty.register(str)
@is_empty.register(bytes)
@is_empty.register(Sequence)
@is_empty.register(Mapping)
@is_empty.register(Set)
def _(value: Any) -> bool:
    return len(value) == 0


@is_empty.register(Context)
def _(value: Context) -> bool:
    return len(value) == 0
