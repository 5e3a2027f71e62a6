"""Optional helper functions ("pipes") for template authors.

None of these are registered by default. Pick the ones you want:

    >>> engine = Engine(fs, pipes=standard_pipes())               # all of them
    >>> engine = Engine(fs, pipes=standard_pipes("iif", "toJson"))  # a subset
    >>> engine = Engine(fs, pipes={**standard_pipes("br"), "slug": slugify})

Template usage:
    <div id="{{ uuid() }}">{{ iif(user.admin, "Admin", "Member") }}</div>
    <span>{{ numberFmt("{} items", count) }}</span>
    <script>const user = {{ toJson(dict("name", user.name, "email", user.email)) }};</script>
    {% if isSet(meta, "title") %}<h1>{{ meta.title }}</h1>{% endif %}
    <h2>{{ deepAlter(page.subtitle, "Untitled") }}</h2>
    <p>{{ br(comment) }}</p>
"""

from __future__ import annotations

import json
import re
import uuid as _uuid
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any

from markupsafe import Markup, escape

from stencil.context import is_empty, underlying_value
from stencil.environment.exceptions import PipeError

# $1, ${1}, ${name} -> \g<1>, \g<name>
_GROUP_REF = re.compile(r"\$(?:\{(\w+)\}|(\d+))")


def uuid_pipe() -> str:
    """Return a new random UUID string."""
    return str(_uuid.uuid4())


def iif(cond: Any, yes: Any, no: Any) -> Any:
    """Return ``yes`` when ``cond`` is truthy, ``no`` otherwise."""
    return yes if cond else no


def _group_digits(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return value
    return f"{value:,}"


def number_fmt(layout: str, *values: Any) -> str:
    """Group the digits of each number and place them into ``layout``.

    ``layout`` uses ``str.format`` fields; numbers are substituted already
    formatted with thousands separators.

        >>> number_fmt("{} USD", 1234567)
        '1,234,567 USD'
        >>> number_fmt("{} of {}", 1500, 12000.5)
        '1,500 of 12,000.5'
    """
    try:
        return layout.format(*(_group_digits(v) for v in values))
    except (IndexError, KeyError, ValueError) as e:
        raise PipeError("numberFmt", f"cannot format {layout!r}: {e}") from e


def regexp_fmt(data: str, pattern: str, repl: str) -> str:
    """Replace every match of ``pattern`` in ``data`` with ``repl``.

    Group references may be written as ``$1``, ``${1}`` or ``${name}``.

        >>> regexp_fmt("09121234567", r"(\\d{4})(\\d{3})(\\d{4})", "$1 $2 $3")
        '0912 123 4567'
    """
    try:
        rx = re.compile(pattern)
    except re.error as e:
        raise PipeError("regexpFmt", f"invalid pattern {pattern!r}: {e}") from e
    template = _GROUP_REF.sub(lambda m: rf"\g<{m.group(1) or m.group(2)}>", repl)
    try:
        return rx.sub(template, str(data))
    except (re.error, IndexError) as e:
        raise PipeError("regexpFmt", f"invalid replacement {repl!r}: {e}") from e


def to_json(data: Any) -> str:
    """Serialize ``data`` as JSON text."""
    try:
        return json.dumps(underlying_value(data))
    except (TypeError, ValueError) as e:
        raise PipeError("toJson", str(e)) from e


def make_dict(*kv: Any) -> dict[str, Any]:
    """Build a dict from alternating keys and values."""
    if len(kv) % 2 != 0:
        raise PipeError("dict", "invalid number of arguments for dict")
    result: dict[str, Any] = {}
    for key, value in zip(kv[::2], kv[1::2]):
        if not isinstance(key, str):
            raise PipeError("dict", "dict keys must be strings")
        result[key] = value
    return result


def is_set(data: Any, field: str) -> bool:
    """Whether mapping ``data`` has the key ``field``."""
    data = underlying_value(data)
    return isinstance(data, Mapping) and field in data


def alter(value: Any, alt: Any) -> Any:
    """Return ``alt`` when ``value`` is None."""
    return alt if value is None else value


def deep_alter(value: Any, alt: Any) -> Any:
    """Return ``alt`` when ``value`` is None or the zero value of its kind."""
    return alt if is_empty(value) else value


def br(text: Any) -> Markup:
    """Escape ``text`` and turn newlines into ``<br/>`` tags."""
    return Markup(str(escape(text)).replace("\n", "<br/>"))


STANDARD_PIPES: Mapping[str, Callable[..., Any]] = {
    "uuid": uuid_pipe,
    "iif": iif,
    "numberFmt": number_fmt,
    "regexpFmt": regexp_fmt,
    "toJson": to_json,
    "dict": make_dict,
    "isSet": is_set,
    "alter": alter,
    "deepAlter": deep_alter,
    "br": br,
}


def standard_pipes(*names: str) -> dict[str, Callable[..., Any]]:
    """Select pipes from STANDARD_PIPES by template name; all when none are given.

    Raises:
        KeyError: If a name is not a standard pipe
    """
    if not names:
        return dict(STANDARD_PIPES)
    unknown = [n for n in names if n not in STANDARD_PIPES]
    if unknown:
        raise KeyError(f"unknown pipe(s): {', '.join(unknown)}")
    return {n: STANDARD_PIPES[n] for n in names}
