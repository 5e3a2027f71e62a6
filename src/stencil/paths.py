"""Conversions between template names, file paths, and cache keys.

A template *name* is the extension-less, root-relative, slash-separated id
that callers and templates use (``pages/home``). A template *path* is the
filesystem path handed to the filesystem (``views/pages/home.tpl``).

    >>> to_path("pages/home", "views/", ".tpl")
    'views/pages/home.tpl'
    >>> to_name("views/pages/home.tpl", "views/", ".tpl")
    'pages/home'
    >>> to_key("pages/home", "layout", "pages/contact/form")
    'pages/home:layout:pages/contact/form'
"""

from __future__ import annotations

import posixpath
import re

KEY_SEPARATOR = ":"


def normalize_path(*parts: str) -> str:
    """Join and clean path parts, always using forward slashes.

    Empty parts are skipped; joining nothing yields ``"."``. Only the first
    part may make the result absolute; later parts are always joined below
    the earlier ones.

        >>> normalize_path("views/", "/pages/home.tpl")
        'views/pages/home.tpl'
    """
    parts = [p.replace("\\", "/") for p in parts if p]
    if not parts:
        return "."
    head, *rest = parts
    path = posixpath.normpath(posixpath.join(head, *(p.lstrip("/") for p in rest)))
    if path.startswith("//"):
        path = "/" + path.lstrip("/")
    return path


def to_name(path: str, root: str, ext: str) -> str:
    """Strip the root prefix and extension suffix from a path."""
    if not path:
        return ""
    path = path.removeprefix(root)
    path = path.removesuffix(ext)
    return normalize_path(path)


def to_path(name: str, root: str, ext: str) -> str:
    """Build the file path for a template name.

    A root prefix or extension suffix already present on ``name`` is
    stripped first, so passing a path back in returns it unchanged.
    """
    if not name:
        return ""
    name = name.removeprefix(root)
    name = name.removesuffix(ext)
    return normalize_path(root, name + ext)


def to_key(*ids: str) -> str:
    """Join the non-empty ids with the key separator, keeping their order."""
    return KEY_SEPARATOR.join(i for i in ids if i)


def ext_pattern(path: str, ext: str) -> str:
    """Regex source matching files with ``ext``, optionally under ``path``."""
    if not path:
        return ".*" + re.escape(ext)
    return "^" + re.escape(path) + ".*" + re.escape(ext)
