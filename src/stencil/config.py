"""Engine configuration.

`Config` is built once, when the engine is constructed, and never changes
afterwards. Values are normalized on construction so the rest of the
package can rely on their shape:

- ``root`` and ``partials`` end with ``/`` (``root`` may be ``"."``)
- ``extension`` starts with ``.``
- ``delimiters`` is a pair of non-empty strings
- ``pipes`` is a read-only mapping of template function names to callables
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any

from stencil.paths import normalize_path

DEFAULT_ROOT = "."
DEFAULT_EXTENSION = ".tpl"
DEFAULT_DELIMITERS = ("{{", "}}")


def _normalize_root(root: str) -> str:
    root = normalize_path(root.strip()) if root and root.strip() else ""
    if root in ("", "."):
        return DEFAULT_ROOT
    return root + "/"


def _normalize_partials(path: str) -> str:
    path = normalize_path(path.strip()) if path and path.strip() else ""
    if path in ("", "."):
        return ""
    return path + "/"


def _normalize_extension(ext: str) -> str:
    ext = (ext or "").strip()
    if not ext:
        return DEFAULT_EXTENSION
    if not ext.startswith("."):
        ext = "." + ext
    return ext


def _normalize_delimiters(delimiters: tuple[str, str] | None) -> tuple[str, str]:
    if not delimiters:
        return DEFAULT_DELIMITERS
    left, right = (d.strip() for d in delimiters)
    if left and right:
        return left, right
    return DEFAULT_DELIMITERS


def _normalize_pipes(pipes: Mapping[str, Callable[..., Any]] | None) -> Mapping[str, Callable[..., Any]]:
    cleaned: dict[str, Callable[..., Any]] = {}
    for name, func in (pipes or {}).items():
        name = name.strip()
        if name and func is not None:
            cleaned[name] = func
    return MappingProxyType(cleaned)


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable engine settings.

    Attributes:
        root: Directory holding every template (default ``"."``)
        partials: Directory of global partials, ``""`` when disabled
        extension: Template file extension (default ``".tpl"``)
        delimiters: Variable delimiters (default ``("{{", "}}")``)
        dev: Development mode; reload on every call and never cache
        cache: Cache assembled template sets between renders
        pipes: Extra functions exposed to templates

    Example:
        >>> Config(root="views", partials="views/partials", extension="html")
        Config(root='views/', partials='views/partials/', extension='.html', ...)
    """

    root: str = DEFAULT_ROOT
    partials: str = ""
    extension: str = DEFAULT_EXTENSION
    delimiters: tuple[str, str] = DEFAULT_DELIMITERS
    dev: bool = False
    cache: bool = False
    pipes: Mapping[str, Callable[..., Any]] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", _normalize_root(self.root))
        object.__setattr__(self, "partials", _normalize_partials(self.partials))
        object.__setattr__(self, "extension", _normalize_extension(self.extension))
        object.__setattr__(self, "delimiters", _normalize_delimiters(self.delimiters))
        object.__setattr__(self, "dev", bool(self.dev))
        object.__setattr__(self, "cache", bool(self.cache))
        object.__setattr__(self, "pipes", _normalize_pipes(self.pipes))

    @property
    def caching(self) -> bool:
        """Whether assembled template sets are kept between renders."""
        return self.cache and not self.dev

    @classmethod
    def from_options(cls, **options: Any) -> Config:
        """Build a config from keyword options, rejecting unknown names."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise TypeError(f"unknown template option(s): {', '.join(unknown)}")
        return cls(**options)
