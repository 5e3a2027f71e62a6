"""Filesystems that supply template files to the engine.

The engine consumes two operations only:

- ``lookup(root, pattern)``: list file paths below ``root`` whose
  forward-slash path matches the regex ``pattern``
- ``read_file(path)``: return the file content as bytes, raising
  ``FileNotFoundError`` when the file does not exist

Built-in Filesystems:
- `DirFS`: Files below a directory on disk
- `MemoryFS`: Files held in a dictionary (testing/embedded)

Custom Filesystems:
Implement the FileSystem protocol:
    ```python
    class DatabaseFS:
        def lookup(self, root: str, pattern: str) -> list[str]:
            rx = re.compile(pattern)
            return sorted(p for p in db.paths(prefix=root) if rx.search(p))

        def read_file(self, path: str) -> bytes:
            row = db.query("SELECT body FROM templates WHERE path = ?", path)
            if row is None:
                raise FileNotFoundError(path)
            return row.body
    ```

Thread-Safety:
Both built-in filesystems are safe for concurrent reads. `MemoryFS`
mutations replace the mapping wholesale, so readers never see a half-applied
write.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from stencil.paths import normalize_path


@runtime_checkable
class FileSystem(Protocol):
    """Contract between the engine and its template storage."""

    def lookup(self, root: str, pattern: str) -> list[str]: ...

    def read_file(self, path: str) -> bytes: ...


def _under(path: str, root: str) -> bool:
    root = normalize_path(root)
    if root == ".":
        return True
    return path == root or path.startswith(root + "/")


class DirFS:
    """Read templates from a directory on disk.

    Paths given to and returned by this filesystem are relative to ``base``
    and always use forward slashes.

    Example:
            >>> fs = DirFS("assets")
            >>> fs.lookup("views/", r".*\\.tpl")
            ['views/layout.tpl', 'views/pages/home.tpl', 'views/partials/nav.tpl']
            >>> fs.read_file("views/layout.tpl")
            b'<html>{{ view() }}</html>'
    """

    __slots__ = ("_base",)

    def __init__(self, base: str | Path = "."):
        self._base = Path(base)

    @property
    def base(self) -> Path:
        return self._base

    def _inside(self, path: str) -> tuple[Path, Path]:
        """Resolve ``path`` below the base; anything escaping it is missing."""
        base = self._base.resolve()
        target = (base / normalize_path(path)).resolve()
        if not target.is_relative_to(base):
            raise FileNotFoundError(f"{path!r} is outside {str(self._base)!r}")
        return base, target

    def lookup(self, root: str, pattern: str) -> list[str]:
        rx = re.compile(pattern)
        base, start = self._inside(root)
        if not start.is_dir():
            raise FileNotFoundError(f"template root {str(start)!r} is not a directory")

        found = []
        for path in start.rglob("*"):
            if not path.is_file() or not path.resolve().is_relative_to(base):
                continue
            rel = path.relative_to(base).as_posix()
            if rx.search(rel):
                found.append(rel)
        return sorted(found)

    def read_file(self, path: str) -> bytes:
        _, target = self._inside(path)
        if target.is_dir():
            raise IsADirectoryError(str(target))
        return target.read_bytes()


class MemoryFS:
    """Serve templates from an in-memory mapping of path to content.

    Keys are normalized on the way in, so ``"./views/a.tpl"`` and
    ``"views/a.tpl"`` name the same file. Content may be ``str`` (encoded as
    UTF-8) or ``bytes``.

    Testing:
            >>> fs = MemoryFS({"views/home.tpl": "{{ Title }}"})
            >>> fs.read_file("views/home.tpl")
            b'{{ Title }}'
            >>> fs.remove("views/home.tpl")
            >>> fs.read_file("views/home.tpl")
            Traceback (most recent call last):
            FileNotFoundError: views/home.tpl
    """

    __slots__ = ("_files",)

    def __init__(self, files: Mapping[str, str | bytes] | None = None):
        self._files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self._files[normalize_path(path)] = _as_bytes(content)

    def lookup(self, root: str, pattern: str) -> list[str]:
        rx = re.compile(pattern)
        files = self._files
        return sorted(p for p in files if _under(p, root) and rx.search(p))

    def read_file(self, path: str) -> bytes:
        try:
            return self._files[normalize_path(path)]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write(self, path: str, content: str | bytes) -> None:
        new = self._files.copy()
        new[normalize_path(path)] = _as_bytes(content)
        self._files = new

    def remove(self, path: str) -> None:
        new = self._files.copy()
        new.pop(normalize_path(path), None)
        self._files = new


def _as_bytes(content: str | bytes) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    return content
