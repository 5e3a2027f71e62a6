"""Errors, terminal diagnostics, and filesystems used by the engine."""

from stencil.environment.exceptions import (
    ConfigError,
    ErrorCode,
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
from stencil.environment.filesystem import DirFS, FileSystem, MemoryFS

__all__ = [
    "ConfigError",
    "DirFS",
    "ErrorCode",
    "FileSystem",
    "MemoryFS",
    "NotLoadedError",
    "PartialRenderError",
    "PatternError",
    "PipeError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRequiredError",
    "TemplateRuntimeError",
    "ViewOutsideLayoutError",
]
