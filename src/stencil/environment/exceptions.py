"""Exceptions for the stencil template layer.

Exception Hierarchy:
TemplateError (base)
├── ConfigError                 # Engine configuration/state problem
│   ├── PatternError            # Partial matcher could not be compiled
│   └── NotLoadedError          # Render before a successful load()
├── TemplateNotFoundError       # View/layout/partial file missing
├── PartialRenderError          # Partial file used as view/layout/per-call partial
└── TemplateRuntimeError        # Error raised by a built-in or pipe while rendering
    ├── ViewOutsideLayoutError  # view() called outside a layout render
    ├── TemplateRequiredError   # require() of a template that is not registered
    └── PipeError               # Bad pipe arguments or unserializable value

Syntax and runtime errors raised by Jinja2 itself are not wrapped; they
reach the caller unchanged.

Example:
    ```
    ST-TPL-001: views/pages/home.tpl template not found
      Path: views/pages/home.tpl
      Hint: Check the view name and the configured root/extension
    ```

"""

from __future__ import annotations

from enum import Enum

from stencil.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes for stencil errors.

    Format: ST-{CATEGORY}-{NUMBER}
    Categories: CFG (configuration), TPL (template loading), RUN (runtime)
    """

    # Configuration errors (ST-CFG-xxx)
    INVALID_PATTERN = "ST-CFG-001"
    NOT_LOADED = "ST-CFG-002"

    # Template loading errors (ST-TPL-xxx)
    TEMPLATE_NOT_FOUND = "ST-TPL-001"
    PARTIAL_RENDER = "ST-TPL-002"

    # Runtime errors (ST-RUN-xxx)
    RUNTIME_ERROR = "ST-RUN-001"
    VIEW_OUTSIDE_LAYOUT = "ST-RUN-002"
    TEMPLATE_REQUIRED = "ST-RUN-003"
    PIPE_ERROR = "ST-RUN-004"

    @property
    def category(self) -> str:
        """Error category (e.g., 'config', 'template', 'runtime')."""
        prefix = self.value.split("-")[1]
        return {
            "CFG": "config",
            "TPL": "template",
            "RUN": "runtime",
        }.get(prefix, "unknown")


class TemplateError(Exception):
    """Base exception for all stencil errors.

    Catch this to handle every error the layer raises itself:

        >>> try:
        ...     engine.render(out, "pages/home", data, "layout")
        ... except TemplateError as e:
        ...     print(e.format_compact())

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None
    suggestion: str | None = None

    def format_compact(self) -> str:
        """Format the error as a short terminal diagnostic.

        Format::

            ST-TPL-002: views/partials/nav.tpl partial cannot render directly
              Hint: Reach partials through @partials/<name>, include or require
        """
        parts = [terminal.format_error_header(self.code.value if self.code else None, str(self))]
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class ConfigError(TemplateError):
    """Engine configuration or lifecycle problem."""


class PatternError(ConfigError):
    """The partial matcher pattern could not be compiled."""

    code: ErrorCode | None = ErrorCode.INVALID_PATTERN

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"invalid partials pattern {pattern!r}: {reason}")


class NotLoadedError(ConfigError):
    """A render was attempted before load() succeeded.

    Also raised after a failed load(), which leaves the engine unloaded
    until the next successful load().
    """

    code: ErrorCode | None = ErrorCode.NOT_LOADED
    suggestion = "Call Engine.load() before rendering"

    def __init__(self, message: str = "template engine is not loaded"):
        super().__init__(message)


class TemplateNotFoundError(TemplateError):
    """A view, layout, or per-call partial file does not exist.

    Example:
            >>> engine.render(out, "pages/missing")
        TemplateNotFoundError: views/pages/missing.tpl template not found

    Attributes:
        path: Filesystem path that was looked up
        kind: "template", "layout template" or "partial template"
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND
    suggestion = "Check the template name and the configured root and extension"

    def __init__(self, path: str, kind: str = "template"):
        self.path = path
        self.kind = kind
        super().__init__(f"{path} {kind} not found")

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, str(self))]
        parts.append(f"  Path: {terminal.location(self.path)}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class PartialRenderError(TemplateError):
    """A file under the partials directory was requested as a render target.

    Global partials are only reachable as ``@partials/<name>`` through
    ``include``/``require``/``{% include %}``; they can never be the view,
    the layout, or a per-call partial.
    """

    code: ErrorCode | None = ErrorCode.PARTIAL_RENDER
    suggestion = "Reach partials through @partials/<name> with include or require"

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"{path} partial cannot render directly")


class TemplateRuntimeError(TemplateError):
    """Error raised from a stencil function while a template renders.

    Attributes:
        message: Error description
        template_name: Name of the template being rendered, when known
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.template_name = template_name
        if suggestion is not None:
            self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.template_name:
            return f"{self.message} (in {self.template_name})"
        return self.message


class ViewOutsideLayoutError(TemplateRuntimeError):
    """``view()`` was called while no child view had been rendered."""

    code: ErrorCode | None = ErrorCode.VIEW_OUTSIDE_LAYOUT
    suggestion = "Only layouts can call view(); pass a layout name to render()"

    def __init__(self, template_name: str | None = None):
        super().__init__("layout template called without view", template_name=template_name)


class TemplateRequiredError(TemplateRuntimeError):
    """``require(name)`` was called for a template that is not registered."""

    code: ErrorCode | None = ErrorCode.TEMPLATE_REQUIRED

    def __init__(self, name: str, template_name: str | None = None):
        self.name = name
        super().__init__(
            f"template {name} does not exist",
            template_name=template_name,
            suggestion=f"Use include('{name}') if the template is optional",
        )


class PipeError(TemplateRuntimeError):
    """A pipe received invalid arguments or could not produce its value."""

    code: ErrorCode | None = ErrorCode.PIPE_ERROR

    def __init__(self, pipe: str, message: str):
        self.pipe = pipe
        super().__init__(f"{pipe}: {message}")
