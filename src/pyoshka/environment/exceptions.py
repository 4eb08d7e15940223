"""Exceptions for the pyoshka rendering engine.

Exception Hierarchy:
TemplateError (base)
└── RenderError                     # Render-time failure with call-site context
    ├── UnresolvableComponentError  # Component bound to something unrenderable
    ├── ComponentNotFoundError      # Component name not defined anywhere
    └── RenderDepthError            # Template/component nesting too deep

Error Messages:
Render errors name the offending component, the value it resolved to and
the first stack frame outside pyoshka (the template code that made the call):

    ```
    Render Error: cannot render 42
      Component: Answer
      Location: views/home.py:18
      Suggestion: Bind 'Answer' to a Template, a string or a callable
    ```

None of these errors are retried; they abort the ``render()`` call that
raised them.

"""

from __future__ import annotations

import traceback
from enum import Enum
from pathlib import Path
from typing import Any

# Frames under this directory belong to the engine, not to template code
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class ErrorCode(Enum):
    """Searchable error codes for pyoshka errors.

    Format: P-{CATEGORY}-{NUMBER}
    Categories: RUN (runtime)
    """

    RUNTIME_ERROR = "P-RUN-000"
    UNRESOLVABLE_COMPONENT = "P-RUN-001"
    COMPONENT_NOT_FOUND = "P-RUN-002"
    MAX_DEPTH = "P-RUN-003"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime')."""
        prefix = self.value.split("-")[1]
        return {"RUN": "runtime"}.get(prefix, "unknown")


def find_call_site() -> traceback.FrameSummary | None:
    """Return the innermost stack frame that lies outside the pyoshka package.

    Used to attribute a render failure to the template code that issued the
    offending invocation rather than to the dispatcher.
    """
    for frame in reversed(traceback.extract_stack()):
        try:
            path = Path(frame.filename).resolve()
        except OSError:
            return frame
        if not path.is_relative_to(_PACKAGE_ROOT):
            return frame
    return None


class TemplateError(Exception):
    """Base exception for all pyoshka errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a one-block terminal diagnostic.

        Format::

            P-RUN-001: Render Error: cannot render 42
              Component: Answer
              ...
        """
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class RenderError(TemplateError):
    """Render-time error with call-site context.

    Attributes:
        message: Error description
        name: Symbol being resolved when the error occurred
        value: Offending value, if any
        call_site: First stack frame outside pyoshka
        suggestion: Actionable fix suggestion
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        value: Any = None,
        call_site: traceback.FrameSummary | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.name = name
        self.value = value
        self.call_site = call_site if call_site is not None else find_call_site()
        self.suggestion = suggestion
        super().__init__(self._format_message())

    @property
    def location(self) -> str | None:
        """``filename:lineno`` of the call site, if known."""
        if self.call_site is None:
            return None
        return f"{self.call_site.filename}:{self.call_site.lineno}"

    def _format_message(self) -> str:
        parts = [f"Render Error: {self.message}"]
        if self.name:
            parts.append(f"  Component: {self.name}")
        if self.location:
            parts.append(f"  Location: {self.location}")
        if self.suggestion:
            parts.append(f"  Suggestion: {self.suggestion}")
        return "\n".join(parts)


class UnresolvableComponentError(RenderError):
    """A component name resolved to a value that cannot be rendered.

    Only Templates, strings and callables can back a component.

    Example:
        >>> Answer = 42
        >>> template(lambda r: r.Answer()).render()
        UnresolvableComponentError: Render Error: cannot render 42
    """

    code: ErrorCode | None = ErrorCode.UNRESOLVABLE_COMPONENT

    def __init__(
        self,
        name: str,
        value: Any,
        *,
        call_site: traceback.FrameSummary | None = None,
    ):
        super().__init__(
            f"cannot render {value!r}",
            name=name,
            value=value,
            call_site=call_site,
            suggestion=f"Bind '{name}' to a Template, a string or a callable",
        )


class ComponentNotFoundError(RenderError, LookupError):
    """A capitalized name is neither registered nor defined in the body's module."""

    code: ErrorCode | None = ErrorCode.COMPONENT_NOT_FOUND

    def __init__(
        self,
        name: str,
        *,
        call_site: traceback.FrameSummary | None = None,
    ):
        super().__init__(
            f"component '{name}' is not defined",
            name=name,
            call_site=call_site,
            suggestion=(
                f"Register it with env.add_component('{name}', ...) "
                "or define it at module level next to the template body"
            ),
        )


class RenderDepthError(RenderError):
    """Templates and components nested deeper than ``Environment.max_depth``."""

    code: ErrorCode | None = ErrorCode.MAX_DEPTH

    def __init__(
        self,
        max_depth: int,
        *,
        name: str | None = None,
        call_site: traceback.FrameSummary | None = None,
    ):
        self.max_depth = max_depth
        super().__init__(
            f"maximum nesting depth exceeded ({max_depth})",
            name=name,
            call_site=call_site,
            suggestion="Check for a component that embeds itself: A → B → A",
        )
