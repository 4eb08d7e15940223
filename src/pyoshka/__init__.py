"""pyoshka: nested HTML templates written as plain Python callables.

Templates are deferred bodies: callables that receive a Rendering and
issue tag, text and component invocations on it. Rendering runs the body
once and returns the buffered, escaped HTML.

Quickstart:
    >>> from pyoshka import template
    >>> page = template(lambda r: r.html5(lambda r: r.body(lambda r: r.p("hi"))))
    >>> page.render()
    '<!DOCTYPE html><html><body><p>hi</p></body></html>'

Components:
    >>> @template(name="stranger")
    ... def Greeting(r):
    ...     r.p(f"Hello, {r.name}")
    >>> template(lambda r: r.Greeting(name="Sam")).render()
    '<p>Hello, Sam</p>'

Architecture:
Template.render() → Rendering → body(r) → r.<name>(...) → dispatch → buffer

Dispatch:
1. **Locals**: names in the innermost scope return their value
2. **Components**: Capitalized names resolve to a Template, string or
   callable (environment registry first, then the body's module globals)
3. **Tags**: every other name emits an element of that name

Classifications 2 and 3 are cached per Environment for the life of the
process, so each distinct name is classified once.

Escaping:
- Tag text content and ``r.text()`` are HTML-escaped
- ``src`` / ``href`` attribute values are URI-escaped
- Other attribute values and ``r.emit()`` output are written verbatim

Thread-Safety:
- Templates are immutable; every ``render()`` builds its own Rendering
- The dispatch cache is insert-if-absent under a single lock
- Component registration uses copy-on-write

"""

from pyoshka.environment import (
    ComponentNotFoundError,
    ComponentRegistry,
    DispatchCache,
    Environment,
    ErrorCode,
    RenderDepthError,
    RenderError,
    TemplateError,
    UnresolvableComponentError,
    default_environment,
)
from pyoshka.render_context import get_rendering, get_rendering_required
from pyoshka.rendering import Handler, HandlerKind, Rendering, render_attributes
from pyoshka.template import Template, template
from pyoshka.utils.html import DefaultEscaper, Escaper, Markup, html_escape, uri_escape

__version__ = "0.1.0"

__all__ = [
    "ComponentNotFoundError",
    "ComponentRegistry",
    "DefaultEscaper",
    "DispatchCache",
    "Environment",
    "ErrorCode",
    "Escaper",
    "Handler",
    "HandlerKind",
    "Markup",
    "RenderDepthError",
    "RenderError",
    "Rendering",
    "Template",
    "TemplateError",
    "UnresolvableComponentError",
    "__version__",
    "default_environment",
    "get_rendering",
    "get_rendering_required",
    "html_escape",
    "render_attributes",
    "template",
    "uri_escape",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # Signal: this module is safe for free-threading
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'pyoshka' has no attribute {name!r}")
