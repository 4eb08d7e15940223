"""pyoshka Template: immutable, reusable description of an HTML fragment.

A Template pairs a body callable with an optional bound context. The body
is only run when the template is rendered, or embedded into another
rendering:

    ```
    Template
    ├── _body: Body             # def body(r: Rendering) -> None
    ├── _context: mapping       # bound defaults (may be empty)
    ├── _bound_body: Body       # _body wrapped to establish _context
    └── _env: Environment|None  # None → default_environment() at render time
    ```

Bound context:
The bound context supplies defaults for the body's locals. Keyword
overrides given at render or embed time win over the defaults:

    >>> greeting = template(lambda r: r.p(f"Hello, {r.name}"), name="stranger")
    >>> greeting.render()
    '<p>Hello, stranger</p>'
    >>> greeting.render(name="Sam")
    '<p>Hello, Sam</p>'

Thread-Safety:
- Templates hold no mutable state
- ``render()`` creates a fresh Rendering (own buffer, own scope stack)
- Multiple threads can call ``render()`` on the same template concurrently

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pyoshka.environment import Environment
    from pyoshka.rendering.core import Rendering

Body = Callable[["Rendering"], Any]


class Template:
    """Deferred HTML fragment ready for rendering.

    Attributes:
        body: Callable run inside a Rendering; establishes the bound context
            first when there is one
        unbound_body: The body exactly as given
        context: Read-only bound context
        env: Environment the template renders under

    Example:
        >>> page = Template(lambda r: r.html5(lambda r: r.body(lambda r: r.p("hi"))))
        >>> page.render()
        '<!DOCTYPE html><html><body><p>hi</p></body></html>'
    """

    __slots__ = ("_body", "_bound_body", "_context", "_env")

    def __init__(
        self,
        body: Body,
        context: Mapping[str, Any] | None = None,
        *,
        env: Environment | None = None,
    ):
        if not callable(body):
            raise TypeError(f"Template body must be callable, got {type(body).__name__}")
        self._body = body
        self._context: Mapping[str, Any] = MappingProxyType(dict(context or {}))
        self._env = env

        if self._context:
            bound = self._context

            def bound_body(r: Rendering) -> None:
                r.with_scope(bound, body)

            self._bound_body: Body = bound_body
        else:
            self._bound_body = body

    @property
    def body(self) -> Body:
        return self._bound_body

    @property
    def unbound_body(self) -> Body:
        return self._body

    @property
    def context(self) -> Mapping[str, Any]:
        return self._context

    @property
    def env(self) -> Environment:
        if self._env is not None:
            return self._env
        from pyoshka.environment.core import default_environment

        return default_environment()

    def scope_for(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Locals established when embedding this template with ``overrides``."""
        if not overrides:
            return dict(self._context)
        return {**self._context, **overrides}

    def render(self, context: Mapping[str, Any] | None = None, /, **kwargs: Any) -> str:
        """Render the template and return the HTML string.

        Args:
            context: Optional mapping of locals
            **kwargs: Additional locals (win over ``context``)

        Returns:
            The rendered HTML

        Raises:
            RenderError: If a component cannot be resolved or rendered
        """
        from pyoshka.rendering.core import Rendering

        ctx = {**context, **kwargs} if context else kwargs
        return Rendering(ctx, self._render_root, env=self.env).to_string()

    def _render_root(self, r: Rendering) -> None:
        r.embed_template(self, r.context)

    def __repr__(self) -> str:
        name = getattr(self._body, "__qualname__", type(self._body).__name__)
        if self._context:
            return f"<Template {name} context={sorted(self._context)}>"
        return f"<Template {name}>"


def template(body: Body | None = None, /, **context: Any) -> Any:
    """Build a Template under the default environment.

    Usable directly or as a decorator:

        >>> card = template(lambda r: r.div(r.title, class_="card"), title="Untitled")

        >>> @template(name="stranger")
        ... def Greeting(r):
        ...     r.p(f"Hello, {r.name}")

    The body is not called until the template is rendered.
    """
    if body is None:

        def decorator(fn: Body) -> Template:
            return Template(fn, context)

        return decorator
    return Template(body, context)
