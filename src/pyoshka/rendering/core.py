"""pyoshka Rendering: single-use execution of a template body.

A Rendering owns one output buffer and one stack of local scopes. The body
it is constructed with, and every nested body, tag and embedded template,
write into that same buffer:

    ```python
    page = template(lambda r: r.html5(lambda r: r.body(lambda r: r.p("hi"))))
    # Rendering(ctx, page.body)
    #   buf = ["<!DOCTYPE html>", "<html", ">", "<body", ">", "<p", ">", "hi", "</p>", ...]
    #   to_string() → ''.join(buf)
    ```

Open vocabulary:
Fixed methods (``tag``, ``text``, ``emit``, ``embed_template``, ``html5``,
``with_scope``, ``scope``) are ordinary methods. Every other public name
goes through ``invoke()``:

    - ``r.title`` → value of ``title`` in the current local scope, if any
    - ``r.Card(...)`` → component registered or defined as ``Card``
    - ``r.div(...)`` → ``<div>`` element

Scoping:
Only the innermost scope is visible. ``with_scope()`` replaces it for the
dynamic extent of a body and always restores the previous one.

Thread-Safety:
A Rendering is confined to the thread that created it. The only state it
shares is its environment's dispatch cache, which is insert-if-absent.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from functools import partial
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pyoshka.environment.core import default_environment
from pyoshka.environment.exceptions import RenderDepthError
from pyoshka.render_context import active_rendering
from pyoshka.rendering.attributes import render_attributes
from pyoshka.rendering.dispatch import Handler, HandlerKind, classify
from pyoshka.template.core import Body, Template

if TYPE_CHECKING:
    from pyoshka.environment import Environment

S_HTML5_DOCTYPE = "<!DOCTYPE html>"


class Rendering:
    """One rendering of a template body into a string.

    Args:
        context: Bottom local scope (the render context)
        body: Callable invoked as ``body(rendering)`` immediately
        env: Environment providing escaper, components and dispatch cache

    Example:
        >>> r = Rendering({}, lambda r: r.p("Tom & Jerry"))
        >>> r.to_string()
        '<p>Tom &amp; Jerry</p>'
    """

    __slots__ = (
        "_append",
        "_buffer",
        "_context",
        "_depth",
        "_env",
        "_escaper",
        "_local",
        "_scope_globals",
    )

    def __init__(
        self,
        context: Mapping[str, Any] | None,
        body: Body,
        *,
        env: Environment | None = None,
    ):
        self._env = env if env is not None else default_environment()
        self._escaper = self._env.escaper
        self._buffer: list[str] = []
        self._append = self._buffer.append
        self._context: Mapping[str, Any] = MappingProxyType(dict(context or {}))
        self._local: Mapping[str, Any] = self._context
        self._scope_globals: Mapping[str, Any] | None = None
        self._depth = 0

        with active_rendering(self):
            self._run(body)

    # ------------------------------------------------------------------
    # Result
    # ------------------------------------------------------------------

    def to_string(self) -> str:
        """Return the rendered output; does not reset the buffer."""
        return "".join(self._buffer)

    def __str__(self) -> str:
        return self.to_string()

    @property
    def context(self) -> Mapping[str, Any]:
        """The render context this rendering started with."""
        return self._context

    @property
    def current_scope(self) -> Mapping[str, Any]:
        """The innermost local scope (the only one visible to lookups)."""
        return MappingProxyType(dict(self._local))

    @property
    def env(self) -> Environment:
        return self._env

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _run(self, body: Body) -> None:
        # Component lookups fall back to the globals of the body being run
        previous = self._scope_globals
        scope = getattr(body, "__globals__", None)
        if scope is not None:
            self._scope_globals = scope
        try:
            body(self)
        finally:
            self._scope_globals = previous

    def emit(self, value: Any) -> None:
        """Emit any value into the buffer.

        - Template: its body runs in this rendering (shared buffer and scope)
        - callable: called with this rendering
        - None: nothing
        - anything else: ``str(value)``, NOT escaped
        """
        if isinstance(value, Template):
            self.embed_template(value)
        elif callable(value):
            self._run(value)
        elif value is None:
            return
        else:
            self._append(str(value))

    e = emit

    def embed_template(
        self,
        template: Template,
        overrides: Mapping[str, Any] | None = None,
        /,
        **kwargs: Any,
    ) -> None:
        """Run ``template`` inside this rendering.

        Without overrides the template's own body runs as-is (its bound
        context, if any, is established around it). With overrides the
        scope ``{**template.context, **overrides}`` is established instead.
        """
        if kwargs:
            overrides = {**overrides, **kwargs} if overrides else kwargs
        with self._nested(template):
            if overrides:
                self.with_scope(template.scope_for(overrides), template.unbound_body)
            else:
                self._run(template.body)

    @contextmanager
    def _nested(self, target: object) -> Iterator[None]:
        # Embedded templates and component calls count towards max_depth
        self._depth += 1
        try:
            if self._depth > self._env.max_depth:
                raise RenderDepthError(self._env.max_depth, name=str(target))
            yield
        finally:
            self._depth -= 1

    # ------------------------------------------------------------------
    # Scoping
    # ------------------------------------------------------------------

    def with_scope(self, local: Mapping[str, Any], body: Body) -> None:
        """Run ``body`` with ``local`` as the innermost scope, then restore."""
        previous, self._local = self._local, local
        try:
            self._run(body)
        finally:
            self._local = previous

    @contextmanager
    def scope(self, **local: Any) -> Iterator[Rendering]:
        """Context-manager form of ``with_scope()``.

            >>> with r.scope(title="Home"):
            ...     r.h1(r.title)
        """
        previous, self._local = self._local, local
        try:
            yield self
        finally:
            self._local = previous

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _text_content(self, value: Any) -> str:
        if hasattr(value, "__html__"):
            return value.__html__()
        return self._escaper.escape_html(str(value))

    def tag(
        self,
        name: str,
        text: Any = None,
        body: Body | None = None,
        /,
        **attributes: Any,
    ) -> None:
        """Emit an HTML element.

        Args:
            name: Element name
            text: Escaped text content, a Template to embed, or a body callable
            body: Nested body; wins over ``text``
            **attributes: Element attributes (see ``render_attributes``)

        Without text or body the element is self-closing: ``<br/>``. A
        ``False`` text counts as no text.
        """
        append = self._append
        append(f"<{name}")
        if attributes:
            append(render_attributes(attributes, self._escaper))

        if body is None and callable(text) and not isinstance(text, Template):
            body, text = text, None

        if body is not None:
            append(">")
            self._run(body)
            append(f"</{name}>")
        elif isinstance(text, Template):
            append(">")
            self.embed_template(text)
            append(f"</{name}>")
        elif text is not None and text is not False:
            append(f">{self._text_content(text)}</{name}>")
        else:
            append("/>")

    def text(self, data: Any) -> None:
        """Emit escaped text."""
        self._append(self._text_content(data))

    def html5(self, body: Body) -> None:
        """Emit the HTML5 doctype followed by an ``<html>`` element."""
        self._append(S_HTML5_DOCTYPE)
        self.tag("html", None, body)

    # ------------------------------------------------------------------
    # Open-vocabulary dispatch
    # ------------------------------------------------------------------

    def classify(self, name: str) -> Handler:
        """Return the handler ``name`` dispatches to from the current scope."""
        local = self._local
        if name in local:
            return Handler(HandlerKind.LOCAL, name, local[name])
        cache = self._env.dispatch_cache
        handler = cache.get(name)
        if handler is None:
            handler = cache.setdefault(
                name, classify(name, self._env.components, self._scope_globals)
            )
        return handler

    def invoke(self, name: str, /, *args: Any, **kwargs: Any) -> Any:
        """Resolve ``name`` and dispatch the call.

        Returns:
            The local value when ``name`` is a local, otherwise None
        """
        handler = self.classify(name)
        kind = handler.kind
        if kind is HandlerKind.LOCAL:
            return handler.value
        if kind is HandlerKind.TAG:
            self.tag(handler.value, *args, **kwargs)
        elif kind is HandlerKind.COMPONENT_TEMPLATE:
            overrides = args[0] if args and isinstance(args[0], Mapping) else None
            self.embed_template(handler.value, overrides, **kwargs)
        elif kind is HandlerKind.COMPONENT_STRING:
            self._append(handler.value)
        else:
            with self._nested(name):
                self.emit(handler.value(*args, **kwargs))
        return None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        local = self._local
        if name in local:
            return local[name]
        return partial(self.invoke, name)

    def __repr__(self) -> str:
        return f"<Rendering size={len(self._buffer)} depth={self._depth}>"
