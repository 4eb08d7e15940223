"""Environment: shared configuration and state for pyoshka renderings.

An Environment owns everything that outlives a single ``render()`` call:

    ```
    Environment
    ├── escaper: Escaper            # HTML / URI escaping capability
    ├── components: ComponentRegistry  # Named components (copy-on-write)
    ├── dispatch_cache: DispatchCache  # name → Handler, populated on first use
    └── max_depth: int              # Template/component nesting limit
    ```

Templates built without an explicit environment render under the
process-wide default returned by ``default_environment()``.

Thread-Safety:
- Component registration uses copy-on-write
- The dispatch cache takes a lock only when inserting a new name
- Renderings never write to any other environment state

"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from pyoshka.environment.cache import DispatchCache
from pyoshka.environment.registry import ComponentRegistry
from pyoshka.utils.html import DefaultEscaper, Escaper

if TYPE_CHECKING:
    from pyoshka.template.core import Body, Template

logger = logging.getLogger(__name__)

# Deep enough for any real component tree while catching self-embedding
# components long before the interpreter's recursion limit.
DEFAULT_MAX_DEPTH = 50


class Environment:
    """Configuration and shared state for rendering templates.

    Args:
        escaper: Object with ``escape_html`` and ``escape_uri`` methods.
            Defaults to :class:`~pyoshka.utils.html.DefaultEscaper`.
        components: Initial component table (names must be capitalized).
        max_depth: Maximum nesting of embedded templates and components.

    Example:
        >>> env = Environment()
        >>> env.add_component("Brand", "<b>pyoshka</b>")
        >>> env.template(lambda r: r.h1(lambda r: r.Brand())).render()
        '<h1><b>pyoshka</b></h1>'
    """

    def __init__(
        self,
        escaper: Escaper | None = None,
        components: Mapping[str, Any] | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        if max_depth < 1:
            msg = f"max_depth must be positive, got {max_depth}."
            raise ValueError(msg)
        self.escaper: Escaper = escaper if escaper is not None else DefaultEscaper()
        self.max_depth = max_depth
        self.dispatch_cache = DispatchCache()
        self._components: dict[str, Any] = {}
        self.components = ComponentRegistry(self, "_components")
        if components:
            self.components.update(dict(components))

    def template(self, body: Body | None = None, /, **context: Any) -> Any:
        """Build a Template bound to this environment.

        Usable directly or as a decorator:

            >>> card = env.template(lambda r: r.div(r.title), title="Untitled")

            >>> @env.template(title="Untitled")
            ... def Card(r):
            ...     r.div(r.title)
        """
        from pyoshka.template.core import Template

        if body is None:

            def decorator(fn: Body) -> Template:
                return Template(fn, context, env=self)

            return decorator
        return Template(body, context, env=self)

    def add_component(self, name: str, value: Any) -> None:
        """Register a component under a capitalized name.

        Registration does not affect a name that renderings already
        classified; call ``clear_caches()`` to reclassify.
        """
        if name in self.dispatch_cache:
            logger.warning(
                "Component %r registered after first use; cached dispatch is kept "
                "until clear_caches()",
                name,
            )
        self.components[name] = value

    def update_components(self, mapping: Mapping[str, Any]) -> None:
        """Register several components at once."""
        for name, value in mapping.items():
            self.add_component(name, value)

    def component(self, name: str | None = None) -> Callable[[Any], Any]:
        """Decorator registering the decorated object as a component.

            >>> @env.component()
            ... def Badge(label):
            ...     return env.template(lambda r: r.span(label, class_="badge"))
        """

        def decorator(value: Any) -> Any:
            self.add_component(name or value.__name__, value)
            return value

        return decorator

    def clear_caches(self) -> None:
        """Forget every dispatch classification."""
        size = len(self.dispatch_cache)
        self.dispatch_cache.clear()
        logger.debug("Cleared dispatch cache (%d entries)", size)

    def cache_info(self) -> dict[str, Any]:
        """Dispatch cache statistics.

        Returns:
            Dict with ``size`` and the sorted list of classified ``names``.
        """
        entries = self.dispatch_cache.snapshot()
        return {"size": len(entries), "names": sorted(entries)}

    def __repr__(self) -> str:
        return (
            f"<Environment components={len(self.components)} "
            f"cached={len(self.dispatch_cache)} max_depth={self.max_depth}>"
        )


_default_environment: Environment | None = None
_default_lock = threading.Lock()


def default_environment() -> Environment:
    """Return the process-wide Environment, creating it on first use."""
    global _default_environment
    env = _default_environment
    if env is None:
        with _default_lock:
            if _default_environment is None:
                _default_environment = Environment()
            env = _default_environment
    return env
