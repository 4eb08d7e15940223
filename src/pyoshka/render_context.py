"""Current-rendering tracking via ContextVar.

Template bodies receive their Rendering explicitly. Code that is reached
indirectly (a component callable, a helper several calls deep) can still
find the active Rendering through ``get_rendering()`` without it being
threaded through every signature.

Benefits:
    - Thread-safe via ContextVar (each thread sees its own rendering)
    - Nested ``render()`` calls restore the outer rendering on exit
    - No module-level mutable globals

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pyoshka.rendering.core import Rendering


# Module-level ContextVar
_current_rendering: ContextVar[Rendering | None] = ContextVar(
    "current_rendering",
    default=None,
)


def get_rendering() -> Rendering | None:
    """Get the rendering currently being evaluated (None outside a render).

    Example:
        def Timestamp():
            r = get_rendering_required()
            r.time(now().isoformat())
    """
    return _current_rendering.get()


def get_rendering_required() -> Rendering:
    """Get the current rendering, raise if not in a render.

    Raises:
        RuntimeError: If no rendering is active
    """
    rendering = _current_rendering.get()
    if rendering is None:
        raise RuntimeError("Not inside a rendering")
    return rendering


@contextmanager
def active_rendering(rendering: Rendering) -> Iterator[Rendering]:
    """Publish ``rendering`` as current for the duration of the with block.

    The previous rendering (if any) is restored on exit, including when the
    block raises.
    """
    token: Token[Rendering | None] = _current_rendering.set(rendering)
    try:
        yield rendering
    finally:
        _current_rendering.reset(token)
