"""pyoshka Rendering package: buffered execution of template bodies."""

from pyoshka.rendering.attributes import URI_ATTRIBUTES, render_attributes
from pyoshka.rendering.core import Rendering
from pyoshka.rendering.dispatch import Handler, HandlerKind, classify

__all__ = [
    "URI_ATTRIBUTES",
    "Handler",
    "HandlerKind",
    "Rendering",
    "classify",
    "render_attributes",
]
