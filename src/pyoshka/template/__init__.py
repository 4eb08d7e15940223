"""pyoshka Template package: deferred HTML fragments ready for rendering."""

from pyoshka.template.core import Body, Template, template

__all__ = [
    "Body",
    "Template",
    "template",
]
