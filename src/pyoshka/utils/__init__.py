"""Utility helpers for pyoshka."""

from pyoshka.utils.html import DefaultEscaper, Escaper, Markup, html_escape, uri_escape

__all__ = [
    "DefaultEscaper",
    "Escaper",
    "Markup",
    "html_escape",
    "uri_escape",
]
