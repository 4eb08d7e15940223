"""Tag attribute serialization.

Escaping policy:
    - ``src`` / ``href`` values are URI-escaped
    - ``True`` renders the bare attribute name (``disabled``)
    - ``False`` / ``None`` omit the attribute
    - every other value is interpolated with ``str()`` and NOT escaped

The last rule matches the established output of existing templates: generic
attribute values are trusted. Pass user input through ``html_escape()``
before using it as an attribute value.

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pyoshka.utils.html import Escaper

# Attributes holding URIs
URI_ATTRIBUTES: frozenset[str] = frozenset({"src", "href"})

# Consumed by tag() callers, never an attribute
RESERVED_ATTRIBUTES: frozenset[str] = frozenset({"text"})


def attribute_name(key: str) -> str:
    """Attribute name for a keyword; one trailing underscore is dropped (``class_``)."""
    if len(key) > 1 and key.endswith("_") and not key.endswith("__"):
        return key[:-1]
    return key


def render_attributes(attributes: Mapping[str, Any], escaper: Escaper) -> str:
    """Serialize attributes in insertion order, each prefixed by a space.

    Example:
        >>> render_attributes({"href": "/a b", "hidden": True, "class_": "x"}, DefaultEscaper())
        ' href="/a%20b" hidden class="x"'
        >>> render_attributes({"foo": '"'}, DefaultEscaper())
        ' foo=\"\"\"'
    """
    parts: list[str] = []
    for key, value in attributes.items():
        if key in RESERVED_ATTRIBUTES or value is None or value is False:
            continue
        name = attribute_name(key)
        if value is True:
            parts.append(f" {name}")
        elif name in URI_ATTRIBUTES:
            parts.append(f' {name}="{escaper.escape_uri(str(value))}"')
        else:
            parts.append(f' {name}="{value}"')
    return "".join(parts)
