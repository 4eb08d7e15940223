"""HTML and URI escaping for pyoshka.

Both escapers are pure functions over ``str`` and safe for concurrent use.

Complexity:
- ``html_escape()``: O(n) single pass via ``str.translate()``
- ``uri_escape()``: O(n) via ``urllib.parse.quote()``

"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from urllib.parse import quote

# Characters that must never reach HTML text content unescaped
_HTML_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)

# URI reserved and unreserved marks left intact (mirrors JavaScript's encodeURI)
_URI_SAFE = "!#$&'()*+,/:;=?@[]~"


def html_escape(value: str) -> str:
    """Escape ``& < > " '`` for inclusion in HTML text content.

    Example:
        >>> html_escape("<b>Tom & 'Jerry'</b>")
        '&lt;b&gt;Tom &amp; &#39;Jerry&#39;&lt;/b&gt;'
    """
    return value.translate(_HTML_ESCAPE_TABLE)


def uri_escape(value: str) -> str:
    """Percent-encode a URI for use inside an attribute value.

    Reserved characters (``/ ? # & =`` ...) are preserved so that complete
    URLs survive; spaces, quotes, angle brackets and non-ASCII text are
    encoded.

    Example:
        >>> uri_escape("/search?q=a b")
        '/search?q=a%20b'
    """
    return quote(value, safe=_URI_SAFE)


class Markup(str):
    """A string that is already safe HTML.

    Text content emitted through ``Rendering.tag()`` or ``Rendering.text()``
    is escaped unless it implements ``__html__``; ``Markup`` is the simplest
    such object.
    """

    __slots__ = ()

    def __html__(self) -> str:
        return self

    def __repr__(self) -> str:
        return f"Markup({super().__repr__()})"


@runtime_checkable
class Escaper(Protocol):
    """Escaping capability used by renderings."""

    def escape_html(self, text: str) -> str: ...

    def escape_uri(self, text: str) -> str: ...


class DefaultEscaper:
    """Escaper backed by :func:`html_escape` and :func:`uri_escape`."""

    __slots__ = ()

    def escape_html(self, text: str) -> str:
        return html_escape(text)

    def escape_uri(self, text: str) -> str:
        return uri_escape(text)
