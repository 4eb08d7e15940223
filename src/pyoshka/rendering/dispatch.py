"""Symbol classification for open-vocabulary template invocations.

Any name a body invokes on its Rendering that is not a fixed method
(``r.div``, ``r.Card``, ``r.title``) is resolved here:

1. A name defined in the innermost local scope is a ``LOCAL`` and is
   re-checked on every call (never cached).
2. A name starting with an ASCII uppercase letter is a component, looked up
   in the environment's registry and then in the module globals of the body
   being evaluated. Its value decides the handler kind.
3. Every other name is a plain ``TAG``.

Classifications from steps 2 and 3 are stored in the environment's
DispatchCache, so each distinct name is classified once per environment.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pyoshka.environment.exceptions import ComponentNotFoundError, UnresolvableComponentError
from pyoshka.environment.registry import is_component_name
from pyoshka.template.core import Template

logger = logging.getLogger(__name__)

_MISSING = object()


class HandlerKind(Enum):
    """How an invoked name is dispatched."""

    LOCAL = "local"
    COMPONENT_PROC = "component_proc"
    COMPONENT_TEMPLATE = "component_template"
    COMPONENT_STRING = "component_string"
    TAG = "tag"


@dataclass(frozen=True, slots=True)
class Handler:
    """Classified dispatch target for a symbol name.

    Attributes:
        kind: Dispatch strategy
        name: Symbol as invoked (``"del_"``, ``"Card"``)
        value: Element name for tags, the resolved object for components,
            the local value for locals
    """

    kind: HandlerKind
    name: str
    value: Any


def tag_name(name: str) -> str:
    """Element name for a tag symbol; one trailing underscore is dropped.

        >>> tag_name("del_")
        'del'
        >>> tag_name("div")
        'div'
    """
    if len(name) > 1 and name.endswith("_") and not name.endswith("__"):
        return name[:-1]
    return name


def resolve_component(
    name: str,
    components: Mapping[str, Any],
    scope: Mapping[str, Any] | None,
) -> Any:
    """Look up a component value: registry first, then the declaration scope.

    Raises:
        ComponentNotFoundError: If neither defines ``name``
    """
    value = components.get(name, _MISSING)
    if value is _MISSING and scope is not None:
        value = scope.get(name, _MISSING)
    if value is _MISSING:
        raise ComponentNotFoundError(name)
    return value


def classify(
    name: str,
    components: Mapping[str, Any],
    scope: Mapping[str, Any] | None = None,
) -> Handler:
    """Classify a non-local symbol.

    Args:
        name: Invoked symbol
        components: Registered components of the environment
        scope: Module globals of the body issuing the invocation

    Returns:
        Handler describing how to dispatch ``name``

    Raises:
        ComponentNotFoundError: Capitalized name not found
        UnresolvableComponentError: Capitalized name bound to an unrenderable value
    """
    if not is_component_name(name):
        handler = Handler(HandlerKind.TAG, name, tag_name(name))
    else:
        value = resolve_component(name, components, scope)
        if isinstance(value, Template):
            kind = HandlerKind.COMPONENT_TEMPLATE
        elif isinstance(value, str):
            kind = HandlerKind.COMPONENT_STRING
        elif callable(value):
            kind = HandlerKind.COMPONENT_PROC
        else:
            raise UnresolvableComponentError(name, value)
        handler = Handler(kind, name, value)
    logger.debug("Classified %r as %s", name, handler.kind.name)
    return handler
