"""Component registry for the pyoshka environment.

Provides a dict-like interface over the environment's component table.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pyoshka.environment.core import Environment

COMPONENT_NAME_RE = re.compile(r"^[A-Z]")


def is_component_name(name: str) -> bool:
    """True when ``name`` refers to a component rather than a tag."""
    return COMPONENT_NAME_RE.match(name) is not None


class ComponentRegistry:
    """Dict-like view of the components registered on an Environment.

    Supports:
        - env.components['Card'] = card_template
        - env.components.update({'Card': card_template})
        - value = env.components['Card']
        - 'Card' in env.components

    All mutations use copy-on-write for thread-safety.
    """

    __slots__ = ("_env", "_attr")

    def __init__(self, env: Environment, attr: str):
        self._env = env
        self._attr = attr

    def _get_dict(self) -> dict[str, Any]:
        return getattr(self._env, self._attr)

    def _set_dict(self, d: dict[str, Any]) -> None:
        setattr(self._env, self._attr, d)

    @staticmethod
    def _check_name(name: str) -> None:
        if not is_component_name(name):
            msg = f"component name '{name}' must start with an uppercase letter."
            raise ValueError(msg)

    def __getitem__(self, name: str) -> Any:
        return self._get_dict()[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._check_name(name)
        new = self._get_dict().copy()
        new[name] = value
        self._set_dict(new)

    def __contains__(self, name: object) -> bool:
        return name in self._get_dict()

    def __len__(self) -> int:
        return len(self._get_dict())

    def get(self, name: str, default: Any = None) -> Any:
        return self._get_dict().get(name, default)

    def update(self, mapping: dict[str, Any]) -> None:
        """Batch register components."""
        for name in mapping:
            self._check_name(name)
        new = self._get_dict().copy()
        new.update(mapping)
        self._set_dict(new)

    def copy(self) -> dict[str, Any]:
        """Return a copy of the underlying dict."""
        return self._get_dict().copy()

    def keys(self):
        return self._get_dict().keys()

    def values(self):
        return self._get_dict().values()

    def items(self):
        return self._get_dict().items()
