from __future__ import annotations

import pytest
from jinja2 import Environment as Jinja2Environment

from pyoshka import Environment as PyoshkaEnvironment


def _items(count: int) -> list[dict[str, object]]:
    return [
        {
            "name": f"Item <{i}>",
            "description": f"Description for item {i} & friends",
            "active": i % 2 == 0,
        }
        for i in range(count)
    ]


@pytest.fixture(scope="session")
def pyoshka_env() -> PyoshkaEnvironment:
    return PyoshkaEnvironment()


@pytest.fixture(scope="session")
def jinja2_env() -> Jinja2Environment:
    return Jinja2Environment(autoescape=True)


@pytest.fixture(scope="session")
def small_context() -> dict[str, object]:
    return {"title": "Small page", "items": _items(5)}


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return {"title": "Large page", "items": _items(1000)}
