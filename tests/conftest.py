"""Pytest configuration and fixtures for pyoshka tests."""

import pytest

from pyoshka import Environment, Rendering, default_environment


@pytest.fixture(autouse=True)
def _fresh_default_dispatch():
    """Isolate tests that render under the process-wide default environment."""
    default_environment().clear_caches()
    yield
    default_environment().clear_caches()


@pytest.fixture
def env():
    """Create a fresh pyoshka Environment."""
    return Environment()


@pytest.fixture
def render(env):
    """Render a bare body in the ``env`` fixture and return the output."""

    def _render(body, context=None):
        return Rendering(context or {}, body, env=env).to_string()

    return _render


def assert_contains(result: str, *expected_parts: str) -> None:
    """Assert rendered output contains all expected parts.

    Args:
        result: The actual rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in result, (
            f"Rendered output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {result!r}"
        )
