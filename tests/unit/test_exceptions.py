"""Tests for the pyoshka exception hierarchy."""

import traceback

import pytest

from pyoshka import (
    ComponentNotFoundError,
    ErrorCode,
    RenderDepthError,
    RenderError,
    TemplateError,
    UnresolvableComponentError,
)


def test_hierarchy():
    assert issubclass(RenderError, TemplateError)
    assert issubclass(UnresolvableComponentError, RenderError)
    assert issubclass(ComponentNotFoundError, RenderError)
    assert issubclass(ComponentNotFoundError, LookupError)
    assert issubclass(RenderDepthError, RenderError)


def test_unresolvable_message():
    error = UnresolvableComponentError("Answer", 42)
    message = str(error)
    assert message.startswith("Render Error: cannot render 42")
    assert "Component: Answer" in message
    assert "Suggestion: Bind 'Answer'" in message
    assert error.code is ErrorCode.UNRESOLVABLE_COMPONENT


def test_call_site_defaults_to_caller():
    error = ComponentNotFoundError("Missing")
    assert error.call_site is not None
    assert error.call_site.name == "test_call_site_defaults_to_caller"
    assert error.location == f"{error.call_site.filename}:{error.call_site.lineno}"
    assert "Location:" in str(error)


def test_explicit_call_site():
    frame = traceback.FrameSummary("views/home.py", 18, "page")
    error = UnresolvableComponentError("Answer", 42, call_site=frame)
    assert error.location == "views/home.py:18"


def test_format_compact_prefixes_code():
    error = RenderDepthError(5)
    assert error.format_compact().startswith("P-RUN-003: Render Error:")
    assert error.max_depth == 5


def test_plain_template_error_compact():
    assert TemplateError("plain").format_compact() == "plain"


@pytest.mark.parametrize("code", list(ErrorCode))
def test_error_codes_are_runtime(code):
    assert code.value.startswith("P-RUN-")
    assert code.category == "runtime"
