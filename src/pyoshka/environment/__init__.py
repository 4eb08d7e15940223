"""Environment, shared state and errors for pyoshka."""

from pyoshka.environment.cache import DispatchCache
from pyoshka.environment.core import DEFAULT_MAX_DEPTH, Environment, default_environment
from pyoshka.environment.exceptions import (
    ComponentNotFoundError,
    ErrorCode,
    RenderDepthError,
    RenderError,
    TemplateError,
    UnresolvableComponentError,
)
from pyoshka.environment.registry import ComponentRegistry

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ComponentNotFoundError",
    "ComponentRegistry",
    "DispatchCache",
    "Environment",
    "ErrorCode",
    "RenderDepthError",
    "RenderError",
    "TemplateError",
    "UnresolvableComponentError",
    "default_environment",
]
