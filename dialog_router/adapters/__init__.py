"""Infrastructure adapter exports."""

from dialog_router.core.exceptions import (  # noqa: F401
    ComponentNotFoundError,
    DuplicateComponentError,
)

from .registry import ComponentNode, ComponentRegistry, HandlerMetadataStore

__all__ = [
    "ComponentNode",
    "ComponentRegistry",
    "HandlerMetadataStore",
    "ComponentNotFoundError",
    "DuplicateComponentError",
]
