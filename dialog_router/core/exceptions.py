"""Core exception types shared across layers."""

from __future__ import annotations

from typing import Sequence


class RoutingError(Exception):
    """Base for failures raised by the router itself."""


class ComponentNotFoundError(RoutingError):
    """Raised when a component path cannot be resolved in the registry."""

    def __init__(self, path: Sequence[str]) -> None:
        self.path = tuple(path)
        super().__init__(f"Could not find component at path {'.'.join(self.path)!r}")


class DuplicateComponentError(RoutingError):
    """Raised when two child components share a name under the same parent."""


__all__ = [
    "RoutingError",
    "ComponentNotFoundError",
    "DuplicateComponentError",
]
