"""Protocol definitions for the router's external collaborators."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from typing import Any, Iterable, Protocol, Sequence

from dialog_router.core.models import HandlerMetadata


class ComponentNodePort(Protocol):
    """A named node of the component tree."""

    name: str

    def children(self) -> Iterable["ComponentNodePort"]:
        """Return child components in registration order."""
        ...


class ComponentRegistryPort(Protocol):
    """Port exposing the registered component tree."""

    def roots(self) -> Iterable[ComponentNodePort]:
        """Return top-level components in registration order."""
        ...

    def get_component_or_fail(self, path: Sequence[str]) -> ComponentNodePort:
        """Return the component at ``path`` or raise ``ComponentNotFoundError``."""
        ...


class HandlerMetadataPort(Protocol):
    """Port exposing handler descriptors keyed by component identity."""

    def get_merged_handler_metadata(self, component: Any) -> list[HandlerMetadata]:
        """Return the merged descriptors declared on ``component``."""
        ...


__all__ = ["ComponentNodePort", "ComponentRegistryPort", "HandlerMetadataPort"]
