"""Application bootstrap helpers for assembling the service container."""

from __future__ import annotations

from typing import Mapping, Optional

from dialog_router.adapters.registry import ComponentRegistry, HandlerMetadataStore
from dialog_router.services import ServiceContainer, build_default_services


def build_default_service_container(
    registry: Optional[ComponentRegistry] = None,
    handler_metadata: Optional[HandlerMetadataStore] = None,
    intent_map: Optional[Mapping[str, str]] = None,
) -> ServiceContainer:
    """Return a service container wired to the in-memory adapters."""

    return build_default_services(
        registry=registry if registry is not None else ComponentRegistry(),
        handler_metadata=(
            handler_metadata if handler_metadata is not None else HandlerMetadataStore()
        ),
        intent_map=intent_map,
    )


__all__ = ["build_default_service_container"]
