"""Application service layer for intent routing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional

from dialog_router.core.config import config
from dialog_router.core.models import RoutingContext
from dialog_router.core.ports import ComponentRegistryPort, HandlerMetadataPort

if TYPE_CHECKING:  # pragma: no cover - type narrowing only
    from .routing_executor import RoutingExecutor


@dataclass(slots=True)
class ServiceContainer:
    """Aggregate of the collaborators a routing executor reads from."""

    registry: ComponentRegistryPort
    handler_metadata: HandlerMetadataPort
    intent_map: Optional[Mapping[str, str]] = None
    unhandled_intent: Optional[str] = None

    def executor_for(self, context: RoutingContext) -> "RoutingExecutor":
        """Return an executor bound to ``context`` for one request."""

        from .routing_executor import RoutingExecutor  # pylint: disable=import-outside-toplevel

        return RoutingExecutor(
            self.registry,
            self.handler_metadata,
            context,
            intent_map=self.intent_map,
            unhandled_intent=self.unhandled_intent,
        )


def build_default_services(
    *,
    registry: ComponentRegistryPort,
    handler_metadata: HandlerMetadataPort,
    intent_map: Optional[Mapping[str, str]] = None,
) -> ServiceContainer:
    """Return a service container using configured routing defaults."""

    return ServiceContainer(
        registry=registry,
        handler_metadata=handler_metadata,
        intent_map=dict(config.INTENT_MAP if intent_map is None else intent_map),
        unhandled_intent=config.UNHANDLED_INTENT,
    )


__all__ = ["ServiceContainer", "build_default_services"]
