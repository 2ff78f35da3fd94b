"""Collects the handlers that statically match an intent.

Stateless requests search the whole component tree for global handlers.
Stateful requests search from the active component outwards and widen
scope one stage at a time:

1. local handlers of the active component and its ancestors
2. global handlers anywhere in the tree
3. local ``UNHANDLED`` handlers
4. global ``UNHANDLED`` handlers
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from dialog_router.core.logging import get_logger
from dialog_router.core.models import HandlerMetadata, RouteMatch, RoutingContext, StateStackItem
from dialog_router.core.ports import ComponentNodePort, ComponentRegistryPort, HandlerMetadataPort
from dialog_router.services.scanning import first_non_empty

logger = get_logger(__name__)


class RouteMatchCollector:
    """Produces route match candidates for one routing context."""

    def __init__(
        self,
        registry: ComponentRegistryPort,
        handler_metadata: HandlerMetadataPort,
        context: RoutingContext,
        *,
        intent_map: Mapping[str, str],
        unhandled_intent: str,
    ) -> None:
        self._registry = registry
        self._handler_metadata = handler_metadata
        self._context = context
        self._intent_map = intent_map
        self._unhandled_intent = unhandled_intent

    def collect(self, intent_name: str) -> list[RouteMatch]:
        """Return the candidates of the first search stage that finds any."""
        state_item = self._context.current_state
        if state_item is None:
            stages = [
                lambda: self.collect_global(intent_name),
                lambda: self.collect_global(self._unhandled_intent),
            ]
        else:
            stages = [
                lambda: self.collect_local(intent_name, state_item),
                lambda: self.collect_global(intent_name),
                lambda: self.collect_local(self._unhandled_intent, state_item),
                lambda: self.collect_global(self._unhandled_intent),
            ]
        return first_non_empty(stages)

    def collect_global(self, intent_name: str) -> list[RouteMatch]:
        """Depth-first search of the whole tree for global handlers of ``intent_name``."""
        matches: list[RouteMatch] = []
        self._collect_global(self._registry.roots(), intent_name, (), matches)
        logger.debug(
            "[router] Global search intent=%s found %d candidate(s)", intent_name, len(matches)
        )
        return matches

    def _collect_global(
        self,
        components: Iterable[ComponentNodePort],
        intent_name: str,
        path: tuple[str, ...],
        matches: list[RouteMatch],
    ) -> None:
        for component in components:
            component_path = (*path, component.name)
            matches.extend(
                RouteMatch.from_metadata(component_path, metadata)
                for metadata in self._handler_metadata.get_merged_handler_metadata(component)
                if self._matches_intent(metadata.global_intent_names, intent_name)
                and metadata.options.allows_platform(self._context.platform)
            )
            # Children may register global handlers for the same intent.
            self._collect_global(component.children(), intent_name, component_path, matches)

    def collect_local(self, intent_name: str, state_item: StateStackItem) -> list[RouteMatch]:
        """Search the active component, then each ancestor, for local handlers.

        Raises ``ComponentNotFoundError`` if a path on the way cannot be resolved.
        """
        path = list(state_item.component_path)
        while path:
            component = self._registry.get_component_or_fail(path)
            related = self._matching_local_metadata(component, intent_name, state_item.sub_state)
            if related:
                logger.debug(
                    "[router] Local search intent=%s matched %d handler(s) at %s",
                    intent_name,
                    len(related),
                    ".".join(path),
                )
                return [RouteMatch.from_metadata(path, metadata) for metadata in related]
            path.pop()
        logger.debug(
            "[router] Local search intent=%s from %s found nothing",
            intent_name,
            state_item.component,
        )
        return []

    def _matching_local_metadata(
        self, component: ComponentNodePort, intent_name: str, sub_state: Optional[str]
    ) -> list[HandlerMetadata]:
        related = self._filter_local_metadata(component, intent_name, sub_state)
        # Handlers without a sub-state on the same component come before the parent.
        if not related and sub_state:
            related = self._filter_local_metadata(component, intent_name, None)
        return related

    def _filter_local_metadata(
        self, component: ComponentNodePort, intent_name: str, sub_state: Optional[str]
    ) -> list[HandlerMetadata]:
        return [
            metadata
            for metadata in self._handler_metadata.get_merged_handler_metadata(component)
            if (metadata.options.sub_state or None) == (sub_state or None)
            and self._matches_intent(metadata.intent_names, intent_name)
            and metadata.options.allows_platform(self._context.platform)
        ]

    def _matches_intent(self, intent_names: Sequence[str], intent_name: str) -> bool:
        mapped = self._intent_map.get(intent_name)
        if mapped and mapped in intent_names:
            return True
        return intent_name in intent_names


__all__ = ["RouteMatchCollector"]
