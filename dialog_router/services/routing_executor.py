"""Top-level entry point resolving an intent to a single route."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from dialog_router.core.config import config
from dialog_router.core.logging import get_logger, get_session_id, session_id_context
from dialog_router.core.models import Route, RouteMatch, RoutingContext
from dialog_router.core.ports import ComponentRegistryPort, HandlerMetadataPort
from dialog_router.services.match_resolver import MatchResolver
from dialog_router.services.route_collector import RouteMatchCollector

logger = get_logger(__name__)


class RoutingExecutor:
    """Resolve intents for one routing context.

    Usage::

        executor = RoutingExecutor(registry, store, RoutingContext(platform="alexa"))
        route = await executor.execute("HelpIntent")

    ``execute`` returns ``None`` when no handler applies. Lookup failures
    and exceptions raised by handler guards propagate unchanged.
    """

    def __init__(
        self,
        registry: ComponentRegistryPort,
        handler_metadata: HandlerMetadataPort,
        context: RoutingContext,
        *,
        intent_map: Optional[Mapping[str, str]] = None,
        unhandled_intent: Optional[str] = None,
    ) -> None:
        self.context = context
        self._collector = RouteMatchCollector(
            registry,
            handler_metadata,
            context,
            intent_map=config.INTENT_MAP if intent_map is None else intent_map,
            unhandled_intent=unhandled_intent or config.UNHANDLED_INTENT,
        )
        self._resolver = MatchResolver(context)

    async def execute(self, intent_name: str) -> Optional[Route]:
        if not intent_name:
            return None
        with session_id_context(self.context.session_id or get_session_id()):
            return await self._execute(intent_name)

    async def _execute(self, intent_name: str) -> Optional[Route]:
        matches = self.get_route_matches(intent_name)
        if not matches:
            logger.info("[router] No candidates for intent=%s", intent_name)
            return None
        match = await self.find_matching_route(matches)
        if match is None:
            logger.info(
                "[router] %d candidate(s) for intent=%s but none applied",
                len(matches),
                intent_name,
            )
            return None
        route = Route.from_match(match)
        logger.info(
            "[router] Routed intent=%s to %s.%s (sub_state=%s)",
            intent_name,
            ".".join(route.path),
            route.handler_key,
            route.sub_state,
        )
        return route

    def get_route_matches(self, intent_name: str) -> list[RouteMatch]:
        return self._collector.collect(intent_name)

    async def find_matching_route(self, matches: Sequence[RouteMatch]) -> Optional[RouteMatch]:
        return await self._resolver.resolve(matches)


__all__ = ["RoutingExecutor"]
