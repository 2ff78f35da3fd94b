"""Selects a single winner among route match candidates."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from dialog_router.core.logging import get_logger
from dialog_router.core.models import RouteMatch, RoutingContext
from dialog_router.services.scanning import find_async, first_result

logger = get_logger(__name__)


class MatchResolver:
    """Pick one candidate by guard outcome, then by platform scope, then by order.

    Tiers, first hit wins:

    1. conditional, platform-scoped, guard resolves truthy
    2. conditional, unscoped, guard resolves truthy
    3. unconditional, platform-scoped
    4. unconditional, unscoped

    Within a tier the candidate list order decides. Guards are awaited one
    at a time and only until a tier produces a winner.
    """

    def __init__(self, context: RoutingContext) -> None:
        self._context = context

    async def resolve(self, matches: Sequence[RouteMatch]) -> Optional[RouteMatch]:
        conditional = [m for m in matches if m.metadata.options.is_conditional]
        unconditional = [m for m in matches if not m.metadata.options.is_conditional]

        def scoped(group: list[RouteMatch], is_scoped: bool) -> list[RouteMatch]:
            return [m for m in group if m.metadata.options.is_platform_scoped is is_scoped]

        return await first_result(
            [
                lambda: self._first_passing_guard(scoped(conditional, True)),
                lambda: self._first_passing_guard(scoped(conditional, False)),
                lambda: self._first(scoped(unconditional, True)),
                lambda: self._first(scoped(unconditional, False)),
            ]
        )

    async def _first_passing_guard(self, matches: Iterable[RouteMatch]) -> Optional[RouteMatch]:
        return await find_async(matches, self._evaluate_guard)

    @staticmethod
    async def _first(matches: Sequence[RouteMatch]) -> Optional[RouteMatch]:
        return matches[0] if matches else None

    async def _evaluate_guard(self, match: RouteMatch) -> bool:
        guard = match.metadata.options.if_
        if guard is None:
            return False
        passed = bool(await guard(self._context))
        logger.debug(
            "[router] Guard for %s.%s resolved %s",
            ".".join(match.path),
            match.metadata.property_key,
            passed,
        )
        return passed


__all__ = ["MatchResolver"]
