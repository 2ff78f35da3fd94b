"""Core data transfer objects shared across layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field


class StateStackItem(BaseModel):
    """One frame of the conversational call stack."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    component: str
    sub_state: Optional[str] = Field(default=None, alias="subState")

    @property
    def component_path(self) -> tuple[str, ...]:
        """Return the dotted component path split into segments."""
        return tuple(self.component.split("."))


StateStack = List[StateStackItem]


@dataclass(slots=True)
class RoutingContext:
    """Ambient request data visible to the router and to handler guards."""

    platform: str
    state: Optional[StateStack] = None
    request: Any = None
    session: Any = None
    session_id: Optional[str] = None
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def is_stateful(self) -> bool:
        """True when a non-empty state stack anchors local search."""
        return bool(self.state)

    @property
    def current_state(self) -> Optional[StateStackItem]:
        """Return the last state stack entry, if any."""
        return self.state[-1] if self.state else None


Guard = Callable[[RoutingContext], Awaitable[bool]]


@dataclass(frozen=True, slots=True)
class HandlerOptions:
    """Static and dynamic constraints declared on a handler."""

    sub_state: Optional[str] = None
    platforms: tuple[str, ...] = ()
    if_: Optional[Guard] = None

    @property
    def is_conditional(self) -> bool:
        return self.if_ is not None

    @property
    def is_platform_scoped(self) -> bool:
        return bool(self.platforms)

    def allows_platform(self, platform: str) -> bool:
        """True when no allow-list is declared or ``platform`` is on it."""
        return not self.platforms or platform in self.platforms

    def merged_with(self, other: "HandlerOptions") -> "HandlerOptions":
        """Return options where non-empty values from ``other`` win."""
        return HandlerOptions(
            sub_state=other.sub_state if other.sub_state is not None else self.sub_state,
            platforms=other.platforms or self.platforms,
            if_=other.if_ if other.if_ is not None else self.if_,
        )


@dataclass(frozen=True, slots=True)
class HandlerMetadata:
    """Immutable descriptor of a handler declared on a component."""

    property_key: str
    intent_names: tuple[str, ...] = ()
    global_intent_names: tuple[str, ...] = ()
    options: HandlerOptions = HandlerOptions()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A handler that statically matches the current intent, plus where it lives."""

    path: tuple[str, ...]
    metadata: HandlerMetadata

    @property
    def sub_state(self) -> Optional[str]:
        return self.metadata.options.sub_state

    @classmethod
    def from_metadata(cls, path: Sequence[str], metadata: HandlerMetadata) -> "RouteMatch":
        return cls(path=tuple(path), metadata=metadata)


class Route(BaseModel):
    """Resolved locator of the single handler to invoke."""

    model_config = ConfigDict(frozen=True)

    path: List[str]
    handler_key: str
    sub_state: Optional[str] = None

    @classmethod
    def from_match(cls, match: RouteMatch) -> "Route":
        return cls(
            path=list(match.path),
            handler_key=match.metadata.property_key,
            sub_state=match.sub_state,
        )


__all__ = [
    "StateStackItem",
    "StateStack",
    "RoutingContext",
    "Guard",
    "HandlerOptions",
    "HandlerMetadata",
    "RouteMatch",
    "Route",
]
