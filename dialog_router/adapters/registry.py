"""In-memory component registry and handler metadata store.

Components form an ownership tree: each node owns its children by name.
Handler descriptors are kept outside the tree in a store keyed by node
identity, mirroring how declarations are collected at startup and merged
per component before routing reads them.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from dialog_router.core.exceptions import ComponentNotFoundError, DuplicateComponentError
from dialog_router.core.logging import get_logger
from dialog_router.core.models import Guard, HandlerMetadata, HandlerOptions

logger = get_logger(__name__)


class ComponentNode:
    """A named component that exclusively owns its child components."""

    __slots__ = ("name", "_children")

    def __init__(self, name: str, children: Iterable["ComponentNode"] = ()) -> None:
        if not name or "." in name:
            raise ValueError(f"invalid component name: {name!r}")
        self.name = name
        self._children: dict[str, ComponentNode] = {}
        for child in children:
            self.add_child(child)

    def add_child(self, child: "ComponentNode") -> "ComponentNode":
        """Attach ``child`` under this node and return it."""
        if child.name in self._children:
            raise DuplicateComponentError(
                f"component {self.name!r} already owns a child named {child.name!r}"
            )
        self._children[child.name] = child
        return child

    def child(self, name: str) -> Optional["ComponentNode"]:
        return self._children.get(name)

    def children(self) -> Iterator["ComponentNode"]:
        return iter(self._children.values())

    def __repr__(self) -> str:
        return f"ComponentNode({self.name!r})"


class ComponentRegistry:
    """Root of the component tree with explicit path lookup."""

    def __init__(self, roots: Iterable[ComponentNode] = ()) -> None:
        self._root = ComponentNode("__root__")
        for node in roots:
            self.register(node)

    def register(self, node: ComponentNode) -> ComponentNode:
        """Add a top-level component."""
        return self._root.add_child(node)

    def roots(self) -> Iterator[ComponentNode]:
        return self._root.children()

    def get_component(self, path: Sequence[str]) -> Optional[ComponentNode]:
        """Walk ``path`` from the root, returning ``None`` when any segment is missing."""
        if not path:
            return None
        node: Optional[ComponentNode] = self._root
        for segment in path:
            node = node.child(segment) if node is not None else None
            if node is None:
                return None
        return node

    def get_component_or_fail(self, path: Sequence[str]) -> ComponentNode:
        node = self.get_component(path)
        if node is None:
            raise ComponentNotFoundError(path)
        return node


def _dedupe(*groups: Sequence[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for group in groups:
        for name in group:
            seen.setdefault(name, None)
    return tuple(seen)


def _merge(first: HandlerMetadata, second: HandlerMetadata) -> HandlerMetadata:
    return HandlerMetadata(
        property_key=first.property_key,
        intent_names=_dedupe(first.intent_names, second.intent_names),
        global_intent_names=_dedupe(first.global_intent_names, second.global_intent_names),
        options=first.options.merged_with(second.options),
    )


class HandlerMetadataStore:
    """Collects handler declarations and serves the merged view per component."""

    def __init__(self) -> None:
        self._declarations: dict[ComponentNode, list[HandlerMetadata]] = {}

    def add(self, component: ComponentNode, metadata: HandlerMetadata) -> None:
        """Record a raw declaration for ``component``."""
        self._declarations.setdefault(component, []).append(metadata)
        logger.debug(
            "[registry] Declared handler=%s on component=%s",
            metadata.property_key,
            component.name,
        )

    def declare(
        self,
        component: ComponentNode,
        property_key: str,
        *,
        intents: Sequence[str] = (),
        global_intents: Sequence[str] = (),
        global_: bool = False,
        sub_state: Optional[str] = None,
        platforms: Sequence[str] = (),
        if_: Optional[Guard] = None,
    ) -> HandlerMetadata:
        """Declare a handler on ``component``.

        ``global_`` makes every listed intent reachable regardless of state,
        in addition to any names passed in ``global_intents``. Declaring the
        same ``property_key`` twice merges the declarations.
        """
        intent_names = tuple(intents)
        metadata = HandlerMetadata(
            property_key=property_key,
            intent_names=intent_names,
            global_intent_names=_dedupe(global_intents, intent_names if global_ else ()),
            options=HandlerOptions(sub_state=sub_state, platforms=tuple(platforms), if_=if_),
        )
        self.add(component, metadata)
        return metadata

    def get_merged_handler_metadata(self, component: ComponentNode) -> list[HandlerMetadata]:
        """Return one descriptor per property key, in first-declaration order."""
        merged: dict[str, HandlerMetadata] = {}
        for metadata in self._declarations.get(component, []):
            existing = merged.get(metadata.property_key)
            merged[metadata.property_key] = (
                _merge(existing, metadata) if existing is not None else metadata
            )
        return list(merged.values())


__all__ = ["ComponentNode", "ComponentRegistry", "HandlerMetadataStore"]
