"""Tests for the in-memory component registry and handler metadata store."""

from __future__ import annotations

import pytest

from dialog_router.adapters.registry import ComponentNode, ComponentRegistry, HandlerMetadataStore
from dialog_router.core.exceptions import ComponentNotFoundError, DuplicateComponentError


async def _guard(_ctx) -> bool:
    return True


def test_get_component_or_fail_walks_explicit_paths() -> None:
    order = ComponentNode("Order")
    registry = ComponentRegistry([ComponentNode("Main", [order]), ComponentNode("Help")])

    assert registry.get_component_or_fail(["Main", "Order"]) is order
    assert [node.name for node in registry.roots()] == ["Main", "Help"]


@pytest.mark.parametrize("path", [["Missing"], ["Main", "Missing"], ["Order"], [""], []])
def test_get_component_or_fail_raises_for_unknown_paths(path: list[str]) -> None:
    registry = ComponentRegistry([ComponentNode("Main", [ComponentNode("Order")])])

    assert registry.get_component(path) is None
    with pytest.raises(ComponentNotFoundError) as excinfo:
        registry.get_component_or_fail(path)
    assert excinfo.value.path == tuple(path)


def test_duplicate_child_names_are_rejected() -> None:
    main = ComponentNode("Main", [ComponentNode("Order")])
    with pytest.raises(DuplicateComponentError):
        main.add_child(ComponentNode("Order"))

    registry = ComponentRegistry([ComponentNode("Main")])
    with pytest.raises(DuplicateComponentError):
        registry.register(ComponentNode("Main"))


@pytest.mark.parametrize("name", ["", "Main.Order"])
def test_component_names_cannot_be_empty_or_dotted(name: str) -> None:
    with pytest.raises(ValueError):
        ComponentNode(name)


def test_store_merges_declarations_per_property_key() -> None:
    main = ComponentNode("Main")
    store = HandlerMetadataStore()
    store.declare(main, "start", intents=["LAUNCH"])
    store.declare(main, "help", intents=["HelpIntent"], global_=True)
    store.declare(main, "start", intents=["StartIntent", "LAUNCH"], platforms=["alexa"], if_=_guard)

    merged = store.get_merged_handler_metadata(main)

    assert [metadata.property_key for metadata in merged] == ["start", "help"]
    start, help_ = merged
    assert start.intent_names == ("LAUNCH", "StartIntent")
    assert start.options.platforms == ("alexa",)
    assert start.options.if_ is _guard
    assert help_.global_intent_names == ("HelpIntent",)


def test_store_is_keyed_by_component_identity() -> None:
    first = ComponentNode("Main")
    second = ComponentNode("Main")
    store = HandlerMetadataStore()
    store.declare(first, "start", intents=["LAUNCH"])

    assert store.get_merged_handler_metadata(second) == []
    assert len(store.get_merged_handler_metadata(first)) == 1
