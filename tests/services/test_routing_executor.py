"""End-to-end tests for intent resolution through the routing executor."""

# pylint: disable=missing-function-docstring

from __future__ import annotations

import asyncio
from typing import Any, Optional

import pytest

from dialog_router.adapters.registry import ComponentNode, ComponentRegistry, HandlerMetadataStore
from dialog_router.bootstrap import build_default_service_container
from dialog_router.core.config import config
from dialog_router.core.exceptions import ComponentNotFoundError
from dialog_router.core.logging import get_session_id
from dialog_router.core.models import Route, RoutingContext, StateStackItem
from dialog_router.services import ServiceContainer
from dialog_router.services.routing_executor import RoutingExecutor


class ExplodingRegistry:
    """Registry stub that fails on any access."""

    def roots(self) -> Any:
        raise AssertionError("registry should not have been called")

    def get_component_or_fail(self, path: Any) -> Any:
        raise AssertionError("registry should not have been called")


class ExplodingStore:
    def get_merged_handler_metadata(self, component: Any) -> Any:
        raise AssertionError("store should not have been called")


def _app() -> tuple[ComponentRegistry, HandlerMetadataStore, dict[str, ComponentNode]]:
    order = ComponentNode("Order")
    main = ComponentNode("Main", [order])
    registry = ComponentRegistry([main])
    store = HandlerMetadataStore()
    store.declare(main, "unhandled", global_intents=["UNHANDLED"])
    store.declare(main, "launch", global_intents=["LAUNCH"])
    store.declare(main, "yes", intents=["YesIntent"])
    store.declare(order, "chooseSize", intents=["SizeIntent"], sub_state="Size")
    store.declare(order, "anySize", intents=["SizeIntent"])
    return registry, store, {"Main": main, "Order": order}


def _execute(
    intent: str,
    state: Optional[str] = None,
    sub_state: Optional[str] = None,
    platform: str = "web",
    app=None,
) -> Optional[Route]:
    registry, store, _ = app or _app()
    stack = [StateStackItem(component=state, sub_state=sub_state)] if state else None
    executor = RoutingExecutor(registry, store, RoutingContext(platform=platform, state=stack))
    return asyncio.run(executor.execute(intent))


def test_empty_intent_short_circuits_without_collaborator_calls():
    executor = RoutingExecutor(
        ExplodingRegistry(),
        ExplodingStore(),
        RoutingContext(platform="web", state=[StateStackItem(component="Main")]),
    )

    assert asyncio.run(executor.execute("")) is None


def test_stateless_unknown_intent_routes_to_root_unhandled():
    route = _execute("SomethingElse")

    assert route == Route(path=["Main"], handler_key="unhandled", sub_state=None)


def test_stateless_global_intent():
    assert _execute("LAUNCH") == Route(path=["Main"], handler_key="launch")


def test_stateful_ancestor_fallback():
    route = _execute("YesIntent", state="Main.Order")

    assert route == Route(path=["Main"], handler_key="yes")


def test_sub_state_falls_back_to_plain_handler_on_same_component():
    assert _execute("SizeIntent", state="Main.Order", sub_state="Toppings") == Route(
        path=["Main", "Order"], handler_key="anySize"
    )
    assert _execute("SizeIntent", state="Main.Order", sub_state="Size") == Route(
        path=["Main", "Order"], handler_key="chooseSize", sub_state="Size"
    )


def test_unknown_state_path_raises_instead_of_missing():
    with pytest.raises(ComponentNotFoundError):
        _execute("YesIntent", state="Main.Checkout")


def test_no_route_when_nothing_matches():
    registry = ComponentRegistry([ComponentNode("Main")])
    store = HandlerMetadataStore()

    assert _execute("YesIntent", app=(registry, store, {})) is None


def test_no_route_when_all_guards_reject():
    registry, store, nodes = _app()

    async def never(_ctx: RoutingContext) -> bool:
        return False

    store.declare(nodes["Order"], "guarded", intents=["CheckoutIntent"], if_=never)

    assert _execute("CheckoutIntent", state="Main.Order", app=(registry, store, nodes)) is None


def test_guard_sees_request_context():
    registry, store, nodes = _app()
    seen: list[Any] = []

    async def is_returning_user(ctx: RoutingContext) -> bool:
        seen.append(ctx.session)
        return bool(ctx.session and ctx.session.get("returning"))

    store.declare(nodes["Main"], "welcomeBack", global_intents=["LAUNCH"], if_=is_returning_user)
    context = RoutingContext(platform="web", session={"returning": True})
    executor = RoutingExecutor(registry, store, context)

    route = asyncio.run(executor.execute("LAUNCH"))

    assert route == Route(path=["Main"], handler_key="welcomeBack")
    assert seen == [{"returning": True}]


def test_resolution_is_idempotent():
    app = _app()
    first = _execute("YesIntent", state="Main.Order", app=app)
    second = _execute("YesIntent", state="Main.Order", app=app)

    assert first == second


def test_explicit_intent_map_and_unhandled_override():
    registry, store, nodes = _app()
    store.declare(nodes["Main"], "fallback", global_intents=["FALLBACK"])
    executor = RoutingExecutor(
        registry,
        store,
        RoutingContext(platform="web"),
        intent_map={"AMAZON.YesIntent": "LAUNCH"},
        unhandled_intent="FALLBACK",
    )

    assert asyncio.run(executor.execute("AMAZON.YesIntent")) == Route(
        path=["Main"], handler_key="launch"
    )
    assert asyncio.run(executor.execute("Nope")) == Route(path=["Main"], handler_key="fallback")


def test_get_route_matches_exposes_candidates():
    registry, store, nodes = _app()
    store.declare(nodes["Order"], "orderLaunch", global_intents=["LAUNCH"], platforms=["web"])
    executor = RoutingExecutor(registry, store, RoutingContext(platform="web"))

    matches = executor.get_route_matches("LAUNCH")

    assert [m.metadata.property_key for m in matches] == ["launch", "orderLaunch"]
    winner = asyncio.run(executor.find_matching_route(matches))
    assert winner is not None and winner.metadata.property_key == "orderLaunch"


def test_service_container_builds_bound_executors():
    registry, store, _ = _app()
    services = build_default_service_container(registry, store)

    assert isinstance(services, ServiceContainer)
    assert services.unhandled_intent == "UNHANDLED"
    executor = services.executor_for(RoutingContext(platform="web"))
    assert asyncio.run(executor.execute("Anything")) == Route(
        path=["Main"], handler_key="unhandled"
    )


def test_default_service_container_starts_empty():
    services = build_default_service_container()
    executor = services.executor_for(RoutingContext(platform="web"))

    assert asyncio.run(executor.execute("LAUNCH")) is None


def test_directly_built_container_falls_back_to_configured_intent_map(
    monkeypatch: pytest.MonkeyPatch,
):
    registry, store, nodes = _app()
    store.declare(nodes["Main"], "help", global_intents=["HelpIntent"])
    monkeypatch.setattr(config, "INTENT_MAP", {"AMAZON.HelpIntent": "HelpIntent"})
    services = ServiceContainer(registry, store)

    executor = services.executor_for(RoutingContext(platform="web"))

    assert asyncio.run(executor.execute("AMAZON.HelpIntent")) == Route(
        path=["Main"], handler_key="help"
    )


def test_guard_exception_propagates_out_of_execute():
    registry, store, nodes = _app()

    class SessionExpired(Exception):
        pass

    async def expired(_ctx: RoutingContext) -> bool:
        raise SessionExpired("token gone")

    store.declare(nodes["Main"], "guardedLaunch", global_intents=["LAUNCH"], if_=expired)
    executor = RoutingExecutor(registry, store, RoutingContext(platform="web"))

    with pytest.raises(SessionExpired, match="token gone"):
        asyncio.run(executor.execute("LAUNCH"))


def test_session_id_is_bound_while_resolving():
    registry, store, nodes = _app()
    seen: list[Optional[str]] = []

    async def record_session(_ctx: RoutingContext) -> bool:
        seen.append(get_session_id())
        return True

    store.declare(nodes["Main"], "tracked", global_intents=["LAUNCH"], if_=record_session)
    executor = RoutingExecutor(
        registry, store, RoutingContext(platform="web", session_id="session-42")
    )

    assert asyncio.run(executor.execute("LAUNCH")) == Route(path=["Main"], handler_key="tracked")
    assert seen == ["session-42"]
    assert get_session_id() is None
