"""Tests for perch.route: value identity, result channel, pop finalization."""

from dataclasses import dataclass

import pytest

from perch.paths import NavigationPath
from perch.route import RouteTarget, RouteUnique


class Home(RouteTarget):
    pass


class Settings(RouteTarget):
    pass


class Product(RouteTarget):
    def __init__(self, product_id: str, tags: list[str] | None = None) -> None:
        self.product_id = product_id
        self.tags = tags or []

    @property
    def props(self) -> tuple[object, ...]:
        return (self.product_id, self.tags)


@dataclass(eq=False)
class Article(RouteTarget):
    slug: str

    @property
    def props(self) -> tuple[object, ...]:
        return (self.slug,)


class TestEquality:
    def test_same_type_same_props(self) -> None:
        assert Product("42") == Product("42")

    def test_different_props(self) -> None:
        assert Product("42") != Product("43")

    def test_different_types_without_props(self) -> None:
        assert Home() != Settings()
        assert Home() == Home()

    def test_subclass_is_not_equal(self) -> None:
        class SpecialProduct(Product):
            pass

        assert Product("1") != SpecialProduct("1")

    def test_collections_in_props_compare_by_value(self) -> None:
        assert Product("1", ["a", "b"]) == Product("1", ["a", "b"])
        assert Product("1", ["a"]) != Product("1", ["b"])

    def test_non_route_comparison(self) -> None:
        assert Home() != "Home"
        assert Home().__eq__("Home") is NotImplemented

    def test_framework_state_does_not_affect_equality(self) -> None:
        bound = Product("1")
        NavigationPath("main", [bound])
        bound.result_channel.complete("x")

        assert bound == Product("1")

    def test_dataclass_route(self) -> None:
        assert Article("intro") == Article("intro")
        assert Article("intro") != Article("outro")


class TestHash:
    def test_unhashable_props_still_hash(self) -> None:
        route = Product("1", ["a"])
        assert isinstance(hash(route), int)

    def test_hash_stable_while_state_unchanged(self) -> None:
        route = Product("1")
        assert hash(route) == hash(route)

    def test_distinct_live_instances_hash_apart(self) -> None:
        first, second = Product("1"), Product("1")
        assert first == second
        assert hash(first) != hash(second)


class TestRepr:
    def test_without_props(self) -> None:
        assert repr(Home()) == "Home"

    def test_with_props(self) -> None:
        assert repr(Product("7")) == "Product[7,[]]"

    def test_multiple_props(self) -> None:
        assert repr(Product("7", ["x"])) == "Product[7,['x']]"


class TestResultChannel:
    def test_channel_is_created_once(self) -> None:
        route = Home()
        assert route.result_channel is route.result_channel

    def test_complete_on_result(self) -> None:
        route = Home()
        NavigationPath("main", [route])

        route.complete_on_result("done")

        assert route.result_channel.result() == "done"
        assert route.result_value == "done"
        assert route.path is None

    def test_complete_on_result_twice_keeps_first(self) -> None:
        route = Home()
        route.complete_on_result("first")
        route.complete_on_result("second")

        assert route.result_channel.result() == "first"

    def test_silent_completion_clears_value(self) -> None:
        route = Home()
        route.complete_on_result("x", silent=True)

        assert route.result_channel.silent
        assert route.result_value is None


class TestOnDidPop:
    @pytest.mark.anyio
    async def test_after_pop_completes_with_stored_value(self) -> None:
        path = NavigationPath("main")
        route = Home()
        channel = await path.push(route)
        await path.pop("saved")

        route.on_did_pop()

        assert channel.result() == "saved"
        assert route.path is None

    @pytest.mark.anyio
    async def test_explicit_result_wins(self) -> None:
        path = NavigationPath("main")
        route = Home()
        await path.push(route)
        await path.pop("stored")

        route.on_did_pop("explicit")

        assert route.result_channel.result() == "explicit"

    @pytest.mark.anyio
    async def test_platform_removal_takes_route_off_the_stack(self) -> None:
        path = NavigationPath("main")
        home, product = Home(), Product("1")
        await path.push(home)
        await path.push(product)
        calls: list[None] = []
        path.add_listener(lambda: calls.append(None))

        product.on_did_pop("back")

        assert path.stack == (home,)
        assert product.result_channel.result() == "back"
        assert calls == [None]

    def test_unbound_route_just_completes(self) -> None:
        route = Home()
        route.on_did_pop()

        assert route.result_channel.done
        assert route.result_channel.result() is None


class TestRouteUnique:
    def test_to_uri_must_be_overridden(self) -> None:
        with pytest.raises(NotImplementedError):
            RouteUnique().to_uri()
