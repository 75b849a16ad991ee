"""Tests for perch.paths.navigation: push and pop on a mutable stack."""

import anyio
import pytest

from perch.config import StackConfig
from perch.guard import RouteGuard
from perch.paths import NavigationPath
from perch.redirect import RouteRedirect
from perch.route import RouteTarget
from perch.testing import Presenter, assert_stack


class Page(RouteTarget):
    def __init__(self, name: str) -> None:
        self.name = name

    @property
    def props(self) -> tuple[object, ...]:
        return (self.name,)


class Home(RouteTarget):
    pass


class Detail(RouteTarget):
    def __init__(self, id: int) -> None:
        self.id = id

    @property
    def props(self) -> tuple[object, ...]:
        return (self.id,)


class Locked(RouteGuard, Page):
    def pop_guard(self) -> bool:
        return False


class Gate(RouteGuard, Page):
    """Guard that waits for the test to open it."""

    def __init__(self, name: str, allow: bool = True) -> None:
        super().__init__(name)
        self.allow = allow
        self.opened = anyio.Event()
        self.calls = 0

    async def pop_guard(self) -> bool:
        self.calls += 1
        await self.opened.wait()
        return self.allow


class Alias(RouteRedirect, Page):
    def __init__(self, name: str, to: RouteTarget | None) -> None:
        super().__init__(name)
        self.to = to

    def redirect(self) -> RouteTarget | None:
        return self.to


class TestPush:
    @pytest.mark.anyio
    async def test_push_appends_in_order(self) -> None:
        path = NavigationPath("main")
        a, b = Page("a"), Page("b")
        await path.push(a)
        await path.push(b)

        assert path.stack == (a, b)
        assert path.active_route is b

    @pytest.mark.anyio
    async def test_push_binds_route_and_returns_pending_channel(self) -> None:
        path = NavigationPath("main")
        route = Page("a")
        channel = await path.push(route)

        assert channel is route.result_channel
        assert not channel.done
        assert route.path is path
        assert route.popped_by_path is False

    @pytest.mark.anyio
    async def test_push_notifies_once(self) -> None:
        path = NavigationPath("main")
        calls: list[int] = []
        path.add_listener(lambda: calls.append(len(path)))

        await path.push(Page("a"))

        assert calls == [1]

    @pytest.mark.anyio
    async def test_push_follows_redirect(self) -> None:
        path = NavigationPath("main")
        target = Page("target")
        alias = Alias("old", target)

        channel = await path.push(alias)

        assert path.stack == (target,)
        assert channel is target.result_channel
        assert alias.result_channel.silent

    @pytest.mark.anyio
    async def test_redirect_error_leaves_stack_untouched(self) -> None:
        class Broken(RouteRedirect):
            def redirect(self) -> RouteTarget | None:
                raise RuntimeError("backend down")

        path = NavigationPath("main", [Page("a")])
        calls: list[None] = []
        path.add_listener(lambda: calls.append(None))

        with pytest.raises(RuntimeError, match="backend down"):
            await path.push(Broken())

        assert path.stack == (Page("a"),)
        assert calls == []

    @pytest.mark.anyio
    async def test_insert_places_route_at_index(self) -> None:
        path = NavigationPath("main", [Page("a"), Page("c")])
        await path.insert(1, Page("b"))

        assert_stack(path, [Page("a"), Page("b"), Page("c")])

    def test_seed_routes_are_bound(self) -> None:
        a = Page("a")
        path = NavigationPath("main", [a])

        assert a.path is path
        assert path.active_route is a


class TestPop:
    @pytest.mark.anyio
    async def test_pop_empty_returns_none(self) -> None:
        path = NavigationPath("main")
        assert await path.pop() is None

    @pytest.mark.anyio
    async def test_pop_without_guard(self) -> None:
        path = NavigationPath("main", [Page("a"), Page("b")])
        assert await path.pop() is True
        assert_stack(path, [Page("a")])

    @pytest.mark.anyio
    async def test_pop_records_result_but_leaves_channel_open(self) -> None:
        path = NavigationPath("main")
        route = Page("a")
        channel = await path.push(route)

        assert await path.pop("saved") is True

        assert route.popped_by_path is True
        assert route.result_value == "saved"
        assert not channel.done

    @pytest.mark.anyio
    async def test_guard_rejection_is_a_no_op(self) -> None:
        a, locked = Page("a"), Locked("locked")
        path = NavigationPath("main", [a, locked])
        calls: list[None] = []
        path.add_listener(lambda: calls.append(None))

        assert await path.pop() is False

        assert path.stack == (a, locked)
        assert path.stack[1] is locked
        assert not locked.result_channel.done
        assert calls == []

    @pytest.mark.anyio
    async def test_async_guard_allows(self) -> None:
        gate = Gate("gate")
        path = NavigationPath("main", [Page("a"), gate])
        gate.opened.set()

        assert await path.pop() is True
        assert_stack(path, [Page("a")])

    @pytest.mark.anyio
    async def test_stack_unchanged_while_guard_pending(self) -> None:
        gate = Gate("gate")
        path = NavigationPath("main", [Page("a"), gate])
        results: list[bool | None] = []

        async def do_pop() -> None:
            results.append(await path.pop())

        async with anyio.create_task_group() as tg:
            tg.start_soon(do_pop)
            await anyio.wait_all_tasks_blocked()
            assert path.stack == (Page("a"), gate)
            gate.opened.set()

        assert results == [True]
        assert_stack(path, [Page("a")])

    @pytest.mark.anyio
    async def test_concurrent_pops_evaluate_guard_independently(self) -> None:
        gate = Gate("gate")
        a = Page("a")
        path = NavigationPath("main", [a, gate])
        results: list[bool | None] = []

        async def do_pop() -> None:
            results.append(await path.pop())

        async with anyio.create_task_group() as tg:
            tg.start_soon(do_pop)
            tg.start_soon(do_pop)
            await anyio.wait_all_tasks_blocked()
            assert gate.calls == 2
            gate.opened.set()

        # The second pop's route already left: stale, nothing else removed.
        assert sorted(results, key=str) == [False, True]
        assert path.stack == (a,)

    @pytest.mark.anyio
    async def test_guard_error_propagates_and_keeps_stack(self) -> None:
        class Failing(RouteGuard, Page):
            async def pop_guard(self) -> bool:
                raise ValueError("guard exploded")

        failing = Failing("failing")
        path = NavigationPath("main", [Page("a"), failing])
        calls: list[None] = []
        path.add_listener(lambda: calls.append(None))

        with pytest.raises(ValueError, match="guard exploded"):
            await path.pop("ignored")

        assert path.stack == (Page("a"), failing)
        assert failing.popped_by_path is False
        assert failing.result_value is None
        assert not failing.result_channel.done
        assert calls == []


class TestPushOrMoveToTop:
    @pytest.mark.anyio
    async def test_on_empty_stack_pushes(self) -> None:
        path = NavigationPath("main")
        route = Page("a")
        await path.push_or_move_to_top(route)

        assert path.stack == (route,)
        assert not route.result_channel.done

    @pytest.mark.anyio
    async def test_already_on_top_keeps_order_and_shares_channel(self) -> None:
        a = Page("a")
        path = NavigationPath("main", [Page("x"), a])
        again = Page("a")

        await path.push_or_move_to_top(again)

        assert len(path) == 2
        assert path.stack[-1] is a
        assert again.result_channel is a.result_channel

    @pytest.mark.anyio
    async def test_moves_existing_route_to_top(self) -> None:
        a, b, c = Page("a"), Page("b"), Page("c")
        path = NavigationPath("main", [a, b, c])
        fresh = Page("a")

        await path.push_or_move_to_top(fresh)

        assert path.stack == (b, c, fresh)
        assert path.stack[-1] is fresh
        assert a.result_channel.done
        assert a.result_channel.silent
        assert a.path is None
        assert not fresh.result_channel.done

    @pytest.mark.anyio
    async def test_repeated_moves(self) -> None:
        path = NavigationPath("main")
        for name in "abc":
            await path.push(Page(name))

        await path.push_or_move_to_top(Page("a"))
        assert [r.name for r in path.stack] == ["b", "c", "a"]

        await path.push_or_move_to_top(Page("b"))
        assert [r.name for r in path.stack] == ["c", "a", "b"]

    @pytest.mark.anyio
    async def test_redirect_to_existing_route_moves_it(self) -> None:
        a = Page("a")
        path = NavigationPath("main", [a, Page("b")])
        alias = Alias("alias", Page("a"))

        await path.push_or_move_to_top(alias)

        assert [r.name for r in path.stack] == ["b", "a"]
        assert alias.result_channel.silent
        assert a.result_channel.silent


class TestRemove:
    @pytest.mark.anyio
    async def test_remove_from_middle_without_guard(self) -> None:
        locked = Locked("locked")
        path = NavigationPath("main", [Page("a"), locked, Page("c")])

        path.remove(locked)

        assert_stack(path, [Page("a"), Page("c")])
        assert locked.path is None

    def test_remove_leaves_channel_pending(self) -> None:
        route = Page("a")
        path = NavigationPath("main", [route])

        path.remove(route)

        assert len(path) == 0
        assert not route.result_channel.done

    def test_remove_can_complete_channel_when_configured(self) -> None:
        route = Page("a")
        path = NavigationPath("main", [route], config=StackConfig(complete_on_remove=True))

        path.remove(route)

        assert route.result_channel.silent

    def test_remove_missing_route_does_not_notify(self) -> None:
        path = NavigationPath("main", [Page("a")])
        calls: list[None] = []
        path.add_listener(lambda: calls.append(None))

        path.remove(Page("zzz"))

        assert calls == []
        assert len(path) == 1


class TestReset:
    @pytest.mark.anyio
    async def test_reset_completes_every_channel_silently(self) -> None:
        path = NavigationPath("main")
        routes = [Page(str(i)) for i in range(50)]
        for route in routes:
            await path.push(route)

        path.reset()

        assert path.stack == ()
        for route in routes:
            assert route.result_channel.silent
            assert route.path is None

    @pytest.mark.anyio
    async def test_activate_route_replaces_history(self) -> None:
        old = Page("old")
        path = NavigationPath("main", [old])

        await path.activate_route(Page("new"))

        assert_stack(path, [Page("new")])
        assert old.result_channel.silent


class TestEndToEnd:
    @pytest.mark.anyio
    async def test_push_pop_result_reaches_caller(self) -> None:
        path = NavigationPath("main")
        with Presenter(path):
            await path.push(Home())
            channel = await path.push(Detail(id=1))

            assert await path.pop("saved") is True
            assert_stack(path, [Home()])

            assert await channel.wait(timeout=1) == "saved"

    @pytest.mark.anyio
    async def test_caller_awaiting_before_pop(self) -> None:
        path = NavigationPath("main")
        received: list[object] = []

        with Presenter(path):
            channel = await path.push(Detail(id=7))

            async def wait_for_result() -> None:
                received.append(await channel)

            async with anyio.create_task_group() as tg:
                tg.start_soon(wait_for_result)
                await anyio.wait_all_tasks_blocked()
                assert received == []
                await path.pop(42)

        assert received == [42]
