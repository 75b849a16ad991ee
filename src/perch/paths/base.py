"""StackPath and the StackMutable operations.

A ``StackPath`` owns an ordered sequence of routes. Index 0 is the bottom
of history; the last index is the top. Nothing outside the path mutates
the sequence; readers get an immutable ``stack`` snapshot.

Suspension points: ``push``, ``push_or_move_to_top`` and ``pop`` may
await a redirect chain or a guard. Until that await settles the stack is
untouched, so overlapping calls each see the state as of their own start.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any, ClassVar, NewType

from perch.config import DEFAULT_CONFIG, StackConfig
from perch.guard import check_guard
from perch.listenable import ChangeNotifier
from perch.redirect import resolve_redirect
from perch.restoration import ConverterRegistry
from perch.result import ResultChannel
from perch.route import RouteTarget

logger = logging.getLogger("perch.paths")

PathKey = NewType("PathKey", str)
"""Identifies a ``StackPath`` subclass, e.g. for presentation-layer builder lookup."""


class StackPath[T: RouteTarget](ChangeNotifier):
    """Base container: ordered routes, an active route, change notification.

    Subclasses define ``key``, ``active_route``, ``reset()`` and
    ``activate_route()``.
    """

    __slots__ = ("_config", "_context", "_debug_label", "_registry", "_stack")

    key: ClassVar[PathKey]

    def __init__(
        self,
        stack: Iterable[T] = (),
        *,
        label: str | None = None,
        context: Any = None,
        config: StackConfig | None = None,
        registry: ConverterRegistry | None = None,
    ) -> None:
        super().__init__()
        self._stack: list[T] = list(stack)
        self._debug_label = label
        self._context = context
        self._config = config or DEFAULT_CONFIG
        self._registry = registry

    # -- Read-only state --

    @property
    def debug_label(self) -> str | None:
        """Free-form label with no behavioural effect."""
        return self._debug_label

    @property
    def context(self) -> Any:
        """Object handed to ``pop_guard_with`` / ``redirect_with``. None means the plain hooks."""
        return self._context

    @property
    def config(self) -> StackConfig:
        return self._config

    @property
    def registry(self) -> ConverterRegistry | None:
        return self._registry

    @property
    def stack(self) -> tuple[T, ...]:
        """Snapshot of the routes, bottom first."""
        return tuple(self._stack)

    @property
    def path_key(self) -> PathKey:
        return self.key

    @property
    def active_route(self) -> T | None:
        """The route on top (mutable paths) or at the active index (indexed paths)."""
        raise NotImplementedError

    def holds(self, route: RouteTarget) -> bool:
        """True if this exact instance is in the stack (identity, not equality)."""
        return self._find_instance(route) is not None

    def __len__(self) -> int:
        return len(self._stack)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._stack))

    def __contains__(self, route: object) -> bool:
        return route in self._stack

    # -- Lifecycle --

    def reset(self) -> None:
        """Return to the initial state. Guards are not consulted."""
        raise NotImplementedError

    async def activate_route(self, route: T) -> Any:
        """Make ``route`` the active route, in the way this path type does it."""
        raise NotImplementedError

    # -- Internals --

    def _bind(self, route: T) -> None:
        route._path = self

    def _find(self, route: RouteTarget) -> int | None:
        """Index of the first value-equal route, or None."""
        for i, candidate in enumerate(self._stack):
            if candidate == route:
                return i
        return None

    def _find_instance(self, route: RouteTarget) -> int | None:
        for i, candidate in enumerate(self._stack):
            if candidate is route:
                return i
        return None

    def __repr__(self) -> str:
        label = self._debug_label or hex(id(self))
        return f"{label} [{type(self).__name__.removesuffix('Path')}]"


class StackMutable[T: RouteTarget](StackPath[T]):
    """A ``StackPath`` with push/pop operations.

    Subclass it to get standard push/pop navigation::

        class ModalPath[T: RouteTarget](StackMutable[T]):
            key = PathKey("ModalPath")
            ...
    """

    __slots__ = ()

    async def push(self, route: T) -> ResultChannel:
        """Push ``route`` (after following redirects) and return its result channel.

        Await the channel to receive the value the route is popped with.
        Exceptions from redirect hooks propagate; the stack is untouched.
        """
        target = await resolve_redirect(route, self._context, self._config)
        return self._accept(target, len(self._stack))

    async def insert(self, index: int, route: T) -> ResultChannel:
        """Like ``push``, but place the route at ``index`` (clamped like ``list.insert``)."""
        target = await resolve_redirect(route, self._context, self._config)
        return self._accept(target, index)

    async def push_or_move_to_top(self, route: T) -> None:
        """Push ``route``, or move an equal route already in the stack to the top.

        - Equal route already on top: nothing moves. The incoming route's
          channel becomes the top route's channel, so both observe the same
          completion.
        - Equal route elsewhere: it is removed, its channel completed
          silently, and the incoming route is pushed.
        - Otherwise: a plain push.
        """
        target = await resolve_redirect(route, self._context, self._config)
        target.popped_by_path = False
        index = self._find(target)
        if index is not None and index == len(self._stack) - 1:
            top = self._stack[index]
            if top is not target:
                target._channel = top.result_channel
            return

        if index is not None:
            moved = self._stack.pop(index)
            moved.complete_on_result(None, silent=True)
        self._accept(target, len(self._stack))

    async def pop(self, result: Any = None) -> bool | None:
        """Pop the top route, consulting its guard.

        Returns:
            ``True`` if the route was removed, ``False`` if its guard
            refused (or the route left the stack while the guard ran),
            ``None`` if the stack was empty.

        The route's channel is *not* completed here. ``result`` is stored
        on the route; the presentation layer completes the channel with it
        via ``RouteTarget.on_did_pop()`` once the route is gone from screen.
        """
        if not self._stack:
            return None
        top = self._stack[-1]
        if not await check_guard(top, self._context):
            logger.debug("Pop of %r rejected by guard", top)
            return False

        index = self._find_instance(top)
        if index is None:
            logger.debug("Pop of %r is stale: route already left %r", top, self)
            return False

        del self._stack[index]
        top.popped_by_path = True
        top._result_value = result
        self.notify_listeners()
        return True

    def remove(self, route: T) -> None:
        """Remove ``route`` from any position, without consulting guards.

        The route's owning path is cleared. Its result channel is left open
        unless ``StackConfig.complete_on_remove`` is set. Listeners are
        notified only if something was removed.
        """
        index = self._find_instance(route)
        if index is None:
            index = self._find(route)
        if index is None:
            return
        removed = self._stack.pop(index)
        removed._path = None
        if self._config.complete_on_remove:
            removed.complete_on_result(None, silent=True)
        self.notify_listeners()

    def _accept(self, target: T, index: int) -> ResultChannel:
        target.popped_by_path = False
        self._bind(target)
        self._stack.insert(index, target)
        self.notify_listeners()
        return target.result_channel
