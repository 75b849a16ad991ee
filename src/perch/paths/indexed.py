"""IndexedStackPath: a fixed set of routes with one active index (tabs)."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from perch.config import StackConfig
from perch.errors import ConfigurationError, IndexOutOfRange, RouteNotFound
from perch.guard import check_guard
from perch.paths.base import PathKey, StackPath
from perch.query import RouteQueryParameters
from perch.redirect import follow_redirects
from perch.route import RouteTarget

logger = logging.getLogger("perch.paths")


class IndexedStackPath[T: RouteTarget](StackPath[T]):
    """Fixed-membership path switching between routes by index.

    Membership never changes after construction. Members are never
    popped individually, so their result channels are completed silently
    up front.

    Usage::

        tabs = IndexedStackPath([Feed(), Search(), Profile()], label="tabs")
        await tabs.go_to_indexed(2)
        await tabs.activate_route(Search())
    """

    __slots__ = ("_active_index",)

    key = PathKey("IndexedStackPath")

    def __init__(
        self,
        stack: Iterable[T],
        *,
        label: str | None = None,
        context: Any = None,
        config: StackConfig | None = None,
    ) -> None:
        super().__init__(stack, label=label, context=context, config=config)
        if not self._stack:
            msg = "IndexedStackPath needs at least one route."
            raise ConfigurationError(msg)
        if len({id(route) for route in self._stack}) != len(self._stack):
            msg = "IndexedStackPath members must be distinct instances."
            raise ConfigurationError(msg)
        for route in self._stack:
            route.complete_on_result(None, silent=True)
            self._bind(route)
        self._active_index = 0

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def active_route(self) -> T:
        return self._stack[self._active_index]

    async def go_to_indexed(self, index: int) -> bool:
        """Switch to the route at ``index``.

        The active route's guard is consulted first, then the target's
        redirect chain is followed. Returns ``False`` with no state change
        if the guard refuses, a redirect cancels, or the redirect lands on
        a route that is not a member. Raises ``IndexOutOfRange`` for
        indices outside ``[0, len)``.
        """
        if not 0 <= index < len(self._stack):
            raise IndexOutOfRange(index, len(self._stack))
        if index == self._active_index:
            return True

        current = self._stack[self._active_index]
        if not await check_guard(current, self._context):
            logger.debug("Switch from %r to index %d rejected by guard", current, index)
            return False

        resolution = await follow_redirects(self._stack[index], self._context, self._config)
        if resolution.cancelled:
            return False
        new_index = self._find(resolution.route)
        if new_index is None:
            logger.debug("Redirect from index %d left %r: %r", index, self, resolution.route)
            return False

        self._active_index = new_index
        self.notify_listeners()
        return True

    async def activate_route(self, route: T) -> bool:
        """Switch to the member equal to ``route``.

        If ``route`` equals the active member, nothing switches; when both
        carry query parameters the incoming queries replace the member's.
        Raises ``RouteNotFound`` if no member equals ``route``.
        """
        index = self._find(route)
        # The incoming instance never joins the stack.
        if not any(member is route for member in self._stack):
            route.complete_on_result(None, silent=True)

        if index == self._active_index:
            current = self._stack[self._active_index]
            match current, route:
                case RouteQueryParameters(), RouteQueryParameters():
                    current.queries = route.queries
            return True
        if index is None:
            raise RouteNotFound(route, self._debug_label)
        return await self.go_to_indexed(index)

    def reset(self) -> None:
        """Return to index 0. Members' channels are already complete."""
        self._active_index = 0
        self.notify_listeners()

    # -- Restoration --

    def serialize(self) -> int:
        return self._active_index

    def restore(self, index: int) -> None:
        """Set the active index directly, skipping guards and redirects."""
        if not 0 <= index < len(self._stack):
            raise IndexOutOfRange(index, len(self._stack))
        self._active_index = index
        self.notify_listeners()
