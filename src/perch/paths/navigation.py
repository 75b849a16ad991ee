"""NavigationPath: the standard mutable navigation stack."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from perch.config import StackConfig
from perch.paths.base import PathKey, StackMutable
from perch.restoration import ConverterRegistry, UriParser, deserialize_route, serialize_route
from perch.route import RouteTarget

logger = logging.getLogger("perch.paths")


class NavigationPath[T: RouteTarget](StackMutable[T]):
    """A push/pop stack for the main navigation flow and modal flows.

    Usage::

        path = NavigationPath("main")
        await path.push(Home())
        channel = await path.push(Detail(product_id=1))

        await path.pop("saved")          # True
        # ...the presentation layer calls route.on_did_pop()...
        assert await channel == "saved"
    """

    __slots__ = ()

    key = PathKey("NavigationPath")

    def __init__(
        self,
        label: str | None = None,
        stack: Iterable[T] = (),
        *,
        context: Any = None,
        config: StackConfig | None = None,
        registry: ConverterRegistry | None = None,
    ) -> None:
        super().__init__(stack, label=label, context=context, config=config, registry=registry)
        for route in self._stack:
            route.popped_by_path = False
            self._bind(route)

    @property
    def active_route(self) -> T | None:
        return self._stack[-1] if self._stack else None

    def reset(self) -> None:
        """Empty the stack, completing every route's channel silently."""
        removed, self._stack = self._stack, []
        for route in removed:
            route.complete_on_result(None, silent=True)
        logger.debug("Reset %r (%d routes cleared)", self, len(removed))
        self.notify_listeners()

    async def activate_route(self, route: T) -> None:
        """Replace the whole history with ``route``."""
        self.reset()
        await self.push(route)

    # -- Restoration --

    def serialize(self) -> list[Any]:
        """Serialize every route, bottom first. See ``perch.restoration``."""
        return [serialize_route(route, self._registry) for route in self._stack]

    def deserialize(self, data: Sequence[Any], parse_uri: UriParser | None = None) -> list[T]:
        """Rebuild routes from ``serialize()`` output without touching the stack."""
        return [deserialize_route(item, self._registry, parse_uri) for item in data]  # type: ignore[misc]

    def restore(self, routes: Iterable[T]) -> None:
        """Replace the stack with already-resolved ``routes``.

        Redirects and guards are skipped: restored routes were accepted
        before. Listeners are notified once.
        """
        removed, self._stack = self._stack, list(routes)
        for route in removed:
            route.complete_on_result(None, silent=True)
        for route in self._stack:
            route.popped_by_path = False
            self._bind(route)
        self.notify_listeners()
