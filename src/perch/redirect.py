"""RouteRedirect: substitute one route for another before it lands on a stack.

A redirect is resolved immediately before a route is accepted by
``push``, ``push_or_move_to_top`` or an indexed-stack switch.

``redirect()`` returns:

- ``None``: navigation was handled manually; stop and keep the *original* route
- ``self``: stop here, this route is the destination
- another route: continue resolving from that route

Every route superseded along the way has its result channel completed
silently, since it will never appear on a stack. Exceptions raised by a
hook abort the chain and propagate to the caller; routes already
superseded stay completed.

Usage::

    class Profile(RouteRedirect):
        async def redirect_with(self, app) -> RouteTarget | None:
            if not app.auth.logged_in:
                return Login(return_to=self)
            return self
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

from perch._internal.invoke import invoke
from perch.config import DEFAULT_CONFIG, StackConfig
from perch.errors import RedirectLoopError
from perch.route import RouteTarget

logger = logging.getLogger("perch.redirect")


class RouteRedirect(RouteTarget):
    """Capability: a route that may resolve to a different route."""

    def redirect(self) -> RouteTarget | None | Awaitable[RouteTarget | None]:
        """Return the route to navigate to instead of this one. May be async."""
        return self

    def redirect_with(self, context: Any) -> RouteTarget | None | Awaitable[RouteTarget | None]:
        """Redirect variant receiving the owning path's context object.

        Defaults to ``redirect()``.
        """
        return self.redirect()


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of following a redirect chain."""

    route: RouteTarget
    cancelled: bool = False  # A hook returned None
    hops: int = 0


async def follow_redirects(
    route: RouteTarget,
    context: Any = None,
    config: StackConfig = DEFAULT_CONFIG,
) -> Resolution:
    """Follow ``route``'s redirect chain and report where it ended.

    On cancellation the returned route is the *original* one. Raises
    ``RedirectLoopError`` when the chain is longer than
    ``config.max_redirects``.
    """
    target = route
    hops = 0
    while True:
        match target:
            case RouteRedirect():
                hook = target.redirect if context is None else target.redirect_with
                args = () if context is None else (context,)
                new_target = await invoke(hook, *args)
            case _:
                break

        if new_target is None:
            logger.debug("Redirect from %r cancelled by %r", route, target)
            return Resolution(route, cancelled=True, hops=hops)
        if new_target is target:
            break

        hops += 1
        if config.max_redirects is not None and hops > config.max_redirects:
            raise RedirectLoopError(origin=route, hops=config.max_redirects)
        logger.debug("Redirect %r -> %r", target, new_target)
        # Superseded routes never land on a stack; members of an indexed
        # stack keep their binding.
        target.result_channel.complete(None, silent=True)
        target = new_target

    return Resolution(target, hops=hops)


async def resolve_redirect(
    route: RouteTarget,
    context: Any = None,
    config: StackConfig = DEFAULT_CONFIG,
) -> RouteTarget:
    """Resolve ``route`` to the route that should actually be accepted.

    A cancelled chain resolves to ``route`` itself, channel untouched.
    """
    return (await follow_redirects(route, context, config)).route
