"""RouteGuard: veto removal of a route.

Guards are consulted before a route is involuntarily removed:

- ``NavigationPath.pop()`` when the route is on top
- ``IndexedStackPath.go_to_indexed()`` when switching away from it

They are *not* consulted by ``remove()``, ``reset()`` or the reconciler.

Usage::

    class EditForm(RouteGuard):
        dirty = False

        async def pop_guard(self) -> bool:
            if not self.dirty:
                return True
            return await confirm("Discard changes?")
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any

from perch._internal.invoke import invoke
from perch.route import RouteTarget


class RouteGuard(RouteTarget):
    """Capability: a route that may refuse to be popped or deactivated."""

    def pop_guard(self) -> bool | Awaitable[bool]:
        """Return True to allow the transition, False to cancel it.

        May be sync or async. Keep side effects to showing UI; the actual
        removal happens after this returns.
        """
        return True

    def pop_guard_with(self, context: Any) -> bool | Awaitable[bool]:
        """Guard variant receiving the owning path's context object.

        Override when the decision depends on application state reachable
        from the context. Defaults to ``pop_guard()``.
        """
        return self.pop_guard()


async def check_guard(route: RouteTarget, context: Any = None) -> bool:
    """Run ``route``'s guard, if it has one, and return whether it allows the transition.

    Routes without the guard capability always allow it.
    """
    match route:
        case RouteGuard():
            hook = route.pop_guard if context is None else route.pop_guard_with
            args = () if context is None else (context,)
            return bool(await invoke(hook, *args))
        case _:
            return True
