"""RouteTarget: the base class for every navigable entry.

A route is an opaque, caller-defined value. Perch only needs three things
from it: value identity (``props``), a result channel, and an owning path.

Route lifecycle::

    1. CREATION        route instance constructed by the caller
    2. REDIRECT CHECK  RouteRedirect.redirect() followed if applicable
    3. PATH BINDING    route appended to a path, owning path set
    4. ACTIVE          route is the top (or active index) of its path
    5. POP REQUEST     pop() consults RouteGuard.pop_guard()
    6. POP COMPLETION  presentation layer calls on_did_pop(), channel completes
    7. CLEANUP         owning path cleared

Equality::

    class Product(RouteTarget):
        def __init__(self, product_id: str) -> None:
            self.product_id = product_id

        @property
        def props(self) -> tuple[object, ...]:
            return (self.product_id,)

    Product("42") == Product("42")   # True: same type, same props

Dataclass routes work too, but must pass ``eq=False`` so the generated
``__eq__`` does not replace the one defined here. Pass ``repr=False``
as well to keep the ``Name[props]`` repr.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from perch._internal.identity import format_props, props_hash
from perch.result import ResultChannel

if TYPE_CHECKING:
    from perch.paths.base import StackPath


class RouteTarget:
    """Base class for navigation routes.

    Two routes are equal when they are the same concrete type and their
    ``props`` are equal. Framework state (owning path, result channel)
    never takes part in equality, but it does feed ``__hash__`` so that
    distinct live instances of equal routes hash apart. Because the
    owning path changes as a route joins and leaves stacks, do not keep
    routes in sets or as dict keys across stack mutations.
    """

    # Framework state. Class-level defaults so subclasses (including
    # dataclasses) don't need to call super().__init__().
    _path: StackPath[Any] | None = None
    _channel: ResultChannel | None = None
    _result_value: Any = None
    popped_by_path: bool = False
    """True when the route left its stack through ``pop()`` rather than the platform."""

    @property
    def props(self) -> tuple[Any, ...]:
        """Identity properties. Override to include route parameters.

        Leave out mutable, transient state such as live query parameters.
        """
        return ()

    # -- Framework state --

    @property
    def path(self) -> StackPath[Any] | None:
        """The path currently holding this route, if any."""
        return self._path

    @property
    def result_channel(self) -> ResultChannel:
        """The route's result channel. Created on first access."""
        channel = self._channel
        if channel is None:
            channel = self._channel = ResultChannel()
        return channel

    @property
    def result_value(self) -> Any:
        """The value stored by ``pop(result)``, awaiting ``on_did_pop``."""
        return self._result_value

    def complete_on_result(self, result: Any = None, *, silent: bool = False) -> None:
        """Complete the result channel and detach from the owning path.

        Completing an already-completed channel changes nothing.
        """
        self.result_channel.complete(result, silent=silent)
        self._result_value = None if silent else result
        self._path = None

    def on_did_pop(self, result: Any = None) -> None:
        """Finalize a pop once the presentation layer has removed the route.

        If the platform removed the route (back gesture, system dismiss)
        without going through ``pop()``, the route is first removed from
        its mutable path, guard-free. The channel then completes with
        ``result``, or with the value ``pop()`` stored when ``result`` is None.
        """
        from perch.paths.base import StackMutable

        path = self._path
        if not self.popped_by_path and isinstance(path, StackMutable) and path.holds(self):
            path.remove(self)
        self.complete_on_result(self._result_value if result is None else result)

    # -- Value identity --

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, RouteTarget):
            return NotImplemented
        return type(self) is type(other) and tuple(self.props) == tuple(other.props)

    def __hash__(self) -> int:
        return hash((
            type(self),
            props_hash(tuple(self.props)),
            id(self._path),
            id(self.result_channel),
        ))

    def __repr__(self) -> str:
        return format_props(type(self).__name__, tuple(self.props))


class RouteUnique(RouteTarget):
    """A route addressable by a URI.

    The URI is what restoration stores for this route; turning it back
    into a route is the routing layer's job (a ``parse_uri`` callable).
    """

    def to_uri(self) -> str:
        raise NotImplementedError
