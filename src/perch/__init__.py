"""Perch: a navigation-stack engine.

Manages ordered stacks of routes and mediates every change through
async, guardable, redirectable operations. Imperative push/pop and
declarative "here is the new list" updates share the same stack.

Basic usage::

    from perch import NavigationPath, RouteTarget

    class Detail(RouteTarget):
        def __init__(self, product_id: int) -> None:
            self.product_id = product_id

        @property
        def props(self):
            return (self.product_id,)

    path = NavigationPath("main")
    channel = await path.push(Detail(1))
    await path.pop("saved")

Declarative updates::

    from perch import DeclarativeStack

    stack = DeclarativeStack(label="checkout")
    await stack.update([Cart(), Shipping()])
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ConfigurationError",
    "DeclarativeStack",
    "Delete",
    "IndexOutOfRange",
    "IndexedStackPath",
    "Insert",
    "Keep",
    "NavigationPath",
    "PathKey",
    "PerchError",
    "RedirectLoopError",
    "RestorationError",
    "ResultChannel",
    "RouteGuard",
    "RouteNotFound",
    "RouteQueryParameters",
    "RouteRedirect",
    "RouteTarget",
    "RouteUnique",
    "StackConfig",
    "StackMutable",
    "StackPath",
    "apply_diff",
    "myers_diff",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name in ("RouteTarget", "RouteUnique"):
        from perch import route as _route

        return getattr(_route, name)

    if name == "ResultChannel":
        from perch.result import ResultChannel

        return ResultChannel

    if name == "RouteGuard":
        from perch.guard import RouteGuard

        return RouteGuard

    if name == "RouteRedirect":
        from perch.redirect import RouteRedirect

        return RouteRedirect

    if name == "RouteQueryParameters":
        from perch.query import RouteQueryParameters

        return RouteQueryParameters

    if name in ("IndexedStackPath", "NavigationPath", "PathKey", "StackMutable", "StackPath"):
        from perch import paths as _paths

        return getattr(_paths, name)

    if name in ("Delete", "Insert", "Keep", "myers_diff"):
        from perch import diff as _diff

        return getattr(_diff, name)

    if name in ("DeclarativeStack", "apply_diff"):
        from perch import reconcile as _reconcile

        return getattr(_reconcile, name)

    if name == "StackConfig":
        from perch.config import StackConfig

        return StackConfig

    if name in (
        "ConfigurationError",
        "IndexOutOfRange",
        "PerchError",
        "RedirectLoopError",
        "RestorationError",
        "RouteNotFound",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
