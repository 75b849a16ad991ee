"""Perch exception hierarchy.

Shared across paths, redirects, restoration and the reconciler so every
module raises and catches the same types.

Guard rejection and popping an empty stack are *not* errors: ``pop()``
reports them as ``False`` and ``None``. Exceptions raised by user
``redirect()`` or ``pop_guard()`` hooks propagate unchanged.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when a path or config is constructed with invalid values.

    Also raised by ``apply_diff`` in strict mode when the live stack no
    longer matches the list the diff was computed from.
    """


class IndexOutOfRange(PerchError, IndexError):  # noqa: N818, mirrors IndexError
    """An indexed stack was asked for an index outside ``[0, length)``."""

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"Index {index} out of range for stack of length {length}")


class RouteNotFound(PerchError, LookupError):  # noqa: N818, mirrors LookupError
    """A route is not a member of a fixed indexed stack."""

    def __init__(self, route: object, label: str | None = None) -> None:
        self.route = route
        where = f" {label!r}" if label else ""
        super().__init__(f"Route {route!r} is not a member of indexed stack{where}")


@dataclass(frozen=True, slots=True)
class RedirectLoopError(PerchError):
    """A redirect chain did not settle within ``StackConfig.max_redirects`` hops."""

    origin: object
    hops: int

    def __str__(self) -> str:
        return f"Redirect chain starting at {self.origin!r} exceeded {self.hops} hops"


class RestorationError(PerchError):
    """Serialized route data could not be turned back into a route."""
