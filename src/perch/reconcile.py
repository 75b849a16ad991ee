"""Apply a diff script to a live NavigationPath.

The reconciler drives a ``NavigationPath`` declaratively: the caller
states the full list of routes it wants, and only the difference from
the last applied list touches the stack.

- ``Keep``: the live route at that position stays, same instance, same
  result channel.
- ``Insert``: the route is inserted through the normal push machinery,
  redirects included.
- ``Delete``: the live route is removed with ``remove()`` (guard-free),
  never popped.

Operations are replayed strictly left to right with a cursor into the
live stack, so each op's position already accounts for the deletes and
inserts before it.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from typing import Any

import anyio

from perch.config import StackConfig
from perch.diff import Delete, DiffOp, Insert, Keep, myers_diff
from perch.errors import ConfigurationError
from perch.paths.navigation import NavigationPath
from perch.route import RouteTarget

logger = logging.getLogger("perch.reconcile")


async def apply_diff[T: RouteTarget](
    path: NavigationPath[T],
    operations: Sequence[DiffOp[T]],
    *,
    source_length: int | None = None,
) -> None:
    """Apply ``operations`` (from ``myers_diff``) to ``path`` in order.

    ``source_length`` is the length of the list the diff was computed
    from. When the live stack disagrees, strict mode
    (``StackConfig.strict_reconcile``) raises ``ConfigurationError``;
    otherwise positions past the end of the stack are skipped.

    An exception from a redirect hook stops the replay where it is:
    operations before the failing insert stay applied.
    """
    async for _ in _replay(path, operations, source_length=source_length):
        pass


async def _replay[T: RouteTarget](
    path: NavigationPath[T],
    operations: Sequence[DiffOp[T]],
    *,
    source_length: int | None,
) -> AsyncIterator[DiffOp[T]]:
    """Apply operations one by one, yielding each after it took effect."""
    strict = path.config.strict_reconcile
    if source_length is not None and len(path) != source_length:
        msg = f"{path!r} holds {len(path)} routes but the diff was computed against {source_length}"
        if strict:
            raise ConfigurationError(msg)
        logger.warning(msg)

    cursor = 0
    kept = inserted = deleted = 0
    for op in operations:
        match op:
            case Keep():
                cursor += 1
                kept += 1
            case Delete(old_index=old_index):
                live = path.stack
                if cursor < len(live):
                    path.remove(live[cursor])
                    deleted += 1
                elif strict:
                    msg = f"Delete of old index {old_index} runs past the end of {path!r}"
                    raise ConfigurationError(msg)
                else:
                    logger.debug("Skipping delete of old index %d: past end of %r", old_index, path)
            case Insert(element=route):
                await path.insert(cursor, route)
                cursor += 1
                inserted += 1
        yield op

    logger.debug(
        "Reconciled %r: %d kept, %d inserted, %d deleted", path, kept, inserted, deleted,
    )


def _applied_routes[T: RouteTarget](
    previous: Sequence[T],
    current: Sequence[T],
    applied: Sequence[DiffOp[T]],
) -> tuple[T, ...]:
    """The declared list matching the live stack after a partial replay.

    Routes the applied ops produced come first, followed by the old
    routes no op has reached yet.
    """
    routes: list[T] = []
    next_old = 0
    for op in applied:
        match op:
            case Keep(old_index=old_index, new_index=new_index):
                routes.append(current[new_index])
                next_old = old_index + 1
            case Delete(old_index=old_index):
                next_old = old_index + 1
            case Insert(element=route):
                routes.append(route)
    return (*routes, *previous[next_old:])


class DeclarativeStack[T: RouteTarget]:
    """A ``NavigationPath`` driven by whole-list updates.

    Updates are serialized: an ``update()`` issued while another is
    still resolving redirects waits for it, then diffs against its
    result.

    Usage::

        declarative = DeclarativeStack(label="checkout")
        await declarative.update([Cart(), Shipping()])
        await declarative.update([Cart(), Shipping(), Payment()])   # one insert
        declarative.path.stack   # Cart and Shipping are the original instances
    """

    __slots__ = ("_lock", "_path", "_previous")

    def __init__(
        self,
        *,
        label: str | None = None,
        context: Any = None,
        config: StackConfig | None = None,
    ) -> None:
        self._path: NavigationPath[T] = NavigationPath(label, context=context, config=config)
        self._previous: tuple[T, ...] = ()
        self._lock: anyio.Lock | None = None

    @property
    def path(self) -> NavigationPath[T]:
        return self._path

    @property
    def routes(self) -> tuple[T, ...]:
        """The declared list the live stack currently reflects.

        After a successful ``update()`` this is the list it was given.
        After a failed one it is the part of that update which was applied.
        """
        return self._previous

    async def update(self, routes: Iterable[T]) -> list[DiffOp[T]]:
        """Reconcile the path with ``routes`` and return the applied script.

        If a redirect hook raises, the exception propagates and ``routes``
        records what was applied before the failure, so the next update
        diffs against the stack as it really is.
        """
        if self._lock is None:
            self._lock = anyio.Lock()
        current = tuple(routes)
        async with self._lock:
            previous = self._previous
            operations = myers_diff(previous, current)
            applied: list[DiffOp[T]] = []
            try:
                async for op in _replay(self._path, operations, source_length=len(previous)):
                    applied.append(op)
            except BaseException:
                self._previous = _applied_routes(previous, current, applied)
                logger.warning(
                    "Update of %r stopped after %d of %d operations",
                    self._path, len(applied), len(operations),
                )
                raise
            self._previous = current
        return operations
