"""Test helpers for perch paths.

``Presenter`` stands in for the presentation layer: it watches a
mutable path, diffs each new stack against the last one it "rendered",
and finalizes popped routes the way a real UI does once their content
is gone from screen. Without it (or a real UI), result channels of
popped routes never complete.
"""

from __future__ import annotations

import operator
from collections.abc import Iterable
from types import TracebackType
from typing import Any

from perch.diff import Delete, DiffOp, myers_diff
from perch.paths.base import StackMutable, StackPath
from perch.route import RouteTarget


def assert_stack(path: StackPath[Any], expected: Iterable[RouteTarget]) -> None:
    """Assert the path holds routes equal to ``expected``, bottom first."""
    actual = list(path.stack)
    wanted = list(expected)
    assert actual == wanted, (
        f"Stack mismatch on {path!r}.\n"
        f"Expected: {wanted!r}\n"
        f"Actual:   {actual!r}"
    )


class Presenter:
    """Presentation-layer double for a ``StackMutable`` path.

    Usage::

        path = NavigationPath("main")
        with Presenter(path) as presenter:
            channel = await path.push(Detail(1))
            await path.pop("saved")
            assert await channel == "saved"
            assert presenter.renders[-1] == ()

    Set ``auto_finalize=False`` to call ``finalize()`` by hand, e.g. to
    assert on a channel that is popped but not yet completed.
    """

    __slots__ = ("_shown", "auto_finalize", "operations", "path", "pending", "renders")

    def __init__(self, path: StackMutable[Any], *, auto_finalize: bool = True) -> None:
        self.path = path
        self.auto_finalize = auto_finalize
        self._shown: tuple[RouteTarget, ...] = path.stack
        self.renders: list[tuple[RouteTarget, ...]] = []
        self.operations: list[list[DiffOp[RouteTarget]]] = []
        self.pending: list[RouteTarget] = []
        path.add_listener(self._on_change)

    def _on_change(self) -> None:
        current = self.path.stack
        ops = myers_diff(self._shown, current, operator.is_)
        previous, self._shown = self._shown, current
        self.renders.append(current)
        self.operations.append(ops)
        for op in ops:
            match op:
                case Delete(old_index=index) if previous[index].popped_by_path:
                    self.pending.append(previous[index])
        if self.auto_finalize:
            self.finalize()

    def finalize(self) -> None:
        """Complete the channels of every route popped since the last call."""
        pending, self.pending = self.pending, []
        for route in pending:
            route.on_did_pop()

    def system_pop(self, result: Any = None) -> RouteTarget | None:
        """Simulate the platform dismissing the top route (back gesture).

        Guards are bypassed, as they are for a real system dismissal.
        """
        top = self.path.active_route
        if top is not None:
            top.on_did_pop(result)
        return top

    def close(self) -> None:
        self.path.remove_listener(self._on_change)

    def __enter__(self) -> Presenter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
