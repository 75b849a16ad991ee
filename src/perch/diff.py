"""Myers shortest-edit-script diff over route lists.

Given the previous and the current list of routes, ``myers_diff``
returns the minimal sequence of ``Keep`` / ``Insert`` / ``Delete``
operations turning one into the other. The presentation layer uses it
to carry unchanged routes (and whatever state it attached to them) over
between renders instead of rebuilding everything.

Algorithm: the greedy forward Myers O((N+M)·D) search, recording the
furthest-reaching x per diagonal for every edit distance d, then
backtracking through those snapshots. On ties the search prefers a
deletion over an insertion, so deletions come out as early as possible
and insertions as late as possible. The result
depends only on the inputs and the equality function; there is no
hashing involved.

Example::

    myers_diff(["a", "b", "c"], ["a", "d", "c"])
    # [Keep(0, 0), Delete(1), Insert(1, "d"), Keep(2, 2)]
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Keep:
    """The element at ``old_index`` is equal to the one at ``new_index``."""

    old_index: int
    new_index: int


@dataclass(frozen=True, slots=True)
class Insert[E]:
    """``element`` exists only in the new list, at ``new_index``."""

    new_index: int
    element: E


@dataclass(frozen=True, slots=True)
class Delete:
    """The element at ``old_index`` exists only in the old list."""

    old_index: int


type DiffOp[E] = Keep | Insert[E] | Delete


def myers_diff[E](
    old: Sequence[E],
    new: Sequence[E],
    equals: Callable[[E, E], bool] = operator.eq,
) -> list[DiffOp[E]]:
    """Compute the shortest edit script from ``old`` to ``new``.

    Neither input is mutated. ``equals`` defaults to ``==``, which for
    routes is value identity (same type, same props).
    """
    n, m = len(old), len(new)
    if n == 0:
        return [Insert(i, element) for i, element in enumerate(new)]
    if m == 0:
        return [Delete(i) for i in range(n)]

    offset = n + m
    # v[k + offset] = furthest x reached on diagonal k
    v = [-1] * (2 * offset + 2)
    v[1 + offset] = 0
    trace: list[list[int]] = []

    for d in range(offset + 1):
        trace.append(v.copy())
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[k - 1 + offset] < v[k + 1 + offset]):
                x = v[k + 1 + offset]
            else:
                x = v[k - 1 + offset] + 1
            y = x - k
            while x < n and y < m and equals(old[x], new[y]):
                x += 1
                y += 1
            v[k + offset] = x
            if x >= n and y >= m:
                return _backtrack(trace, new, n, m, offset)

    msg = "unreachable: an edit script always exists within n + m steps"
    raise AssertionError(msg)


def _backtrack[E](
    trace: list[list[int]],
    new: Sequence[E],
    n: int,
    m: int,
    offset: int,
) -> list[DiffOp[E]]:
    ops: list[DiffOp[E]] = []
    x, y = n, m
    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        k = x - y
        if k == -d or (k != d and v[k - 1 + offset] < v[k + 1 + offset]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = v[prev_k + offset]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            ops.append(Keep(x, y))

        if d == 0:
            break
        if x == prev_x:
            y -= 1
            ops.append(Insert(y, new[y]))
        else:
            x -= 1
            ops.append(Delete(x))

    ops.reverse()
    return ops
