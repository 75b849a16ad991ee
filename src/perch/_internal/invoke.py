"""Run route hooks that may or may not be coroutines.

``pop_guard``, ``redirect`` and their ``*_with`` variants are user code.
A guard that only checks a dirty flag is a plain method; one that asks
the user to confirm is ``async def``. Paths never care which: guard and
redirect dispatch both go through ``invoke``.
"""

import inspect
from typing import Any


async def invoke(hook: Any, *args: Any) -> Any:
    """Call ``hook(*args)``; if it hands back an awaitable, await that too.

    The hook's own exceptions propagate untouched, whether raised on the
    call or while awaiting.
    """
    outcome = hook(*args)
    if inspect.isawaitable(outcome):
        return await outcome
    return outcome
