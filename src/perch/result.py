"""Single-resolution result channels.

Every route instance owns exactly one ``ResultChannel``. ``push()`` hands
it back to the caller, who awaits it to learn what the route was popped
with. A channel completes at most once: later ``complete()`` calls are
silent no-ops, never errors, and never wake waiters a second time.

States::

    pending ──complete(value)──────────────▶ completed(value)
            └─complete(None, silent=True)──▶ completed(None, silent)

The silent outcome marks routes that will never be popped normally:
superseded by a redirect, displaced by ``push_or_move_to_top``, cleared
by ``reset()`` or owned by an indexed stack.

Usage::

    channel = await path.push(PickColor())
    color = await channel          # resolves when the route is popped
"""

from collections.abc import Generator
from typing import Any

import anyio

_PENDING = object()


class ResultChannel:
    """An awaitable, complete-once result holder.

    Backed by an ``anyio.Event`` created on first wait, so channels can be
    built outside a running event loop (routes are often constructed in
    plain synchronous code).
    """

    __slots__ = ("_event", "_silent", "_value")

    def __init__(self) -> None:
        self._value: Any = _PENDING
        self._silent = False
        self._event: anyio.Event | None = None

    @property
    def done(self) -> bool:
        """True once the channel has been completed."""
        return self._value is not _PENDING

    @property
    def silent(self) -> bool:
        """True if the channel was completed with the silent ``None`` outcome."""
        return self._silent

    def result(self) -> Any:
        """Return the completed value.

        Raises ``RuntimeError`` if the channel is still pending.
        """
        if self._value is _PENDING:
            msg = "Result channel is still pending."
            raise RuntimeError(msg)
        return self._value

    def complete(self, value: Any = None, *, silent: bool = False) -> bool:
        """Complete the channel with ``value``.

        Returns True if this call completed the channel, False if it was
        already completed (in which case nothing changes).
        """
        if self._value is not _PENDING:
            return False
        self._value = None if silent else value
        self._silent = silent
        if self._event is not None:
            self._event.set()
        return True

    async def wait(self, timeout: float | None = None) -> Any:
        """Wait for completion and return the value.

        With ``timeout`` set, raises ``TimeoutError`` if the channel is
        still pending after that many seconds.
        """
        if self._value is _PENDING:
            if self._event is None:
                self._event = anyio.Event()
            with anyio.fail_after(timeout):
                await self._event.wait()
        return self._value

    def __await__(self) -> Generator[Any, None, Any]:
        return self.wait().__await__()

    def __repr__(self) -> str:
        if self._value is _PENDING:
            return "<ResultChannel pending>"
        if self._silent:
            return "<ResultChannel completed silently>"
        return f"<ResultChannel completed {self._value!r}>"
