"""Synchronous change notification.

Paths and query notifiers inherit from ``ChangeNotifier``. Listeners are
plain callables taking no arguments; they are told *that* something
changed, never *what* changed. Re-deriving the difference is the job of
``perch.diff``.

Listeners run synchronously, in registration order, in the same turn as
the mutation that triggered them.
"""

import contextlib
import logging
from collections.abc import Callable

logger = logging.getLogger("perch.listenable")

type Listener = Callable[[], object]


class ChangeNotifier:
    """Holds a list of listeners and calls each of them on ``notify_listeners()``.

    Usage::

        path = NavigationPath("main")
        path.add_listener(lambda: print(path.stack))
    """

    __slots__ = ("_disposed", "_listeners")

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._disposed = False

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)

    def add_listener(self, listener: Listener) -> None:
        """Register ``listener``. Registering the same callable twice calls it twice."""
        if self._disposed:
            msg = f"{type(self).__name__} was used after being disposed."
            raise RuntimeError(msg)
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Remove the first registration of ``listener``. Unknown listeners are ignored."""
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)

    def notify_listeners(self) -> None:
        """Call every registered listener.

        The listener list is snapshotted first, so listeners may add or
        remove listeners while being notified. A listener that raises is
        logged and skipped; the mutation it observed has already happened.
        """
        if self._disposed:
            return
        for listener in tuple(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Listener %r raised while notifying %r", listener, self)

    def dispose(self) -> None:
        """Drop all listeners. Further ``add_listener`` calls raise."""
        self._listeners.clear()
        self._disposed = True


class ValueNotifier[V](ChangeNotifier):
    """A ``ChangeNotifier`` holding a single value.

    Assigning a value that compares equal to the current one does not notify.
    """

    __slots__ = ("_value",)

    def __init__(self, value: V) -> None:
        super().__init__()
        self._value = value

    @property
    def value(self) -> V:
        return self._value

    @value.setter
    def value(self, new_value: V) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        self.notify_listeners()

    def __repr__(self) -> str:
        return f"ValueNotifier({self._value!r})"
