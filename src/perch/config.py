"""Stack configuration.

StackConfig is a frozen dataclass. It is immutable after creation and is
shared by every path built with it.
"""

from dataclasses import dataclass

from perch.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class StackConfig:
    """Behavioural switches for navigation paths. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = StackConfig(max_redirects=8, complete_on_remove=True)
        path = NavigationPath("main", config=config)
    """

    # Redirects
    max_redirects: int | None = 32  # None = follow chains without a bound

    # remove() is guard-free and, by default, leaves the result channel open
    complete_on_remove: bool = False

    # Reconciler
    strict_reconcile: bool = False  # Raise instead of skipping on stale indices

    def __post_init__(self) -> None:
        if self.max_redirects is not None and self.max_redirects < 1:
            msg = f"max_redirects must be >= 1 or None, got {self.max_redirects}"
            raise ConfigurationError(msg)


DEFAULT_CONFIG = StackConfig()
