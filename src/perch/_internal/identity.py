"""Value-identity helpers for route props.

Route equality compares ``props`` tuples with ``==``, which already
recurses into lists, dicts and sets. Hashing needs a hashable stand-in
for those containers; ``freeze`` builds one.
"""

from collections.abc import Mapping, Set
from typing import Any


def freeze(value: Any) -> Any:
    """Return a hashable value equal-for-equal to ``value``.

    Lists and tuples become tuples, mappings become a frozenset of
    frozen items, sets become frozensets. Anything else is returned as is.
    """
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    if isinstance(value, Mapping):
        return frozenset((freeze(k), freeze(v)) for k, v in value.items())
    if isinstance(value, Set):
        return frozenset(freeze(v) for v in value)
    return value


def props_hash(props: tuple[Any, ...]) -> int:
    """Hash a props tuple, tolerating unhashable containers inside it."""
    return hash(freeze(props))


def format_props(name: str, props: tuple[Any, ...]) -> str:
    """Render ``Name`` or ``Name[a,b]`` for reprs."""
    if not props:
        return name
    return f"{name}[{','.join(str(p) for p in props)}]"
