"""Restoration: turn stacks into primitives and back.

Perch does not own a wire format. It only guarantees that every route it
serializes becomes JSON-compatible primitives (str, dict, list, int) and
that the same registry and URI parser can rebuild it.

Two strategies, chosen per route:

- **unique**: a ``RouteUnique`` serializes as its URI string. Rebuilding
  it requires a ``parse_uri`` callable from the routing layer.
- **converter**: a ``RouteRestorable`` names a ``RestorableConverter`` by
  key; the converter is looked up in a ``ConverterRegistry``.

Registries are explicit objects handed to paths, not process-wide
tables, so several independent engines can live in one process::

    registry = ConverterRegistry()
    registry.define("draft", DraftConverter)

    path = NavigationPath("main", registry=registry)
    data = path.serialize()
    path.restore(path.deserialize(data, parse_uri=router.parse))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Any

from perch.errors import RestorationError
from perch.route import RouteTarget, RouteUnique

type UriParser = Callable[[str], RouteTarget]


class RestorationStrategy(Enum):
    """How a ``RouteRestorable`` is written out."""

    UNIQUE = "unique"
    CONVERTER = "converter"


class RestorableConverter[R: RouteTarget](ABC):
    """Converts one kind of route to a primitive dict and back."""

    key: str

    @abstractmethod
    def serialize(self, route: R) -> dict[str, Any]: ...

    @abstractmethod
    def deserialize(self, data: dict[str, Any]) -> R: ...


class ConverterRegistry:
    """Converter factories keyed by name.

    Usage::

        registry = ConverterRegistry()
        registry.define("draft", DraftConverter)
        registry.build("draft")    # -> DraftConverter()
    """

    __slots__ = ("_factories",)

    def __init__(self) -> None:
        self._factories: dict[str, Callable[[], RestorableConverter[Any]]] = {}

    def define(self, key: str, factory: Callable[[], RestorableConverter[Any]]) -> None:
        """Register ``factory`` under ``key``. Redefining a key replaces it."""
        self._factories[key] = factory

    def build(self, key: str) -> RestorableConverter[Any] | None:
        """Return a fresh converter for ``key``, or None if unknown."""
        factory = self._factories.get(key)
        if factory is None:
            return None
        return factory()

    def __contains__(self, key: object) -> bool:
        return key in self._factories

    def __len__(self) -> int:
        return len(self._factories)


class RouteRestorable(RouteTarget):
    """Capability: a route with an explicit restoration strategy."""

    strategy: RestorationStrategy = RestorationStrategy.UNIQUE
    converter_key: str | None = None
    """Registry key of the converter, required for ``RestorationStrategy.CONVERTER``."""


def serialize_route(route: RouteTarget, registry: ConverterRegistry | None = None) -> Any:
    """Serialize one route to primitives.

    Raises ``RestorationError`` if the route has no restoration strategy
    or names a converter the registry does not know.
    """
    match route:
        case RouteRestorable(strategy=RestorationStrategy.CONVERTER):
            converter = _converter(route.converter_key, registry)
            return {
                "strategy": RestorationStrategy.CONVERTER.value,
                "converter": converter.key,
                "value": converter.serialize(route),
            }
        case RouteRestorable() if isinstance(route, RouteUnique):
            return {"strategy": RestorationStrategy.UNIQUE.value, "value": route.to_uri()}
        case RouteUnique():
            return route.to_uri()
        case _:
            msg = f"{route!r} cannot be serialized: it is neither RouteUnique nor RouteRestorable"
            raise RestorationError(msg)


def deserialize_route(
    data: Any,
    registry: ConverterRegistry | None = None,
    parse_uri: UriParser | None = None,
) -> RouteTarget:
    """Rebuild one route from ``serialize_route`` output."""
    match data:
        case str():
            return _parse(data, parse_uri)
        case {"strategy": "unique", "value": str(uri)}:
            return _parse(uri, parse_uri)
        case {"strategy": "converter", "converter": str(key), "value": dict(value)}:
            return _converter(key, registry).deserialize(value)
        case _:
            msg = f"Unrecognized serialized route: {data!r}"
            raise RestorationError(msg)


def _parse(uri: str, parse_uri: UriParser | None) -> RouteTarget:
    if parse_uri is None:
        msg = f"Cannot restore {uri!r}: no parse_uri callable was given"
        raise RestorationError(msg)
    return parse_uri(uri)


def _converter(key: str | None, registry: ConverterRegistry | None) -> RestorableConverter[Any]:
    converter = registry.build(key) if registry is not None and key is not None else None
    if converter is None:
        msg = f"No restorable converter registered for key {key!r}"
        raise RestorationError(msg)
    return converter
