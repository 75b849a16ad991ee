"""RouteQueryParameters: live, identity-free query parameters on a route.

Query parameters are a mutable side channel: changing them must not
change which route this is. They are therefore kept out of ``props`` and
held in a ``ValueNotifier`` that presentation code can listen to.

When an indexed stack is asked to activate a route equal to its active
member, the incoming route's queries replace the member's queries
instead of switching tabs.
"""

from __future__ import annotations

from collections.abc import Mapping

from perch.listenable import ValueNotifier
from perch.route import RouteTarget


class RouteQueryParameters(RouteTarget):
    """Capability: a route carrying query parameters outside its identity."""

    _query_notifier: ValueNotifier[Mapping[str, str]] | None = None

    @property
    def query_notifier(self) -> ValueNotifier[Mapping[str, str]]:
        notifier = self._query_notifier
        if notifier is None:
            notifier = self._query_notifier = ValueNotifier({})
        return notifier

    @property
    def queries(self) -> Mapping[str, str]:
        return self.query_notifier.value

    @queries.setter
    def queries(self, value: Mapping[str, str]) -> None:
        self.query_notifier.value = dict(value)

    def query(self, name: str) -> str | None:
        """Return a single query parameter, or None."""
        return self.queries.get(name)

    def on_did_pop(self, result: object = None) -> None:
        super().on_did_pop(result)
        self.query_notifier.dispose()
