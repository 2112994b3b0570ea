"""
Alias table translating symbolic scope names into concrete scopes.

Example:
    aliases = AliasMap({"admin": ["api.me", "api.products"]})
    aliases.map(["admin", "api.orders"])     # -> api.me, api.products, api.orders
    aliases.expand(["admin", "api.orders"])  # -> admin, api.me, api.products

``map`` translates and passes unknown scopes through. ``expand`` answers
"these aliases plus everything they imply" and drops unknown scopes.
"""

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

from scopetree.scopes.collection import Scopes
from scopetree.scopes.scope import Scope

if TYPE_CHECKING:
    from scopetree.models.grammar import AliasMapSpec


class AliasMap:
    """Immutable mapping of alias key to an ordered set of target scopes."""

    def __init__(self, mapping: Optional[Mapping[Any, Any]] = None) -> None:
        table: dict[str, tuple[str, ...]] = {}
        for key, targets in (mapping or {}).items():
            if isinstance(targets, (list, tuple, set, frozenset, Scopes)):
                values = [str(Scope.wrap(t)) for t in targets]
            else:
                values = [str(Scope.wrap(targets))]
            # dict.fromkeys keeps first-seen order
            table[str(key)] = tuple(dict.fromkeys(values))
        self._mapping = table

    @classmethod
    def from_spec(cls, spec: "AliasMapSpec") -> "AliasMap":
        """Build from a validated declarative description."""
        return cls(spec.mapping)

    def map(self, scopes: Any) -> Scopes:
        """Replace each registered alias by its targets; keep everything else."""
        result: list[str] = []
        for sc in _as_strings(scopes):
            result.extend(self._mapping.get(sc, (sc,)))
        return Scopes(list(dict.fromkeys(result)))

    def expand(self, scopes: Any) -> Scopes:
        """Registered aliases from ``scopes`` plus all of their targets."""
        registered = [sc for sc in _as_strings(scopes) if sc in self._mapping]
        implied: list[str] = []
        for sc in registered:
            implied.extend(self._mapping[sc])
        return Scopes(list(dict.fromkeys(registered + implied)))

    def targets(self, key: Any) -> tuple[str, ...]:
        return self._mapping.get(str(key), ())

    def keys(self) -> list[str]:
        return list(self._mapping)

    def __contains__(self, key: Any) -> bool:
        return str(key) in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"<AliasMap keys={self.keys()!r}>"


def _as_strings(scopes: Any) -> Iterable[str]:
    if isinstance(scopes, Scopes):
        return scopes.to_list()
    if isinstance(scopes, str) or hasattr(scopes, "to_scope"):
        return [str(scopes)]
    return [str(s) for s in scopes]
