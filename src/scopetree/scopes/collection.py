"""
Ordered, de-duplicated set of scopes with authorization queries.

Two distinct coverage questions are answered here:

- ``can(requested)``: existential. Does at least one granted scope
  cover at least one requested scope?
- ``covers(requested)`` / ``>=``: universal. Does a single granted scope
  cover every requested scope?

Conflating the two under- or over-authorizes, so both are kept separate.
"""

from typing import Any, Callable, Iterator, Mapping, Optional

from scopetree.errors import InvalidArgumentError
from scopetree.scopes.scope import Scope


class Scopes:
    """
    Immutable collection of Scope values.

    Members are unique by string form and kept most-general-first;
    equally general scopes keep their insertion order, so ``resolve``
    is deterministic.
    """

    __slots__ = ("_scopes",)

    def __init__(self, scopes: Any = ()) -> None:
        unique: dict[str, Scope] = {}
        for item in _flatten(scopes):
            scope = Scope.wrap(item)
            unique.setdefault(str(scope), scope)
        # sorted() is stable: ties keep insertion order
        self._scopes: tuple[Scope, ...] = tuple(
            sorted(unique.values(), key=Scope.sort_key)
        )

    @classmethod
    def wrap(cls, value: Any) -> "Scopes":
        """Return ``value`` as Scopes, building a new instance only when needed."""
        if isinstance(value, Scopes):
            return value
        if hasattr(value, "to_scopes"):
            return value.to_scopes()
        return cls(value)

    def to_scopes(self) -> "Scopes":
        return self

    # ─── Set Algebra ─────────────────────────────────────────────────────

    def merge(self, another: Any) -> "Scopes":
        """Union of both collections, de-duplicated by string form."""
        if not hasattr(another, "to_scopes"):
            raise InvalidArgumentError(f"Can't merge with {type(another).__name__}")
        another_scopes = another.to_scopes()
        if not isinstance(another_scopes, Scopes):
            raise InvalidArgumentError(f"Can't merge with {type(another).__name__}")

        return Scopes(self._scopes + another_scopes._scopes)

    def expand(self, substitutions: Optional[Mapping[Any, Any]] = None) -> "Scopes":
        """
        Return new Scopes with placeholder segments substituted.

        Example:
            Scopes(["accounts.my-account", "shops.my-shop"]).expand(
                {"my-account": 1, "my-shop": 2}
            )
            # -> Scopes(["accounts.1", "shops.2"])
        """
        substitutions = substitutions or {}
        return Scopes(s.expand(substitutions) for s in self._scopes)

    # ─── Authorization Queries ───────────────────────────────────────────

    def resolve(self, scope: Any) -> Optional[Scope]:
        """Find the first, most general member covering ``scope``."""
        wanted = Scope.wrap(scope)
        for granted in self._scopes:
            if granted.covers(wanted):
                return granted
        return None

    def can(self, another: Any) -> bool:
        """True if any member covers any scope of ``another``."""
        another = Scopes.wrap(another)
        return any(
            s1.covers(s2) for s1 in self._scopes for s2 in another._scopes
        )

    def covers(self, another: Any) -> bool:
        """True if a single member covers every scope of ``another``."""
        another = Scopes.wrap(another)
        return any(
            all(s1.covers(s2) for s2 in another._scopes) for s1 in self._scopes
        )

    def any(self, predicate: Optional[Callable[[Scope], bool]] = None) -> bool:
        if predicate is None:
            return bool(self._scopes)
        return any(predicate(s) for s in self._scopes)

    def all(self, predicate: Optional[Callable[[Scope], bool]] = None) -> bool:
        if predicate is None:
            return True
        return all(predicate(s) for s in self._scopes)

    # ─── Comparison ──────────────────────────────────────────────────────

    def _coerce(self, other: Any) -> Optional["Scopes"]:
        if isinstance(other, (Scopes, Scope, str, list, tuple, set, frozenset)):
            return Scopes.wrap(other)
        if hasattr(other, "to_scopes") or hasattr(other, "to_scope"):
            return Scopes.wrap(other)
        return None

    def __ge__(self, other: Any) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.covers(other)

    def __le__(self, other: Any) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.covers(self)

    def __gt__(self, other: Any) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.covers(other) and self != other

    def __lt__(self, other: Any) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.covers(self) and self != other

    def __eq__(self, other: Any) -> bool:
        # Only collections compare equal, so hash stays consistent with ==
        if not isinstance(other, Scopes):
            if not hasattr(other, "to_scopes"):
                return NotImplemented
            other = other.to_scopes()
        return set(self.to_list()) == set(other.to_list())

    def __hash__(self) -> int:
        return hash(frozenset(self.to_list()))

    # ─── Rendering ───────────────────────────────────────────────────────

    def to_list(self) -> list[str]:
        return [str(s) for s in self._scopes]

    def __iter__(self) -> Iterator[Scope]:
        return iter(self._scopes)

    def __len__(self) -> int:
        return len(self._scopes)

    def __bool__(self) -> bool:
        return bool(self._scopes)

    def __contains__(self, item: Any) -> bool:
        try:
            return Scope.wrap(item) in self._scopes
        except InvalidArgumentError:
            return False

    def __str__(self) -> str:
        return ", ".join(self.to_list())

    def __repr__(self) -> str:
        return f"<Scopes [{self}]>"


def _flatten(value: Any) -> Iterator[Any]:
    """Yield scope-like items from a single value or an arbitrarily nested iterable."""
    if isinstance(value, (str, Scope)) or hasattr(value, "to_scope"):
        yield value
    elif isinstance(value, Scopes):
        yield from value
    else:
        try:
            items = iter(value)
        except TypeError:
            raise InvalidArgumentError(
                f"can't build scopes from {type(value).__name__}"
            ) from None
        for item in items:
            yield from _flatten(item)
