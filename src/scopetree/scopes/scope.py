"""
Single dotted permission scope and its coverage relation.

A scope like ``accounts.1.shops.*.orders.read`` is a sequence of segments.
A shorter scope is more general than any longer scope sharing its prefix,
and ``*`` stands for exactly one segment (it is not a path glob):

    accounts        >= accounts.1.read
    accounts.*      >= accounts.1.read
    accounts.1      >= accounts.2.read   -> False
"""

from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from scopetree import config
from scopetree.errors import InvalidArgumentError


class Scope:
    """Immutable, non-empty sequence of scope segments."""

    __slots__ = ("_segments", "_str")

    def __init__(self, segments: Union[str, Iterable[Any]]) -> None:
        if isinstance(segments, str):
            segments = segments.split(config.SEPARATOR)
        parts = tuple(str(s) for s in segments)
        if not parts:
            raise InvalidArgumentError("scope must have at least one segment")
        if any(not p for p in parts):
            raise InvalidArgumentError(
                f"scope segments must not be empty: {config.SEPARATOR.join(parts)!r}"
            )
        if any(config.SEPARATOR in p for p in parts):
            raise InvalidArgumentError(
                f"scope segments must not contain {config.SEPARATOR!r}: {parts!r}"
            )
        self._segments = parts
        self._str = config.SEPARATOR.join(parts)

    @classmethod
    def wrap(cls, value: Union["Scope", str, Iterable[Any]]) -> "Scope":
        """
        Coerce a scope-like value into a Scope.

        Accepts a Scope, anything with ``to_scope()`` (a tree cursor),
        a dotted string, or a sequence of segments.
        """
        if isinstance(value, Scope):
            return value
        if hasattr(value, "to_scope"):
            return value.to_scope()
        if isinstance(value, (str, list, tuple)):
            return cls(value)
        raise InvalidArgumentError(f"can't build a scope from {type(value).__name__}")

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def wildcard_count(self) -> int:
        return sum(1 for s in self._segments if s == config.WILDCARD)

    def sort_key(self) -> tuple[int, int]:
        """
        Key placing more general scopes first.

        If A strictly covers B then either A is shorter, or both have the
        same length and A has more wildcards, so the key orders A before B.
        """
        return (len(self._segments), -self.wildcard_count)

    def covers(self, other: Any) -> bool:
        """True if this scope is at least as general as ``other``."""
        other = Scope.wrap(other)
        if len(self._segments) > len(other._segments):
            return False
        return all(
            mine == theirs or mine == config.WILDCARD
            for mine, theirs in zip(self._segments, other._segments)
        )

    def expand(self, substitutions: Mapping[Any, Any]) -> "Scope":
        """
        Return a new scope with placeholder segments replaced.

        Example:
            Scope.wrap("accounts.my-account").expand({"my-account": 1})
            # -> accounts.1
        """
        table = {str(k): str(v) for k, v in substitutions.items()}
        return Scope(table.get(s, s) for s in self._segments)

    def to_scope(self) -> "Scope":
        return self

    def to_list(self) -> list[str]:
        return list(self._segments)

    # ─── Comparison ──────────────────────────────────────────────────────

    def _coerce(self, other: Any) -> Optional["Scope"]:
        if isinstance(other, (Scope, str)) or hasattr(other, "to_scope"):
            return Scope.wrap(other)
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
        if isinstance(other, Scope):
            return self._segments == other._segments
        if isinstance(other, str):
            return self._str == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._str)

    # ─── Rendering ───────────────────────────────────────────────────────

    def __iter__(self) -> Iterator[str]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index):
        return self._segments[index]

    def __str__(self) -> str:
        return self._str

    def __repr__(self) -> str:
        return f"Scope({self._str!r})"
