"""
Validated, step-by-step navigation through a scope grammar.

A cursor holds the segments accepted so far plus the set of grammar
nodes consistent with them. After an implicit ``*`` over literal
children the set holds every alternative, and a later step must be
valid for all of them:

    products.own.{read,delete}
    products.all.{read}

    products.*.read     -> ok
    products.*.delete   -> InvalidScopeHierarchyError

Cursors never change; every step returns a new one, so a cursor can be
kept and branched from any number of times.
"""

from typing import Any, Iterator

from scopetree import config
from scopetree.errors import InvalidScopeHierarchyError
from scopetree.scopes.scope import Scope
from scopetree.tree.grammar import GrammarNode


class Cursor:
    """Path in progress through a Tree."""

    __slots__ = ("_segments", "_candidates")

    def __init__(self, segments: tuple[str, ...], candidates: tuple[GrammarNode, ...]) -> None:
        if not candidates:
            raise InvalidScopeHierarchyError("", segments, "no grammar node matches")
        self._segments = tuple(segments)
        self._candidates = _unique(candidates)

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def candidates(self) -> tuple[GrammarNode, ...]:
        return self._candidates

    # ─── Navigation ──────────────────────────────────────────────────────

    def step(self, key: Any) -> "Cursor":
        """Move by one literal, alias or wildcard segment."""
        key = str(key)
        if key == config.WILDCARD:
            return self._wildcard()

        children = []
        for node in self._candidates:
            child = node.child(key)
            if child is None:
                raise self._reject(key, f"not declared under {node.name!r}")
            children.append(child)
        return Cursor(self._segments + (key,), tuple(children))

    def value(self, *values: Any) -> "Cursor":
        """
        Move by a free value segment.

        Several values, or a single list/tuple, render as ``(v1,v2,...)``.
        Every current node must declare an any-node with a pattern that
        each value satisfies.
        """
        flat: list[str] = []
        for v in values:
            if isinstance(v, (list, tuple)):
                flat.extend(str(x) for x in v)
            else:
                flat.append(str(v))

        if len(flat) == 1:
            rendered = flat[0]
        else:
            rendered = (
                config.TUPLE_OPEN
                + config.TUPLE_SEPARATOR.join(flat)
                + config.TUPLE_CLOSE
            )
        if not flat:
            raise self._reject(rendered, "no value given")

        children = []
        for node in self._candidates:
            any_node = node.any_node
            if any_node is None or any_node.pattern is None:
                raise self._reject(rendered, f"no value constraint under {node.name!r}")
            for v in flat:
                if not any_node.accepts(v):
                    raise self._reject(
                        rendered,
                        f"{v!r} does not match {any_node.pattern.pattern!r}",
                    )
            children.append(any_node.subtree)
        return Cursor(self._segments + (rendered,), tuple(children))

    def _wildcard(self) -> "Cursor":
        children: list[GrammarNode] = []
        for node in self._candidates:
            if node.any_node is not None:
                children.append(node.any_node.subtree)
            elif node.children:
                children.extend(node.children.values())
            else:
                raise self._reject(config.WILDCARD, f"{node.name!r} has no children")
        return Cursor(self._segments + (config.WILDCARD,), tuple(children))

    def accepts_values(self) -> bool:
        """True if some current node has an any-node that could take a value."""
        return any(node.any_node is not None for node in self._candidates)

    def has_step(self, key: str) -> bool:
        """True if ``key`` is a literal or alias under every current node."""
        return all(node.child(key) is not None for node in self._candidates)

    def _reject(self, key: str, reason: str) -> InvalidScopeHierarchyError:
        return InvalidScopeHierarchyError(key, self._segments, reason)

    # ─── Rendering ───────────────────────────────────────────────────────

    def to_scope(self) -> Scope:
        return Scope(self._segments)

    def to_list(self) -> list[str]:
        return list(self._segments)

    def __iter__(self) -> Iterator[str]:
        return iter(self._segments)

    def __str__(self) -> str:
        return config.SEPARATOR.join(self._segments)

    def __repr__(self) -> str:
        return f"<Cursor {self}>"


def _unique(nodes: tuple[GrammarNode, ...]) -> tuple[GrammarNode, ...]:
    seen: dict[int, GrammarNode] = {}
    for node in nodes:
        seen.setdefault(id(node), node)
    return tuple(seen.values())
