"""
Grammar nodes describing which dotted scope paths are legal.

A node has literal children and at most one any-node. The any-node
admits several alternative segments (named aliases, the ``*`` wildcard,
and free values matching a pattern), all leading to one shared subtree.

Nodes are mutable only while their Tree is being declared; the Tree
seals every node once declaration finishes.
"""

import re
from typing import Iterator, Optional, Union

from scopetree import config
from scopetree.errors import InvalidArgumentError


_RESERVED = (
    config.SEPARATOR,
    config.TUPLE_OPEN,
    config.TUPLE_CLOSE,
    config.TUPLE_SEPARATOR,
)


def is_valid_token(token: str) -> bool:
    """A segment token must be non-empty, not ``*``, printable, and free of whitespace and separators."""
    if not token or token == config.WILDCARD:
        return False
    if any(ch in token for ch in _RESERVED):
        return False
    return all(ch.isprintable() and not ch.isspace() for ch in token)


def _check_name(name: object) -> str:
    name = str(name)
    if not is_valid_token(name):
        raise InvalidArgumentError(f"invalid segment name: {name!r}")
    return name


class GrammarNode:
    """A position in the scope grammar."""

    __slots__ = ("name", "_children", "_any", "_sealed")

    def __init__(self, name: str) -> None:
        self.name = name
        self._children: dict[str, "GrammarNode"] = {}
        self._any: Optional["AnyNode"] = None
        self._sealed = False

    # ─── Declaration ─────────────────────────────────────────────────────

    def add(self, name: str) -> "GrammarNode":
        """Create (or return the existing) literal child ``name``."""
        name = _check_name(name)
        existing = self._children.get(name)
        if existing is not None:
            return existing
        self._ensure_open()
        child = GrammarNode(name)
        self._children[name] = child
        return child

    def add_path(self, path: str) -> "GrammarNode":
        """Declare a dotted chain of literal children and return the last one."""
        node = self
        for name in str(path).split(config.SEPARATOR):
            node = node.add(name)
        return node

    def any(
        self,
        *aliases: str,
        pattern: Union[str, re.Pattern[str], None] = None,
    ) -> "GrammarNode":
        """
        Declare this node's any-node and return its shared subtree.

        ``aliases`` are literal names routed to the subtree; ``pattern``
        constrains free values. ``*`` always routes to the subtree.
        """
        self._ensure_open()
        if self._any is not None:
            raise InvalidArgumentError(f"node {self.name!r} already declares an any-node")
        self._any = AnyNode(aliases, pattern)
        return self._any.subtree

    def seal(self) -> None:
        for node in self.walk():
            node._sealed = True

    def _ensure_open(self) -> None:
        if self._sealed:
            raise InvalidArgumentError(f"grammar node {self.name!r} is sealed")

    # ─── Lookup ──────────────────────────────────────────────────────────

    @property
    def children(self) -> dict[str, "GrammarNode"]:
        return dict(self._children)

    @property
    def any_node(self) -> Optional["AnyNode"]:
        return self._any

    def child(self, key: str) -> Optional["GrammarNode"]:
        """Literal child first, then an any-node alias."""
        node = self._children.get(key)
        if node is not None:
            return node
        if self._any is not None and key in self._any.aliases:
            return self._any.subtree
        return None

    def walk(self) -> Iterator["GrammarNode"]:
        """Yield this node and every node below it once."""
        seen: set[int] = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            yield node
            stack.extend(node._children.values())
            if node._any is not None:
                stack.append(node._any.subtree)

    def to_dict(self) -> dict:
        """Nested description in the shape accepted by ``NodeSpec``."""
        description: dict = {
            "children": {name: child.to_dict() for name, child in self._children.items()},
        }
        if self._any is not None:
            any_description = self._any.subtree.to_dict()
            any_description["aliases"] = list(self._any.aliases)
            any_description["pattern"] = (
                self._any.pattern.pattern if self._any.pattern is not None else None
            )
            description["any"] = any_description
        return description

    def __repr__(self) -> str:
        return f"<GrammarNode {self.name!r} children={list(self._children)!r}>"


class AnyNode:
    """Alternative segments of one node that all share a single subtree."""

    __slots__ = ("aliases", "pattern", "subtree")

    def __init__(
        self,
        aliases: tuple[str, ...],
        pattern: Union[str, re.Pattern[str], None] = None,
    ) -> None:
        self.aliases = tuple(dict.fromkeys(_check_name(a) for a in aliases))
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise InvalidArgumentError(f"invalid value pattern: {e}") from e
        self.pattern: Optional[re.Pattern[str]] = pattern
        self.subtree = GrammarNode(config.WILDCARD)

    def accepts(self, value: str) -> bool:
        """True if ``value`` may be used as a free value here."""
        if self.pattern is None or not is_valid_token(value):
            return False
        return self.pattern.search(value) is not None
