"""
Declared scope grammar for one application.

Example:
    def declare(api):
        accounts = api.add("accounts").any("own_account", pattern=r"^\\d+$")
        accounts.add("shops").any().add("read")

    tree = Tree("api", declare)
    tree.cursor().step("accounts").value("42").step("shops").step("*").step("read")
    # -> api.accounts.42.shops.*.read
    tree.parse("api.accounts.nope.shops")
    # -> InvalidScopeHierarchyError

The grammar is declared once and sealed; navigation never mutates it,
so one Tree can be shared freely between requests and threads.
"""

import functools
from typing import TYPE_CHECKING, Any, Callable, Optional

from scopetree import config
from scopetree.errors import InvalidArgumentError, InvalidScopeHierarchyError
from scopetree.logging.audit_logger import get_audit_logger
from scopetree.scopes.collection import Scopes
from scopetree.scopes.scope import Scope
from scopetree.tree.cursor import Cursor
from scopetree.tree.grammar import GrammarNode, _check_name

if TYPE_CHECKING:
    from scopetree.models.grammar import NodeSpec, TreeSpec


class Tree:
    """A sealed scope grammar rooted at a single literal name."""

    def __init__(
        self,
        name: str,
        build: Optional[Callable[[GrammarNode], Any]] = None,
    ) -> None:
        self.name = _check_name(name)
        self.root = GrammarNode(self.name)
        if build is not None:
            build(self.root)
        self.root.seal()

    @classmethod
    def from_spec(cls, spec: "TreeSpec") -> "Tree":
        """Build a Tree from a validated declarative description."""
        return cls(spec.root, lambda root: _declare(root, spec.grammar))

    @classmethod
    def from_dict(cls, description: dict) -> "Tree":
        """Validate a plain dict (e.g. loaded from JSON) and build a Tree from it."""
        from scopetree.models.grammar import TreeSpec

        return cls.from_spec(TreeSpec.model_validate(description))

    # ─── Navigation ──────────────────────────────────────────────────────

    def cursor(self) -> Cursor:
        """Cursor positioned on the root segment."""
        return Cursor((self.name,), (self.root,))

    def parse(self, scope: Any) -> Scope:
        """
        Validate a dotted wire string against the grammar.

        ``*`` and declared names are navigated as steps, ``(a,b)`` as a
        tuple value, and any other token as a single free value.
        """
        segments = list(Scope.wrap(scope))
        try:
            if segments[0] != self.name:
                raise InvalidScopeHierarchyError(segments[0], [], "unknown root")
            cursor = self.cursor()
            for segment in segments[1:]:
                if segment == config.WILDCARD or cursor.has_step(segment):
                    cursor = cursor.step(segment)
                elif not cursor.accepts_values():
                    # No value slot here, so report the unknown literal
                    cursor = cursor.step(segment)
                elif segment.startswith(config.TUPLE_OPEN) and segment.endswith(config.TUPLE_CLOSE):
                    inner = segment[len(config.TUPLE_OPEN):-len(config.TUPLE_CLOSE)]
                    cursor = cursor.value(*inner.split(config.TUPLE_SEPARATOR))
                else:
                    cursor = cursor.value(segment)
        except InvalidScopeHierarchyError as e:
            get_audit_logger().log_hierarchy_rejected(
                tree=self.name,
                key=e.key,
                path=e.path,
                reason=e.reason,
            )
            e.audited = True
            raise

        result = cursor.to_scope()
        get_audit_logger().log_scope_parsed(tree=self.name, scope=str(result))
        return result

    def validate(self, scope: Any) -> bool:
        try:
            self.parse(scope)
        except (InvalidScopeHierarchyError, InvalidArgumentError):
            return False
        return True

    def __contains__(self, scope: Any) -> bool:
        return self.validate(scope)

    # ─── Introspection ───────────────────────────────────────────────────

    @functools.cached_property
    def _declared(self) -> Scopes:
        found: list[tuple[str, ...]] = []

        def visit(node: GrammarNode, path: tuple[str, ...]) -> None:
            found.append(path)
            for name, child in node.children.items():
                visit(child, path + (name,))
            if node.any_node is not None:
                visit(node.any_node.subtree, path + (config.WILDCARD,))

        visit(self.root, (self.name,))
        return Scopes([Scope(p) for p in found])

    def scopes(self) -> Scopes:
        """Every declared path, with any-node positions rendered as ``*``."""
        return self._declared

    def to_dict(self) -> dict:
        """Description in the shape accepted by ``TreeSpec``."""
        return {"root": self.name, "grammar": self.root.to_dict()}

    def __repr__(self) -> str:
        return f"<Tree {self.name!r}>"


def _declare(node: GrammarNode, spec: "NodeSpec") -> None:
    for name, child_spec in spec.children.items():
        _declare(node.add(name), child_spec)
    if spec.any is not None:
        subtree = node.any(*spec.any.aliases, pattern=spec.any.pattern)
        _declare(subtree, spec.any)
