"""
scopetree: hierarchical authorization scopes.

- Scope / Scopes: coverage algebra over dotted permission strings
- Tree: declared grammar of legal scope paths with validated navigation
- AliasMap: symbolic scope names expanded into concrete scopes
"""

from .errors import InvalidArgumentError, InvalidScopeHierarchyError, ScopeError
from .scopes import AliasMap, Scope, Scopes
from .tree import Cursor, GrammarNode, Tree

__version__ = "0.1.0"

__all__ = [
    "AliasMap",
    "Cursor",
    "GrammarNode",
    "InvalidArgumentError",
    "InvalidScopeHierarchyError",
    "Scope",
    "ScopeError",
    "Scopes",
    "Tree",
]
