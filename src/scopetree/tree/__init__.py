from .grammar import AnyNode, GrammarNode
from .cursor import Cursor
from .tree import Tree

__all__ = ["AnyNode", "GrammarNode", "Cursor", "Tree"]
