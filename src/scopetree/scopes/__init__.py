from .scope import Scope
from .collection import Scopes
from .alias_map import AliasMap

__all__ = ["Scope", "Scopes", "AliasMap"]
