from .grammar import (
    AliasMapSpec,
    AnySpec,
    NodeSpec,
    TreeSpec,
)
from .responses import ErrorResponse

__all__ = [
    "AliasMapSpec",
    "AnySpec",
    "NodeSpec",
    "TreeSpec",
    "ErrorResponse",
]
