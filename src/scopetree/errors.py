"""
Error types raised by scope parsing, comparison and grammar navigation.

Design principles:
- One error kind for every grammar-navigation failure
- Errors carry the offending key and the already-validated prefix
- Bad arguments are a separate kind, never mixed with hierarchy errors
"""

from typing import Sequence


class ScopeError(Exception):
    """Base class for all scopetree errors."""


class InvalidScopeHierarchyError(ScopeError):
    """
    A navigation step is not allowed by the declared grammar.

    Raised for unknown literals, wildcards with nothing to expand,
    intersection misses after a wildcard, free values where no
    constraint is declared, and values failing their constraint.
    """

    def __init__(self, key: object, path: Sequence[str], reason: str = "") -> None:
        self.key = key
        self.path = list(path)
        self.reason = reason
        # Set once the rejection has been written to the audit log
        self.audited = False
        message = f"invalid scope hierarchy: {key!r} after {'.'.join(self.path)!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidArgumentError(ScopeError, TypeError):
    """Input that cannot be turned into a scope, or a misuse of the declaration API."""
