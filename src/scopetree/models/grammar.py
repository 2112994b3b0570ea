"""
Strict declarative descriptions of grammars and alias tables.

Design principles:
- Strict string fields: No implicit type coercion
- extra="forbid": Reject unknown fields
- Segment names are checked against the wire format before any Tree is built
- Value patterns must compile
"""

import re
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scopetree.tree.grammar import is_valid_token


# ─── Constrained Types ───────────────────────────────────────────────────

SegmentName = Annotated[str, Field(strict=True, min_length=1, max_length=64)]
ScopeString = Annotated[str, Field(strict=True, min_length=1, max_length=1024)]


def _check_segment(v: str) -> str:
    if not is_valid_token(v):
        raise ValueError(f"invalid segment name: {v!r}")
    return v


# ─── Grammar ─────────────────────────────────────────────────────────────

class NodeSpec(BaseModel):
    """
    One grammar node.

    - children: literal child name -> node
    - any: optional any-node whose own children form the shared subtree
    """

    model_config = ConfigDict(extra="forbid")

    children: dict[SegmentName, "NodeSpec"] = Field(default_factory=dict)
    any: Optional["AnySpec"] = None

    @field_validator("children")
    @classmethod
    def validate_child_names(cls, v: dict[str, "NodeSpec"]) -> dict[str, "NodeSpec"]:
        for name in v:
            _check_segment(name)
        return v


class AnySpec(NodeSpec):
    """Any-node: aliases and an optional value pattern sharing one subtree."""

    aliases: list[SegmentName] = Field(default_factory=list, max_length=64)
    pattern: Optional[Annotated[str, Field(strict=True, min_length=1, max_length=256)]] = None

    @field_validator("aliases")
    @classmethod
    def validate_aliases(cls, v: list[str]) -> list[str]:
        for alias in v:
            _check_segment(alias)
        if len(set(v)) != len(v):
            raise ValueError("aliases must be unique")
        return v

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid pattern: {e}")
        return v


NodeSpec.model_rebuild()
AnySpec.model_rebuild()


class TreeSpec(BaseModel):
    """A whole grammar: root segment name plus the root node's description."""

    model_config = ConfigDict(extra="forbid")

    root: SegmentName
    grammar: NodeSpec = Field(default_factory=NodeSpec)

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return _check_segment(v)


# ─── Alias Tables ────────────────────────────────────────────────────────

class AliasMapSpec(BaseModel):
    """Alias key -> list of concrete scope strings."""

    model_config = ConfigDict(extra="forbid")

    mapping: dict[ScopeString, list[ScopeString]] = Field(
        default_factory=dict,
        max_length=256,
    )
