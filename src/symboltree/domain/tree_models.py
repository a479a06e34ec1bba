from __future__ import annotations

"""
Symbol Tree Data Models.

Provides the node type used by the builder to represent directories,
components, files and symbols, plus the aliases describing the records of
the newline-delimited data feed.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from symboltree.domain.constants import CONTAINER_TYPES

# Raw records as decoded from the feed
FileEntry = Dict[str, Any]
MetaRecord = Dict[str, Any]

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class TreeNode:
    """
    A node of the aggregation tree.

    Attributes:
        id_path: Fully-qualified identifier, unique within a tree.
        short_name: Display label.
        type: Symbol type code for leaves. For containers, the container code
            optionally followed by the dominant child type code.
        size: Leaf size, or signed sum of descendant leaf sizes.
        child_sizes: Accumulated size per leaf type code (containers only).
        children: Child nodes.
        parent: Owning node, None for the root and for detached nodes.
    """
    id_path: str
    short_name: str
    type: str
    size: float = 0
    child_sizes: Dict[str, float] = field(default_factory=dict)
    children: List["TreeNode"] = field(default_factory=list, repr=False)
    parent: Optional["TreeNode"] = field(default=None, repr=False)

    @property
    def primary_type(self) -> str:
        """Container code or leaf type code, without the dominant suffix."""
        return self.type[:1]

    @property
    def leaf_type(self) -> str:
        """Type code this node contributes to its ancestors' breakdowns."""
        return self.type[-1:]

    @property
    def is_container(self) -> bool:
        return self.primary_type in CONTAINER_TYPES
