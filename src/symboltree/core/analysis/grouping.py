from __future__ import annotations

"""
Grouping Keys and Symbol Filters.

Translates a validated build configuration into the callables the tree
builder needs: the function mapping file entries to id paths, the type
filter and the separator matching the grouping key.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from symboltree.core.analysis.tree_builder import FilterTest, PathGetter, TreeBuilder
from symboltree.domain.constants import (
    ALL_SYMBOL_TYPES,
    COMPONENT_SEPARATOR,
    GROUP_BY_COMPONENT,
    GROUP_BY_SEPARATORS,
    GROUP_BY_SOURCE_PATH,
    KEY_COMPONENT_INDEX,
    KEY_SOURCE_PATH,
    METHOD_COUNT_TYPE,
    NO_COMPONENT_LABEL,
    PATH_SEPARATOR,
)
from symboltree.domain.errors import ConfigurationError
from symboltree.domain.tree_models import FileEntry, TreeNode

logger = logging.getLogger(__name__)


class ComponentTable:
    """
    Component names referenced by index from file entries.

    Created empty and filled once the metadata record of the feed arrives,
    so path getters can be wired before the names are known.
    """

    def __init__(self, names: Optional[Iterable[str]] = None) -> None:
        self._names: List[str] = list(names or [])

    def load(self, names: Optional[Iterable[str]]) -> None:
        self._names = [str(n) for n in (names or [])]

    def lookup(self, index: Any) -> Optional[str]:
        """Return the component at index, or None when absent or invalid."""
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self._names):
            return self._names[index] or None
        return None

    def __len__(self) -> int:
        return len(self._names)


# -----------------------------------------------------------------------------
# PATH GETTERS
# -----------------------------------------------------------------------------

def source_path_key(entry: FileEntry) -> str:
    """Group a file by its own source path."""
    return str(entry.get(KEY_SOURCE_PATH) or "")


def make_component_key(components: ComponentTable) -> PathGetter:
    """Group a file under its component: "<component>><source path>"."""
    def component_key(entry: FileEntry) -> str:
        component = components.lookup(entry.get(KEY_COMPONENT_INDEX))
        return (component or NO_COMPONENT_LABEL) + COMPONENT_SEPARATOR + source_path_key(entry)

    return component_key


def make_path_getter(group_by: str, components: ComponentTable) -> PathGetter:
    """
    Resolve the grouping function for a grouping key.

    Raises:
        ConfigurationError: If the grouping key is unknown.
    """
    if group_by == GROUP_BY_SOURCE_PATH:
        return source_path_key
    if group_by == GROUP_BY_COMPONENT:
        return make_component_key(components)
    raise ConfigurationError(f"Unknown grouping key: {group_by!r}")


# -----------------------------------------------------------------------------
# FILTERS
# -----------------------------------------------------------------------------

def resolve_type_filter(types: Optional[Iterable[str]], method_count: bool) -> Set[str]:
    """
    Compute the set of symbol types to keep.

    Count mode only counts methods. Otherwise an explicit type set replaces
    the default of every known type.
    """
    if method_count:
        return {METHOD_COUNT_TYPE}
    if types is None:
        return set(ALL_SYMBOL_TYPES)
    return set(types)


def make_type_filter(allowed: Set[str]) -> FilterTest:
    def type_filter(node: TreeNode) -> bool:
        return node.type in allowed

    return type_filter


# -----------------------------------------------------------------------------
# BUILDER FACTORY
# -----------------------------------------------------------------------------

def create_builder(config: Dict[str, Any], components: ComponentTable) -> TreeBuilder:
    """
    Instantiate a fresh builder for a validated configuration.

    Args:
        config: Clean configuration (see validate_config).
        components: Table the component grouping key will read from.

    Returns:
        TreeBuilder: A builder with its own isolated caches.
    """
    group_by = config.get("group_by", GROUP_BY_SOURCE_PATH)
    method_count = bool(config.get("method_count", False))
    allowed = resolve_type_filter(config.get("types"), method_count)

    logger.debug(
        f"Creating builder: group_by={group_by}, method_count={method_count}, "
        f"types={''.join(sorted(allowed))}"
    )
    return TreeBuilder(
        get_path=make_path_getter(group_by, components),
        filter_test=make_type_filter(allowed),
        sep=GROUP_BY_SEPARATORS.get(group_by, PATH_SEPARATOR),
        method_count_mode=method_count,
        collapse_chains=bool(config.get("collapse_chains", False)),
    )
