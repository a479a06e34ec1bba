from __future__ import annotations

"""
Symbol Tree Builder.

Assembles the aggregation tree from file entries, one entry at a time.
Sizes and per-type breakdowns are propagated to every ancestor as soon as
a node is attached, so the in-progress tree is consistent at any moment
and can be snapshotted while the feed is still streaming.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from symboltree.core.analysis.paths import basename, cuts_at_separator, dirname
from symboltree.domain.constants import (
    ALL_SYMBOL_TYPES,
    COMPONENT_TYPE,
    DIRECTORY_TYPE,
    FILE_TYPE,
    KEY_FILE_SYMBOLS,
    KEY_SIZE,
    KEY_SOURCE_PATH,
    KEY_SYMBOL_NAME,
    KEY_TYPE,
    NO_PATH_LABEL,
    OTHER_TYPE,
    PATH_SEPARATOR,
    SYMBOL_SEPARATOR,
)
from symboltree.domain.errors import ConfigurationError, SymbolTreeError
from symboltree.domain.tree_models import FileEntry, TreeNode

logger = logging.getLogger(__name__)

PathGetter = Callable[[FileEntry], str]
FilterTest = Callable[[TreeNode], bool]

_KNOWN_TYPES = frozenset(ALL_SYMBOL_TYPES)

# -----------------------------------------------------------------------------
# NODE PRIMITIVES
# -----------------------------------------------------------------------------

def create_node(
        id_path: str,
        type: str,
        sep: str,
        short_name: Optional[str] = None,
        size: float = 0,
) -> TreeNode:
    """
    Make a detached node, deriving the short name from the id path if needed.
    """
    if short_name is None:
        short_name = basename(id_path, sep)
    return TreeNode(id_path=id_path, short_name=short_name, type=type, size=size)


def attach_to_parent(node: TreeNode, parent: TreeNode) -> None:
    """
    Link a node to a parent and update every ancestor in one upward walk.

    Each ancestor receives the node's size and its per-type breakdown, then
    re-derives its dominant child type.

    Args:
        node: Detached node to link.
        parent: New owner.
    """
    parent.children.append(node)
    node.parent = parent

    if node.is_container or node.child_sizes:
        contributions = dict(node.child_sizes)
    else:
        contributions = {node.leaf_type: node.size}

    _propagate(parent, contributions, node.size)


def merge_into_leaf(leaf: TreeNode, code: str, size: float) -> None:
    """
    Add another symbol of the same name to an existing leaf.

    The leaf keeps a per-type breakdown once it holds more than one symbol
    and takes the dominant code as its type. Ancestors receive the added
    size under the incoming code.
    """
    if not leaf.child_sizes:
        leaf.child_sizes[leaf.type] = leaf.size
    leaf.child_sizes[code] = leaf.child_sizes.get(code, 0) + size
    leaf.size += size
    leaf.type = dominant_type(leaf.child_sizes)

    if leaf.parent is not None:
        _propagate(leaf.parent, {code: size}, size)


def _propagate(start: TreeNode, contributions: Dict[str, float], size: float) -> None:
    ancestor: Optional[TreeNode] = start
    while ancestor is not None:
        for code, amount in contributions.items():
            ancestor.child_sizes[code] = ancestor.child_sizes.get(code, 0) + amount
        ancestor.size += size
        ancestor.type = ancestor.primary_type + dominant_type(ancestor.child_sizes)
        ancestor = ancestor.parent


def dominant_type(child_sizes: Dict[str, float]) -> str:
    """
    Return the type code with the largest accumulated size.

    Ties go to the code appearing first in the canonical type ordering, so
    the result does not depend on the order entries were added in.
    """
    best = ""
    for code in sorted(child_sizes, key=_type_rank):
        if not best or child_sizes[code] > child_sizes[best]:
            best = code
    return best


def _type_rank(code: str) -> Tuple[int, str]:
    index = ALL_SYMBOL_TYPES.find(code)
    return (index if index >= 0 else len(ALL_SYMBOL_TYPES), code)


# -----------------------------------------------------------------------------
# TREE TRAVERSAL AND FINALIZATION
# -----------------------------------------------------------------------------

def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Iterate all nodes of the tree rooted at root (depth-first, pre-order)."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def sort_tree(root: TreeNode) -> None:
    """
    Sort every children list by descending absolute size.

    Size decreases sort as prominently as increases. Entries of equal
    magnitude are ordered by id path, then by type (a file and a directory
    may share a path), so the result does not depend on the order in which
    entries were added.
    """
    for node in iter_nodes(root):
        node.children.sort(key=lambda child: (-abs(child.size), child.id_path, child.type))


def collapse_single_child_chains(root: TreeNode, sep: str) -> None:
    """
    Merge containers whose only child has exactly the same type.

    Turns "java" -> "com" -> "google" into a single "java/com/google" node.
    The root itself is never merged. Running this twice is a no-op.
    """
    stack = list(root.children)
    while stack:
        node = stack.pop()
        while len(node.children) == 1 and node.children[0].type == node.type:
            child = node.children[0]
            # size and child_sizes are identical for a sole child
            node.short_name = node.short_name + sep + child.short_name
            node.id_path = child.id_path
            node.children = child.children
            for grandchild in node.children:
                grandchild.parent = node
        stack.extend(node.children)


def tree_to_dict(root: TreeNode) -> Dict[str, Any]:
    """
    Produce a detached, JSON-serialisable copy of the tree.

    The copy holds no parent references and shares no mutable state with
    the builder, so it can be handed to another thread safely.
    """
    out = _node_to_dict(root)
    stack: List[Tuple[TreeNode, Dict[str, Any]]] = [(root, out)]
    while stack:
        node, data = stack.pop()
        for child in node.children:
            child_data = _node_to_dict(child)
            data["children"].append(child_data)
            stack.append((child, child_data))
    return out


def _node_to_dict(node: TreeNode) -> Dict[str, Any]:
    return {
        "id_path": node.id_path,
        "short_name": node.short_name,
        "type": node.type,
        "size": node.size,
        "child_sizes": dict(node.child_sizes),
        "children": [],
    }


# -----------------------------------------------------------------------------
# BUILDER
# -----------------------------------------------------------------------------

class TreeBuilder:
    """
    Build a tree from file entries.

    Add each entry with `add_file_entry()`, then call `build()` to finalize
    the tree and obtain the root node. The in-progress tree is available at
    any time through `root_node`.
    """

    def __init__(
            self,
            get_path: Optional[PathGetter],
            filter_test: Optional[FilterTest] = None,
            sep: str = PATH_SEPARATOR,
            method_count_mode: bool = False,
            collapse_chains: bool = False,
    ) -> None:
        """
        Args:
            get_path: Maps a file entry to the id path of its file node.
            filter_test: Decides whether a symbol node is attached. Symbols
                failing the test never reach the tree.
            sep: Separator used to derive parent paths.
            method_count_mode: Count symbols (size 1 each) instead of bytes.
            collapse_chains: Merge single-child chains when finalizing.

        Raises:
            ConfigurationError: If get_path is missing.
        """
        if get_path is None:
            raise ConfigurationError("Missing get_path: a grouping function is required.")

        self._get_path = get_path
        self._filter_test = filter_test or (lambda _node: True)
        self._sep = sep or PATH_SEPARATOR
        self._method_count_mode = method_count_mode
        self._collapse_chains = collapse_chains
        self._finalized = False

        self.root_node = create_node(self._sep, DIRECTORY_TYPE, self._sep, short_name=self._sep)
        self._parents: Dict[str, TreeNode] = {}
        self._files: Dict[str, TreeNode] = {}
        self._symbols: Dict[str, TreeNode] = {}

    @property
    def sep(self) -> str:
        return self._sep

    def add_file_entry(self, entry: FileEntry) -> None:
        """
        Create the file node for an entry, attach its surviving symbols and
        link it, through any missing ancestors, to the root.

        Args:
            entry: File record with keys "p", optional "c", and "s".
        """
        if self._finalized:
            raise SymbolTreeError("Cannot add entries to a finalized tree.")

        id_path = self._get_path(entry)
        file_node = self._files.get(id_path)
        is_new = file_node is None
        if file_node is None:
            source_path = str(entry.get(KEY_SOURCE_PATH) or "")
            file_node = create_node(
                id_path, FILE_TYPE, self._sep, short_name=basename(source_path, self._sep)
            )

        for symbol in entry.get(KEY_FILE_SYMBOLS) or []:
            symbol_node = self._make_symbol_node(id_path, symbol)
            if not self._filter_test(symbol_node):
                continue
            # Same-named symbols of one file share a leaf
            existing = self._symbols.get(symbol_node.id_path)
            if existing is not None:
                merge_into_leaf(existing, symbol_node.type, symbol_node.size)
            else:
                self._symbols[symbol_node.id_path] = symbol_node
                attach_to_parent(symbol_node, file_node)

        # A file whose symbols were all filtered out leaves no trace
        if not is_new or not file_node.children:
            return

        self._files[id_path] = file_node
        orphan = file_node
        while orphan.parent is None and orphan is not self.root_node:
            orphan = self._get_or_make_parent_node(orphan)

    def build(self) -> TreeNode:
        """
        Finalize the tree and return the root node.

        Children are sorted by descending absolute size. With chain
        collapsing enabled, single-child chains are merged first.
        """
        if not self._finalized:
            if self._collapse_chains:
                collapse_single_child_chains(self.root_node, self._sep)
            sort_tree(self.root_node)
            self._finalized = True
            logger.debug(
                f"Tree finalized: size={self.root_node.size}, "
                f"top-level nodes={len(self.root_node.children)}"
            )
        return self.root_node

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _make_symbol_node(self, file_id_path: str, symbol: Dict[str, Any]) -> TreeNode:
        name = str(symbol.get(KEY_SYMBOL_NAME, ""))
        size = 1 if self._method_count_mode else symbol.get(KEY_SIZE, 0)
        code = symbol.get(KEY_TYPE)
        if code not in _KNOWN_TYPES:
            code = OTHER_TYPE
        return create_node(
            file_id_path + SYMBOL_SEPARATOR + name,
            code,
            self._sep,
            short_name=name,
            size=size,
        )

    def _get_or_make_parent_node(self, node: TreeNode) -> TreeNode:
        """
        Attach a node to its parent container, creating and caching the
        container on first use, and return the parent.
        """
        if node.id_path == "":
            parent_path = NO_PATH_LABEL
        else:
            parent_path = dirname(node.id_path, self._sep)

        if parent_path == "":
            parent = self.root_node
        else:
            parent = self._parents.get(parent_path)
            if parent is None:
                use_component_type = cuts_at_separator(node.id_path, self._sep)
                parent = create_node(
                    parent_path,
                    COMPONENT_TYPE if use_component_type else DIRECTORY_TYPE,
                    self._sep,
                )
                self._parents[parent_path] = parent

        attach_to_parent(node, parent)
        return parent
