from __future__ import annotations

"""
Tree Renderer.

Converts a snapshot tree into an indented ASCII listing for terminals and
log previews. Works on the detached dictionary form, never on live nodes.
"""

from typing import Any, Dict, List, Optional


def render_tree(
        root: Dict[str, Any],
        max_depth: Optional[int] = None,
        max_children: Optional[int] = None,
) -> List[str]:
    """
    Render a snapshot tree as text lines.

    Args:
        root: Tree in the form produced by tree_to_dict.
        max_depth: Deepest level to print below the root. None prints all.
        max_children: Maximum children listed per node; the rest are
            summarized on a single line.

    Returns:
        List[str]: Visual lines of the tree, root first.
    """
    lines = [_label(root)]
    _render_children(root, lines, "", 1, max_depth, max_children)
    return lines


def _render_children(
        node: Dict[str, Any],
        lines: List[str],
        prefix: str,
        depth: int,
        max_depth: Optional[int],
        max_children: Optional[int],
) -> None:
    if max_depth is not None and depth > max_depth:
        return

    children = node.get("children", [])
    shown = children if max_children is None else children[:max_children]
    hidden = len(children) - len(shown)

    for i, child in enumerate(shown):
        is_last = i == len(shown) - 1 and hidden == 0
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{_label(child)}")

        new_prefix = prefix + ("    " if is_last else "│   ")
        _render_children(child, lines, new_prefix, depth + 1, max_depth, max_children)

    if hidden > 0:
        lines.append(f"{prefix}└── ... {hidden} more")


def _label(node: Dict[str, Any]) -> str:
    size = node.get("size", 0)
    size_text = f"{size:,}" if isinstance(size, int) else f"{size:,.2f}"
    return f"{node.get('short_name', '')} [{node.get('type', '')}] {size_text}"
