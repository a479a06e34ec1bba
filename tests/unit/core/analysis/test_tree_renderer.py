from __future__ import annotations

"""
Unit tests for the ASCII tree renderer.
"""

from typing import Any, Dict

from symboltree.core.analysis.tree_renderer import render_tree


def _node(name: str, size: Any, type: str = "Dt", children: Any = None) -> Dict[str, Any]:
    return {"short_name": name, "type": type, "size": size, "children": children or []}


def test_render_full_tree() -> None:
    tree = _node("/", 1500, children=[
        _node("base", 1200, children=[_node("a.cc", 1200, "Ft")]),
        _node("ui", 300),
    ])

    assert render_tree(tree) == [
        "/ [Dt] 1,500",
        "├── base [Dt] 1,200",
        "│   └── a.cc [Ft] 1,200",
        "└── ui [Dt] 300",
    ]


def test_render_respects_depth_limit() -> None:
    tree = _node("/", 10, children=[_node("a", 10, children=[_node("b", 10)])])

    lines = render_tree(tree, max_depth=1)

    assert lines == ["/ [Dt] 10", "└── a [Dt] 10"]


def test_render_summarizes_hidden_children() -> None:
    tree = _node("/", 6, children=[_node(str(i), 2) for i in range(3)])

    lines = render_tree(tree, max_children=1)

    assert lines == ["/ [Dt] 6", "├── 0 [Dt] 2", "└── ... 2 more"]


def test_render_float_and_negative_sizes() -> None:
    tree = _node("/", -2.5, children=[_node("x", -2.5, "tm")])

    assert render_tree(tree) == ["/ [Dt] -2.50", "└── x [tm] -2.50"]
