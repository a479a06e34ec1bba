from __future__ import annotations

"""
Unit tests for the path decomposition helpers.

Verifies cut-point selection between the active separator and "/",
and the behavior for paths without any separator.
"""

import pytest

from symboltree.core.analysis.paths import basename, cuts_at_separator, dirname


@pytest.mark.parametrize(
    "path, sep, expected_base, expected_dir",
    [
        ("a/b/x.cc", "/", "x.cc", "a/b"),
        ("x.cc", "/", "x.cc", ""),
        ("Core>a/b/x.cc", ">", "x.cc", "Core>a/b"),
        ("Core>a", ">", "a", "Core"),
        ("Core", ">", "Core", ""),
        ("a/b>c", ">", "c", "a/b"),
        ("/abs", "/", "abs", ""),
        ("", "/", "", ""),
    ],
)
def test_basename_and_dirname(path: str, sep: str, expected_base: str, expected_dir: str) -> None:
    """The later of the two separators decides the cut point."""
    assert basename(path, sep) == expected_base
    assert dirname(path, sep) == expected_dir


def test_no_separator_means_root() -> None:
    """A plain name has itself as basename and an empty (root) dirname."""
    assert basename("standalone", ">") == "standalone"
    assert dirname("standalone", ">") == ""


def test_cuts_at_separator_detects_synthetic_cut() -> None:
    """Component paths cut at '>' only when it comes after the last '/'."""
    assert cuts_at_separator("Core>a", ">") is True
    assert cuts_at_separator("Core>a/b", ">") is False
    assert cuts_at_separator("a/b", "/") is False
