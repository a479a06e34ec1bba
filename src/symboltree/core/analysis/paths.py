from __future__ import annotations

"""
Path Decomposition Helpers.

Splits composite id paths into a parent path and a leaf name. Two cut
points are honoured: the active separator and the filesystem "/", so a
synthetic separator such as "Core>" can be layered over real paths like
"Core>base/files/file.cc".
"""

from symboltree.domain.constants import PATH_SEPARATOR


def _cut_index(path: str, sep: str) -> int:
    """Index of the last separator of either kind, or -1 if there is none."""
    return max(path.rfind(sep), path.rfind(PATH_SEPARATOR))


def basename(path: str, sep: str) -> str:
    """
    Return the last component of a composite path.

    Args:
        path: Id path such as "a/b/x.cc" or "Core>a/b".
        sep: Active path separator.

    Returns:
        str: Text after the last separator, or the whole path without one.
    """
    return path[_cut_index(path, sep) + 1:]


def dirname(path: str, sep: str) -> str:
    """
    Return the parent part of a composite path.

    An empty result means the path hangs directly off the root.
    """
    return path[:max(_cut_index(path, sep), 0)]


def cuts_at_separator(path: str, sep: str) -> bool:
    """Tell whether the last cut point of the path is the synthetic separator."""
    return path.rfind(sep) > path.rfind(PATH_SEPARATOR)
