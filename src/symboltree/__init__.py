"""Hierarchical aggregation of binary symbol sizes."""

from symboltree.domain.constants import CURRENT_VERSION

__version__ = CURRENT_VERSION
