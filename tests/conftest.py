from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared sample feeds and helpers to encode them as byte streams.
"""

import json
import os
import sys
from typing import Any, Callable, Dict, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_meta() -> Dict[str, Any]:
    """Metadata record for the sample feed."""
    return {"total": 1000, "components": ["Core", "UI"]}


@pytest.fixture
def sample_entries() -> List[Dict[str, Any]]:
    """
    A small but varied set of file entries.

    Structure:
    base/files/file_util.cc   (Core)  t:300, r:50
    base/files/file_path.cc   (Core)  t:120, d:-20
    ui/views/view.cc          (UI)    t:200, v:40
    java/com/google/Foo.java  (none)  m:1, m:1, x:30
    """
    return [
        {"p": "base/files/file_util.cc", "c": 0, "s": [
            {"n": "FileUtil::Read", "b": 300, "t": "t"},
            {"n": "kFileUtilTable", "b": 50, "t": "r"},
        ]},
        {"p": "base/files/file_path.cc", "c": 0, "s": [
            {"n": "FilePath::Append", "b": 120, "t": "t"},
            {"n": "g_path_cache", "b": -20, "t": "d"},
        ]},
        {"p": "ui/views/view.cc", "c": 1, "s": [
            {"n": "View::Layout", "b": 200, "t": "t"},
            {"n": "vtable for View", "b": 40, "t": "v"},
        ]},
        {"p": "java/com/google/Foo.java", "s": [
            {"n": "Foo.bar()", "b": 1, "t": "m"},
            {"n": "Foo.baz()", "b": 1, "t": "m"},
            {"n": "Foo", "b": 30, "t": "x"},
        ]},
    ]


@pytest.fixture
def encode_ndjson() -> Callable[[List[Any]], bytes]:
    """Return a helper serializing records as a newline-delimited JSON document."""
    def _encode(records: List[Any]) -> bytes:
        return "".join(json.dumps(r) + "\n" for r in records).encode("utf-8")

    return _encode


@pytest.fixture
def split_bytes() -> Callable[[bytes, int], List[bytes]]:
    """Return a helper cutting bytes into fixed-size chunks, ignoring line boundaries."""
    def _split(data: bytes, size: int) -> List[bytes]:
        return [data[i:i + size] for i in range(0, len(data), size)]

    return _split


@pytest.fixture
def sample_feed(
        sample_meta: Dict[str, Any],
        sample_entries: List[Dict[str, Any]],
        encode_ndjson: Callable[[List[Any]], bytes],
) -> bytes:
    """The sample metadata and entries encoded as one NDJSON document."""
    return encode_ndjson([sample_meta] + sample_entries)
