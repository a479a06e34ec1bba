from __future__ import annotations

"""
Network Communication Infrastructure.

Exposes the byte sources used by the ingest driver. Remote locations are
streamed over HTTP, anything else is read from the local filesystem.
"""

from typing import Iterator

from symboltree.infra.fs import iter_file_chunks
from symboltree.infra.network.common import is_remote_location
from symboltree.infra.network.data_client import iter_remote_chunks


def open_source(location: str) -> Iterator[bytes]:
    """Return a lazy byte-chunk iterator for a URL or a local path."""
    if is_remote_location(location):
        return iter_remote_chunks(location)
    return iter_file_chunks(location)


__all__ = [
    "open_source",
    "iter_remote_chunks",
    "iter_file_chunks",
    "is_remote_location",
]
