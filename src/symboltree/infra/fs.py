from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Resolves the per-user application directory and exposes local data files
as byte-chunk iterators, the same shape the network client produces, so the
ingest driver never needs to know where its bytes come from.
"""

import logging
import os
from typing import Iterator

from symboltree.domain.errors import DataSourceError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "SymbolTree"
UNIX_APP_DIR_NAME = ".symboltree"
DEFAULT_CHUNK_SIZE = 64 * 1024

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/SymbolTree
    - Linux/Mac: ~/.symboltree

    Returns:
        str: Absolute path to the application data directory.
    """
    path = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


# -----------------------------------------------------------------------------
# DATA FILE ACCESS
# -----------------------------------------------------------------------------

def iter_file_chunks(path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Stream a local data file as raw byte chunks.

    Args:
        path: Path to a newline-delimited JSON data file.
        chunk_size: Maximum number of bytes per chunk.

    Yields:
        bytes: Consecutive, non-empty chunks of the file.

    Raises:
        DataSourceError: If the file cannot be opened or read.
    """
    logger.debug(f"Opening local data file: {path}")
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                yield chunk
    except OSError as e:
        raise DataSourceError(f"Failed to read data file '{path}': {e}") from e
