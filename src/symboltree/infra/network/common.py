from __future__ import annotations

from symboltree.domain.constants import CURRENT_VERSION

USER_AGENT = f"SymbolTree-Client/{CURRENT_VERSION}"
DEFAULT_TIMEOUT = 10
CHUNK_SIZE = 8192

REMOTE_SCHEMES = ("http://", "https://")


def is_remote_location(location: str) -> bool:
    """Tell whether a data location must be fetched over HTTP."""
    return location.lower().startswith(REMOTE_SCHEMES)
