from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the symbol type vocabulary, container type codes, record keys
of the newline-delimited data format and the defaults shared by the
builder, the ingest driver and the interfaces.
"""

from typing import Dict

CURRENT_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# SYMBOL TYPES
# -----------------------------------------------------------------------------

# Canonical ordering of every known leaf type code. Also used to break ties
# when two types accumulate exactly the same size inside a container.
ALL_SYMBOL_TYPES = "bdrtv*xmpPo"

OTHER_TYPE = "o"
METHOD_COUNT_TYPE = "m"

SYMBOL_TYPE_NAMES: Dict[str, str] = {
    "b": ".bss",
    "d": ".data and .data.*",
    "r": ".rodata",
    "t": ".text",
    "v": "Vtable entry",
    "*": "Generated symbols (typeinfo, thunks, etc)",
    "x": "Dex non-method entries",
    "m": "Dex methods",
    "p": "Locale pak entries",
    "P": "Non-locale pak entries",
    "o": "Other entries",
}

# -----------------------------------------------------------------------------
# CONTAINER TYPES
# -----------------------------------------------------------------------------

DIRECTORY_TYPE = "D"
COMPONENT_TYPE = "C"
FILE_TYPE = "F"
CONTAINER_TYPES = frozenset({DIRECTORY_TYPE, COMPONENT_TYPE, FILE_TYPE})

# -----------------------------------------------------------------------------
# PATHS AND GROUPING
# -----------------------------------------------------------------------------

PATH_SEPARATOR = "/"
COMPONENT_SEPARATOR = ">"
SYMBOL_SEPARATOR = ":"

NO_PATH_LABEL = "(No path)"
NO_COMPONENT_LABEL = "(No component)"

GROUP_BY_SOURCE_PATH = "source_path"
GROUP_BY_COMPONENT = "component"

GROUP_BY_SEPARATORS: Dict[str, str] = {
    GROUP_BY_SOURCE_PATH: PATH_SEPARATOR,
    GROUP_BY_COMPONENT: COMPONENT_SEPARATOR,
}

# -----------------------------------------------------------------------------
# DATA FILE KEYS (abbreviated to keep the feed small)
# -----------------------------------------------------------------------------

KEY_SOURCE_PATH = "p"
KEY_COMPONENT_INDEX = "c"
KEY_FILE_SYMBOLS = "s"
KEY_SYMBOL_NAME = "n"
KEY_SIZE = "b"
KEY_TYPE = "t"

META_TOTAL = "total"
META_COMPONENTS = "components"

# -----------------------------------------------------------------------------
# STREAMING
# -----------------------------------------------------------------------------

DEFAULT_SNAPSHOT_INTERVAL = 5.0
MIN_PROGRESS = 0.1
