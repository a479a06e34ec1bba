from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration sources (CLI flags, JSON files,
callers) and the tree builder. Coerces loosely typed values, injects
defaults and reports every correction as a warning.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from symboltree.domain.config import get_default_config
from symboltree.domain.constants import ALL_SYMBOL_TYPES, GROUP_BY_SEPARATORS
from symboltree.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"true", "1", "yes", "y", "on"}
_FALSE_STRINGS = {"false", "0", "no", "n", "off", ""}

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a build configuration.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: Raise ConfigurationError instead of falling back to defaults.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
        the list of warnings produced while normalizing it.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise ConfigurationError(msg)
        warnings.append(f"{msg} Using defaults.")
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    def reject(key: str, msg: str) -> None:
        if strict:
            raise ConfigurationError(msg)
        warnings.append(f"{msg} Using default.")
        merged[key] = defaults[key]

    # 1. Grouping key
    group_by = str(merged["group_by"]).strip().lower()
    if group_by in GROUP_BY_SEPARATORS:
        merged["group_by"] = group_by
    else:
        reject("group_by", f"Unknown group_by '{merged['group_by']}'.")

    # 2. Boolean flags
    for key in ("method_count", "collapse_chains"):
        value = merged[key]
        if isinstance(value, bool):
            continue
        coerced = _coerce_bool(value)
        if coerced is None:
            reject(key, f"Invalid boolean for '{key}': {value!r}.")
        else:
            warnings.append(f"Coerced '{key}' to {coerced}.")
            merged[key] = coerced

    # 3. Type filter (replaced wholesale, never merged with the default)
    types = _normalize_types(merged["types"])
    if types is None:
        reject("types", f"Invalid type filter: {merged['types']!r}.")
    else:
        unknown = [t for t in types if t not in ALL_SYMBOL_TYPES]
        if unknown:
            warnings.append(f"Unknown symbol types will never match: {''.join(unknown)}.")
        merged["types"] = types

    # 4. Snapshot interval
    try:
        interval = float(merged["snapshot_interval"])
        if interval < 0:
            raise ValueError(interval)
        merged["snapshot_interval"] = interval
    except (TypeError, ValueError):
        reject("snapshot_interval", f"Invalid snapshot_interval: {merged['snapshot_interval']!r}.")

    for warning in warnings:
        logger.debug(f"Config normalization: {warning}")

    return merged, warnings


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _coerce_bool(value: Any) -> Optional[bool]:
    """Map common textual and numeric spellings to a bool, None if unknown."""
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def _normalize_types(value: Any) -> Optional[List[str]]:
    """
    Turn a type filter into a list of unique single-character codes.

    Accepts "tdr", "t,d,r" or an iterable of codes. Returns None when the
    value cannot be interpreted.
    """
    if isinstance(value, str):
        parts = value.split(",") if "," in value else list(value)
        codes = [p.strip() for p in parts if p.strip()]
    elif isinstance(value, (list, tuple, set, frozenset)):
        codes = [str(p).strip() for p in value]
    else:
        return None

    if any(len(code) != 1 for code in codes):
        return None

    out: List[str] = []
    for code in codes:
        if code not in out:
            out.append(code)
    return out
