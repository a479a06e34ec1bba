from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict

from symboltree.domain.constants import ALL_SYMBOL_TYPES, GROUP_BY_SEPARATORS, SYMBOL_TYPE_NAMES

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the symboltree CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="symboltree",
        description="Aggregate a binary size data file into a browsable symbol tree.",
    )

    # --- Input ---
    p.add_argument(
        "data",
        nargs="?",
        default=None,
        help="Path or http(s) URL of the newline-delimited JSON data file.",
    )

    # --- Tree shape ---
    p.add_argument(
        "--group-by",
        dest="group_by",
        choices=sorted(GROUP_BY_SEPARATORS),
        default=None,
        help="Group files by source path (default) or by component.",
    )
    p.add_argument(
        "--method-count",
        action="store_true",
        help="Count dex methods instead of summing bytes.",
    )
    p.add_argument(
        "--types",
        dest="types",
        default=None,
        help=(
            f"Symbol type codes to include, e.g. 'tdr' (default: {ALL_SYMBOL_TYPES}). "
            f"Codes: {_describe_types()}."
        ),
    )
    p.add_argument(
        "--collapse",
        dest="collapse_chains",
        action="store_true",
        help="Merge single-child chains such as java/com/google into one node.",
    )

    # --- Streaming ---
    p.add_argument(
        "--interval",
        dest="snapshot_interval",
        type=float,
        default=None,
        help="Seconds between progress reports while streaming.",
    )

    # --- Output ---
    p.add_argument(
        "--depth",
        type=int,
        default=3,
        help="Levels below the root to print (default: 3).",
    )
    p.add_argument(
        "--top",
        type=int,
        default=None,
        help="Maximum children listed per node.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the final snapshot as JSON.",
    )

    # --- Configuration and diagnostics ---
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON configuration file to load instead of the user default.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore any saved configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--log-file",
        nargs="?",
        const="",
        default=None,
        help="Also write logs to a rotating file (default location if no path is given).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p


def _describe_types() -> str:
    return ", ".join(f"{code}={name}" for code, name in SYMBOL_TYPE_NAMES.items())


# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Flags that were not given produce no override, so saved configuration
    values survive.
    """
    overrides: Dict[str, Any] = {}

    if args.group_by:
        overrides["group_by"] = args.group_by
    if args.method_count:
        overrides["method_count"] = True
    if args.types is not None:
        overrides["types"] = args.types
    if args.collapse_chains:
        overrides["collapse_chains"] = True
    if args.snapshot_interval is not None:
        overrides["snapshot_interval"] = args.snapshot_interval

    return overrides
