from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merging
(defaults, saved file, flags), the streamed build with progress reporting,
and rendering of the final tree.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from symboltree.core.analysis.tree_renderer import render_tree
from symboltree.core.pipeline.engine import build_from_location
from symboltree.core.pipeline.validator import validate_config
from symboltree.domain.config import get_default_config, load_config
from symboltree.domain.errors import ConfigurationError
from symboltree.domain.snapshot_models import TreeSnapshot
from symboltree.infra.logging import LoggingConfig, configure_logging, get_default_log_path, get_logger
from symboltree.infra.network.common import is_remote_location
from symboltree.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 ingest failure, 2 bad input,
        130 interrupted).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_file = args.log_file
    if log_file == "":
        log_file = get_default_log_path()
    configure_logging(LoggingConfig(
        level="DEBUG" if args.debug else "INFO",
        console=True,
        log_file=log_file,
    ))

    # 1. Resolve configuration hierarchy
    if args.use_defaults:
        base_conf = get_default_config()
    else:
        base_conf = load_config(args.config_file)

    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))

    try:
        clean_conf, warnings = validate_config(raw_conf, strict=True)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 2. Pre-flight input verification
    if not args.data:
        parser.print_usage(sys.stderr)
        print("ERROR: A data file or URL is required.", file=sys.stderr)
        return 2

    if not is_remote_location(args.data) and not os.path.isfile(args.data):
        msg = f"Data file does not exist: {args.data}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    # 3. Streamed build
    try:
        final = build_from_location(args.data, clean_conf, on_snapshot=_report_progress)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130

    if final is None:
        return 1

    # 4. Output rendering
    if args.json_output:
        print(json.dumps(asdict(final), ensure_ascii=False, indent=2))
    else:
        _print_tree(final, args.depth, args.top)

    return 0 if final.ok else 1

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge known, non-None override values into the base config."""
    out = dict(base)
    for k, v in overrides.items():
        if k in out and v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _report_progress(snapshot: TreeSnapshot) -> None:
    """Log intermediate progress; terminal snapshots are printed by main."""
    if not snapshot.is_final:
        logger.info(f"Loading... {snapshot.percent:.0%}")


def _print_tree(snapshot: TreeSnapshot, depth: int, top: Optional[int]) -> None:
    if not snapshot.ok:
        print(f"ERROR: {snapshot.error}", file=sys.stderr)
        if snapshot.root.get("children"):
            print("Partial result:", file=sys.stderr)

    for line in render_tree(snapshot.root, max_depth=depth, max_children=top):
        print(line)


if __name__ == "__main__":
    sys.exit(main())
