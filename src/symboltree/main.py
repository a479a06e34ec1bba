from __future__ import annotations

"""
Main Entry Point and Global Supervisor.

Installs a global exception hook so that fatal crashes are logged with
their traceback before the process exits, then hands control to the CLI.
"""

import logging
import sys
import traceback
from typing import Any


def global_exception_handler(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """
    Trap unhandled exceptions, log them and terminate with status 1.

    Args:
        exctype: Exception class.
        value: Exception instance.
        tb: Traceback object.
    """
    stack_trace = "".join(traceback.format_exception(exctype, value, tb))

    logger = logging.getLogger("symboltree.supervisor")
    logger.critical(f"FATAL EXCEPTION DETECTED: {value}\n{stack_trace}")

    print("\n" + "=" * 80, file=sys.stderr)
    print("CRITICAL ERROR (SYMBOLTREE)", file=sys.stderr)
    print("=" * 80, file=sys.stderr)
    print(stack_trace, file=sys.stderr)
    sys.exit(1)


def main() -> int:
    """Run the CLI under the global supervisor."""
    sys.excepthook = global_exception_handler

    from symboltree.interface.cli.app import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
