"""CLI entry point.

With no arguments the interactive REPL starts. Any remaining arguments are
treated as a single command line (``proofvault stats``) which is executed
once so the client can be scripted.
"""

import os
import shlex
import sys
from typing import List, Optional

from common.logging_config import setup_logging
from cli.commands import close_client
from cli.parser import ParseError, parse_command
from cli.repl import dispatch_command, repl_loop


def _is_failure(result: str) -> bool:
    first_line = result.split("\n", 1)[0]
    return first_line.startswith("Error") or " failed: " in first_line


def run_once(args: List[str]) -> int:
    """Execute one command line and return a process exit code."""
    try:
        cmd_obj = parse_command(shlex.join(args))
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    result = dispatch_command(cmd_obj)
    print(result)
    return 1 if _is_failure(result) else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    debug = '--debug' in args
    if debug:
        args.remove('--debug')

    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')
    logger = setup_logging('cli', log_level=log_level)

    try:
        if args:
            logger.debug(f"Running single command: {args[0]}")
            return run_once(args)
        repl_loop()
        return 0
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        close_client()


if __name__ == "__main__":
    sys.exit(main())
